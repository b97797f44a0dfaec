"""Document corpus builder.

Turns a NormalizedSpec into independently retrievable documents:

- one API identity document,
- one document enumerating every valid endpoint verbatim,
- one document per endpoint,
- up to ``schema_cap`` schema documents.

The valid-endpoint list is what lets the generator check a candidate
endpoint against the full set of real operations, so it must list every
endpoint exactly once.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from openapi_rag_client.parser.base import EndpointRecord, NormalizedSpec, SchemaRecord

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_CAP = 10

KIND_API_INFO = "api_info"
KIND_VALID_ENDPOINTS = "valid_endpoints"
KIND_ENDPOINT = "endpoint"
KIND_SCHEMA = "schema"
KIND_RETRIEVAL_ERROR = "retrieval_error"


class Document(BaseModel):
    """A retrievable unit of text plus tag metadata."""

    model_config = ConfigDict(frozen=True)

    content: str
    tags: dict[str, Any]

    @property
    def kind(self) -> str:
        return self.tags["kind"]


def build_corpus(spec: NormalizedSpec, schema_cap: int = DEFAULT_SCHEMA_CAP) -> list[Document]:
    """Build the full document set for one generation request."""
    documents = [_api_info_document(spec), _valid_endpoints_document(spec.endpoints)]
    documents.extend(_endpoint_document(ep) for ep in spec.endpoints)
    documents.extend(_schema_document(s) for s in select_schemas(spec.schemas, schema_cap))

    logger.info(
        "Created %d documents from OpenAPI spec (%d endpoints)",
        len(documents),
        len(spec.endpoints),
    )
    return documents


def select_schemas(schemas: list[SchemaRecord], cap: int = DEFAULT_SCHEMA_CAP) -> list[SchemaRecord]:
    """Pick the ``cap`` schemas with the shortest names.

    Short names are taken as a rough proxy for foundational types; this is a
    heuristic with known misses (e.g. a short composite name beats a long
    core type). Ties keep declaration order.
    """
    return sorted(schemas, key=lambda s: len(s.name))[:cap]


def valid_endpoint_line(endpoint: EndpointRecord) -> str:
    label = endpoint.summary or endpoint.operation_id or "No description"
    return f"{endpoint.signature} - {label}"


def _dump(data: dict) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _api_info_document(spec: NormalizedSpec) -> Document:
    info = spec.info
    return Document(
        content=_dump(
            {
                "title": info.title,
                "version": info.version,
                "description": info.description,
                "serverUrl": info.server_url,
            }
        ),
        tags={"kind": KIND_API_INFO},
    )


def _valid_endpoints_document(endpoints: list[EndpointRecord]) -> Document:
    return Document(
        content=_dump({"validEndpoints": [valid_endpoint_line(ep) for ep in endpoints]}),
        tags={"kind": KIND_VALID_ENDPOINTS},
    )


def _endpoint_document(endpoint: EndpointRecord) -> Document:
    parameters = []
    for p in endpoint.parameters:
        param: dict[str, Any] = {"name": p.name, "in": p.location, "required": p.required}
        if p.param_type is not None:
            param["type"] = p.param_type
        parameters.append(param)

    content = {
        "path": endpoint.path,
        "method": endpoint.method,
        "summary": endpoint.summary,
        "description": endpoint.description,
        "operationId": endpoint.operation_id,
        "parameters": parameters,
        "responses": {
            code: {"description": r.description, "content": r.content}
            for code, r in endpoint.responses.items()
        },
    }
    return Document(
        content=_dump(content),
        tags={
            "kind": KIND_ENDPOINT,
            "path": endpoint.path,
            "method": endpoint.method,
            "operationId": endpoint.operation_id,
            "tags": endpoint.tags,
        },
    )


def _schema_document(schema: SchemaRecord) -> Document:
    properties = {}
    for name, prop in schema.properties.items():
        properties[name] = {
            key: value
            for key, value in (
                ("type", prop.type),
                ("format", prop.format),
                ("enum", prop.enum),
                ("items", {"type": prop.items_type} if prop.items_type else None),
            )
            if value is not None
        }

    content = {
        "name": schema.name,
        "schema": {"type": schema.type, "properties": properties, "required": schema.required},
    }
    return Document(content=_dump(content), tags={"kind": KIND_SCHEMA, "name": schema.name})
