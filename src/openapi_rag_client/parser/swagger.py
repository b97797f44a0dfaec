"""OpenAPI / Swagger document normalizer.

Turns a validated OpenAPI 3.x (or Swagger 2.0) tree into a NormalizedSpec.
Nested schema detail is dropped: parameters and properties keep their
primitive type only.
"""

from typing import Any

from openapi_rag_client.errors import MalformedSpecError

from .base import (
    HTTP_METHODS,
    ApiInfo,
    EndpointRecord,
    NormalizedSpec,
    Param,
    ResponseInfo,
    SchemaProperty,
    SchemaRecord,
)


def normalize(doc: dict[str, Any]) -> NormalizedSpec:
    """Normalize a validated document tree into typed records."""
    paths = doc.get("paths")
    if not isinstance(paths, dict):
        raise MalformedSpecError("Spec has no 'paths' object")

    info = doc.get("info") or {}
    return NormalizedSpec(
        info=ApiInfo(
            title=info.get("title") or "API",
            version=str(info.get("version") or ""),
            description=info.get("description") or "",
            server_url=get_server_url(doc),
        ),
        endpoints=parse_endpoints(paths),
        schemas=parse_schemas(_named_schemas(doc)),
    )


def get_server_url(doc: dict[str, Any]) -> str:
    """Return servers[0].url, the Swagger 2 host URL, or an empty string."""
    servers = doc.get("servers")
    if isinstance(servers, list) and servers and isinstance(servers[0], dict):
        return servers[0].get("url") or ""

    host = doc.get("host")
    if host:
        schemes = doc.get("schemes") or ["https"]
        return f"{schemes[0]}://{host}{doc.get('basePath', '')}"
    return ""


def parse_endpoints(paths: dict[str, Any]) -> list[EndpointRecord]:
    endpoints = []
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        shared_params = path_item.get("parameters") or []
        # Fixed verb order; OPTIONS/HEAD/TRACE are ignored
        for method in HTTP_METHODS:
            operation = path_item.get(method.lower())
            if not isinstance(operation, dict):
                continue
            params = _merge_parameters(shared_params, operation.get("parameters") or [])
            endpoints.append(
                EndpointRecord(
                    path=path,
                    method=method,
                    summary=operation.get("summary") or "",
                    description=operation.get("description") or "",
                    operation_id=operation.get("operationId") or "",
                    tags=list(operation.get("tags") or []),
                    parameters=_parse_parameters(params),
                    responses=_parse_responses(operation.get("responses") or {}),
                )
            )
    return endpoints


def parse_schemas(schemas: dict[str, Any]) -> list[SchemaRecord]:
    result = []
    for name, schema in schemas.items():
        if not isinstance(schema, dict):
            schema = {}
        properties = {}
        for prop_name, prop in (schema.get("properties") or {}).items():
            prop = prop if isinstance(prop, dict) else {}
            items = prop.get("items")
            properties[prop_name] = SchemaProperty(
                type=_type_of(prop),
                format=prop.get("format"),
                enum=prop.get("enum"),
                items_type=_type_of(items) if isinstance(items, dict) else None,
            )
        result.append(
            SchemaRecord(
                name=name,
                type=_type_of(schema),
                properties=properties,
                required=list(schema.get("required") or []),
            )
        )
    return result


def _named_schemas(doc: dict[str, Any]) -> dict[str, Any]:
    components = doc.get("components") or {}
    schemas = components.get("schemas")
    if schemas is None:
        schemas = doc.get("definitions")  # Swagger 2.0
    return schemas or {}


def _merge_parameters(shared: list[dict], own: list[dict]) -> list[dict]:
    """Operation parameters first, then path-level ones it does not override."""
    declared = {(p.get("name"), p.get("in")) for p in own if isinstance(p, dict)}
    inherited = [
        p for p in shared if isinstance(p, dict) and (p.get("name"), p.get("in")) not in declared
    ]
    return [*own, *inherited]


def _parse_parameters(params: list[dict]) -> list[Param]:
    result = []
    for p in params:
        if not isinstance(p, dict) or "name" not in p:
            continue
        location = p.get("in", "query")
        if location not in ("path", "query", "header", "cookie"):
            # Swagger 2 body/formData parameters are not addressable by name
            continue
        schema = p.get("schema")
        if isinstance(schema, dict):
            param_type = _type_of(schema)
        else:
            # Swagger 2 puts the type on the parameter itself
            param_type = p.get("type")
        result.append(
            Param(
                name=p["name"],
                location=location,
                required=bool(p.get("required", False)),
                param_type=param_type,
            )
        )
    return result


def _parse_responses(responses: dict) -> dict[str, ResponseInfo]:
    result = {}
    for status_code, resp in responses.items():
        resp = resp if isinstance(resp, dict) else {}
        result[str(status_code)] = ResponseInfo(
            description=resp.get("description") or "",
            content=list((resp.get("content") or {}).keys()),
        )
    return result


def _type_of(schema: dict) -> str | None:
    value = schema.get("type")
    if isinstance(value, list):
        # OpenAPI 3.1 allows ["string", "null"]
        return "|".join(str(v) for v in value)
    return value
