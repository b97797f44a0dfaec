"""Typed intermediate representation of an OpenAPI document.

The normalizer converts the raw document tree into these models once; every
downstream component consumes them instead of the raw tree.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")


class Param(BaseModel):
    """A single operation parameter, reduced to its primitive type."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: Literal["path", "query", "header", "cookie"]
    required: bool = False
    param_type: str | None = None  # None when the parameter declares no schema


class ResponseInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str = ""
    content: list[str] = []  # media types


class EndpointRecord(BaseModel):
    """One HTTP operation. (path, method) is unique within a document."""

    model_config = ConfigDict(frozen=True)

    path: str  # /pet/{petId}
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH"]
    summary: str = ""
    description: str = ""
    operation_id: str = ""
    tags: list[str] = []
    parameters: list[Param] = []
    responses: dict[str, ResponseInfo] = {}

    @property
    def signature(self) -> str:
        return f"{self.method} {self.path}"


class SchemaProperty(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str | None = None
    format: str | None = None
    enum: list | None = None
    items_type: str | None = None


class SchemaRecord(BaseModel):
    """One named schema from components.schemas (or Swagger 2 definitions)."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str | None = None
    properties: dict[str, SchemaProperty] = {}
    required: list[str] = []


class ApiInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = "API"
    version: str = ""
    description: str = ""
    server_url: str = ""


class NormalizedSpec(BaseModel):
    """Everything the corpus builder needs, in document order."""

    model_config = ConfigDict(frozen=True)

    info: ApiInfo = Field(default_factory=ApiInfo)
    endpoints: list[EndpointRecord] = []
    schemas: list[SchemaRecord] = []
