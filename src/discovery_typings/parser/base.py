"""Data models for Google API Discovery documents.

Documents are parsed into these models once and treated as read-only by the
generators. Schemas reference each other by name (``$ref``) and are resolved
through the ``schemas`` registry of the owning ``RestDescription``, so
recursive schema graphs never get expanded here.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class SchemaShape(str, Enum):
    """The type shape a JsonSchema node describes."""

    ARRAY = "array"
    OBJECT = "object"  # fixed named properties
    MAP = "map"  # uniform value type via additionalProperties
    SCALAR = "scalar"
    REFERENCE = "reference"


class JsonSchema(BaseModel):
    """A schema, property or parameter definition."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    type: str | None = None  # integer / number / string / boolean / any / array / object
    ref: str | None = Field(default=None, alias="$ref")
    description: str | None = None
    required: bool = False
    repeated: bool = False
    format: str | None = None
    location: str | None = None  # query / path, parameters only
    enum: list[str] | None = None
    items: JsonSchema | None = None
    properties: dict[str, JsonSchema] | None = None
    additional_properties: JsonSchema | None = Field(default=None, alias="additionalProperties")

    @field_validator("additional_properties", mode="before")
    @classmethod
    def _boolean_additional_properties(cls, value):
        # `additionalProperties: true` is plain JSON Schema for "anything goes"
        if value is True:
            return {"type": "any"}
        if value is False:
            return None
        return value

    @property
    def shape(self) -> SchemaShape | None:
        """Classify the node; None means it declares neither a type nor a reference."""
        if self.type == "array":
            return SchemaShape.ARRAY
        if self.type == "object" and self.properties:
            return SchemaShape.OBJECT
        if self.type == "object" and self.additional_properties:
            return SchemaShape.MAP
        if self.type:
            return SchemaShape.SCALAR
        if self.ref:
            return SchemaShape.REFERENCE
        return None


class RequestRef(BaseModel):
    """Request or response body reference of a method."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ref: str | None = Field(default=None, alias="$ref")
    parameter_name: str | None = Field(default=None, alias="parameterName")


class RestMethod(BaseModel):
    """A single callable operation, e.g. ``drive.files.list``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    description: str | None = None
    http_method: str | None = Field(default=None, alias="httpMethod")
    path: str | None = None
    parameters: dict[str, JsonSchema] | None = None
    parameter_order: list[str] = Field(default=[], alias="parameterOrder")
    request: RequestRef | None = None
    response: RequestRef | None = None
    scopes: list[str] = []


class RestResource(BaseModel):
    """A named group of methods and nested resources."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    methods: dict[str, RestMethod] | None = None
    resources: dict[str, RestResource] | None = None


class OAuthScope(BaseModel):
    description: str = ""


class OAuth2(BaseModel):
    scopes: dict[str, OAuthScope] = {}


class Auth(BaseModel):
    oauth2: OAuth2 | None = None


class RestDescription(BaseModel):
    """A whole discovery document for one API version."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    version: str | None = None
    revision: str | None = None
    title: str | None = None
    description: str | None = None
    documentation_link: str | None = Field(default=None, alias="documentationLink")
    root_url: str | None = Field(default=None, alias="rootUrl")
    service_path: str | None = Field(default=None, alias="servicePath")
    labels: list[str] = []
    auth: Auth | None = None
    parameters: dict[str, JsonSchema] | None = None
    schemas: dict[str, JsonSchema] | None = None
    methods: dict[str, RestMethod] | None = None
    resources: dict[str, RestResource] | None = None

    _document: dict | None = PrivateAttr(default=None)

    @classmethod
    def from_document(cls, data: dict) -> RestDescription:
        """Validate a decoded document and keep it, unknown keys included."""
        description = cls.model_validate(data)
        description._document = data
        return description

    @property
    def document(self) -> dict:
        """The decoded document, or a dump of the model when it was built directly."""
        if self._document is not None:
            return self._document
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DirectoryItem(BaseModel):
    """One entry of the discovery directory listing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    version: str
    title: str | None = None
    preferred: bool = False
    discovery_rest_url: str = Field(alias="discoveryRestUrl")
    documentation_link: str | None = Field(default=None, alias="documentationLink")
