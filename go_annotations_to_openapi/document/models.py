"""
OpenAPI document model.

The Document is created once per run and shared by every comment that
is processed. Schemas are stored in a flat table addressed by their
dedup key; nodes refer to each other through `$ref` strings, never by
nesting the expanded body.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ..source.nodes import CompilationUnit

OPENAPI_VERSION = "3.0.0"
SCHEMA_REF_PREFIX = "#/components/schemas/"


@dataclass
class SchemaNode:
    """A schema or property in the output document."""

    type: str = ""
    format: str = ""
    ref: str = ""
    description: str = ""
    properties: dict[str, SchemaNode] = field(default_factory=dict)
    items: SchemaNode | None = None
    required: list[str] = field(default_factory=list)
    additional_properties: dict[str, Any] | None = None
    enum: list[str] = field(default_factory=list)
    default: str = ""
    example: str = ""
    extensions: dict[str, str] = field(default_factory=dict)

    # Bookkeeping for deduplication, never serialized
    origin: CompilationUnit | None = field(default=None, repr=False, compare=False)

    @classmethod
    def reference(cls, key: str, origin: CompilationUnit | None = None) -> SchemaNode:
        return cls(ref=SCHEMA_REF_PREFIX + key, origin=origin)

    @property
    def ref_key(self) -> str:
        """Table key this node refers to, or "" if it is not a reference."""
        if self.ref.startswith(SCHEMA_REF_PREFIX):
            return self.ref[len(SCHEMA_REF_PREFIX) :]
        return ""

    def to_dict(self) -> dict[str, Any]:
        if self.ref:
            return self._reference_dict()

        d: dict[str, Any] = {}
        if self.type:
            d["type"] = self.type
        if self.description:
            d["description"] = self.description
        if self.format:
            d["format"] = self.format
        if self.enum:
            d["enum"] = list(self.enum)
        if self.default:
            d["default"] = self.default
        if self.example:
            d["example"] = self.example
        if self.properties:
            d["properties"] = {name: self.properties[name].to_dict() for name in sorted(self.properties)}
        if self.additional_properties is not None:
            d["additionalProperties"] = dict(self.additional_properties)
        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.required:
            d["required"] = list(self.required)
        d.update(self.extensions)
        return d

    def _reference_dict(self) -> dict[str, Any]:
        # Field level overrides are kept beside the reference
        d: dict[str, Any] = {"$ref": self.ref}
        if self.description:
            d["description"] = self.description
        if self.enum:
            d["enum"] = list(self.enum)
        if self.default:
            d["default"] = self.default
        if self.example:
            d["example"] = self.example
        d.update(self.extensions)
        return d


@dataclass
class Parameter:
    """An operation parameter."""

    name: str = ""
    location: str = ""  # path, query, header, cookie
    required: bool = False
    description: str = ""
    schema: SchemaNode | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"name": self.name, "in": self.location, "required": self.required}
        if self.description:
            d["description"] = self.description
        if self.schema is not None:
            d["schema"] = self.schema.to_dict()
        return d


@dataclass
class MediaContent:
    """Body of one content type: a schema or a literal example."""

    schema: SchemaNode | None = None
    example: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.schema is not None:
            d["schema"] = self.schema.to_dict()
        if self.example:
            d["example"] = self.example
        return d


@dataclass
class RequestBody:
    content: dict[str, MediaContent] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.description:
            d["description"] = self.description
        d["content"] = {ct: media.to_dict() for ct, media in self.content.items()}
        return d


@dataclass
class Response:
    description: str = ""
    content: dict[str, MediaContent] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"description": self.description}
        if self.content:
            d["content"] = {ct: media.to_dict() for ct, media in self.content.items()}
        return d


@dataclass
class SecurityScheme:
    type: str = ""
    name: str = ""
    location: str = ""
    scheme: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.type, "name": self.name, "in": self.location}
        if self.scheme:
            d["scheme"] = self.scheme
        return d


@dataclass
class Operation:
    """One method of one path."""

    tags: list[str] = field(default_factory=list)
    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = field(default_factory=list)
    request_body: RequestBody | None = None
    responses: dict[str, Response] = field(default_factory=dict)
    security: list[dict[str, list[str]]] = field(default_factory=list)
    deprecated: bool = False

    def with_deprecation(self, deprecated: bool) -> Operation:
        return dataclasses.replace(self, deprecated=deprecated)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        if self.tags:
            d["tags"] = list(self.tags)
        if self.summary:
            d["summary"] = self.summary
        if self.description:
            d["description"] = self.description
        if self.parameters:
            d["parameters"] = [p.to_dict() for p in self.parameters]
        if self.request_body is not None:
            d["requestBody"] = self.request_body.to_dict()
        if self.deprecated:
            d["deprecated"] = True
        d["responses"] = {status: self.responses[status].to_dict() for status in sorted(self.responses)}
        if self.security:
            d["security"] = [dict(requirement) for requirement in self.security]
        return d


@dataclass
class Info:
    title: str = "API Docs"
    description: str = "OpenAPI"
    version: str = "1.0.0"

    def to_dict(self) -> dict[str, Any]:
        d = {}
        if self.description:
            d["description"] = self.description
        if self.title:
            d["title"] = self.title
        if self.version:
            d["version"] = self.version
        return d


@dataclass
class Document:
    """Accumulates operations and schema components for one run."""

    info: Info = field(default_factory=Info)
    servers: list[str] = field(default_factory=list)
    paths: dict[str, dict[str, Operation]] = field(default_factory=dict)
    schemas: dict[str, SchemaNode] = field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)

    def add_operation(self, path: str, method: str, operation: Operation) -> None:
        self.paths.setdefault(path, {})[method] = operation

    def operation(self, path: str, method: str) -> Operation | None:
        return self.paths.get(path, {}).get(method)

    def register_security_scheme(self, name: str, scheme: SecurityScheme) -> None:
        self.security_schemes[name] = scheme

    def resolve(self, node: SchemaNode) -> SchemaNode:
        """Follow a `$ref` node to its table entry; other nodes are returned unchanged."""
        key = node.ref_key
        if key:
            return self.schemas[key]
        return node

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"openapi": OPENAPI_VERSION, "info": self.info.to_dict()}
        if self.servers:
            d["servers"] = [{"url": url} for url in self.servers]
        d["paths"] = {
            path: {method: self.paths[path][method].to_dict() for method in sorted(self.paths[path])}
            for path in sorted(self.paths)
        }

        components: dict[str, Any] = {}
        if self.security_schemes:
            components["securitySchemes"] = {
                name: self.security_schemes[name].to_dict() for name in sorted(self.security_schemes)
            }
        if self.schemas:
            components["schemas"] = {key: self.schemas[key].to_dict() for key in sorted(self.schemas)}
        if components:
            d["components"] = components
        return d
