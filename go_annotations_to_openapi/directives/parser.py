"""
Directive parser for documentation comments.

A comment is split into lines; lines starting with a known prefix are
directives, every other line is free text and ignored:

    @openapi GET /users/{id} [deprecated]
    @openapiParam id in=path, type=int, example=11
    @openapiTags users, admin
    @openapiSummary Get a user
    @openapiDesc Longer description
    @openapiRequest application/json {"name": string}
    @openapiResponse 200 application/json User
    @openapiSecurity api_key apiKey header X-API-Key

One comment may declare several method/path pairs; every other directive
applies to all of them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from http import HTTPStatus

from ..analyzer.schema_synthesizer import SchemaSynthesizer
from ..analyzer.type_descriptor import PRIMITIVE_TYPES
from ..document.models import (
    Document,
    MediaContent,
    Operation,
    Parameter,
    RequestBody,
    Response,
    SchemaNode,
    SecurityScheme,
)
from ..errors import AnnotationError, DirectiveError, SchemaSyntaxError, ValidationError
from ..source.nodes import CompilationUnit
from ..utils import get_str, parse_params
from .validation import (
    PARAM_TYPES,
    validate_param,
    validate_path,
    validate_request_content_type,
    validate_response,
)

logger = logging.getLogger(__name__)

PATH_PREFIX = "@openapi "
PARAM_PREFIX = "@openapiParam "
TAGS_PREFIX = "@openapiTags "
SUMMARY_PREFIX = "@openapiSummary "
DESC_PREFIX = "@openapiDesc "
REQUEST_PREFIX = "@openapiRequest "
RESPONSE_PREFIX = "@openapiResponse "
SECURITY_PREFIX = "@openapiSecurity"

DEPRECATED_TOKEN = "deprecated"
BINARY_CONTENT_TYPE = "application/octet-stream"
FALSE_VALUES = ("false", "0", "no")


@dataclass
class ParsedOperation:
    """An operation bound to one method and path."""

    path: str
    method: str
    operation: Operation


@dataclass
class ParsedComment:
    """Everything one comment contributes to the document."""

    operations: list[ParsedOperation] = field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)


def parse_pseudo_schema(payload: str) -> dict[str, str]:
    """
    Parse a `{field: typeRef, ...}` payload into field -> type reference.

    Raises:
        SchemaSyntaxError: If the braces or an entry are malformed
    """
    payload = payload.strip()
    if not (payload.startswith("{") and payload.endswith("}")):
        raise SchemaSyntaxError("Invalid JSON schema")

    fields: dict[str, str] = {}
    for entry in payload[1:-1].split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, value = entry.partition(":")
        key = key.strip().strip('"')
        value = value.strip()
        if not key or not value:
            raise SchemaSyntaxError("Invalid JSON schema")
        fields[key] = value
    return fields


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a JSON value")


def is_json_literal(payload: str) -> bool:
    try:
        json.loads(payload, parse_constant=_reject_constant)
    except ValueError:
        return False
    return True


def status_description(status: str) -> str:
    """Reason phrase of an HTTP status, e.g. "200" -> "OK"."""
    try:
        return HTTPStatus(int(status)).phrase
    except ValueError:
        return ""


class DirectiveParser:
    """Parses documentation comments into operations."""

    def __init__(self, document: Document, synthesizer: SchemaSynthesizer):
        """
        Initialize the parser.

        Args:
            document: Document receiving operations and security schemes
            synthesizer: Schema synthesizer for type references in payloads
        """
        self.document = document
        self.synthesizer = synthesizer

    def apply_comment(self, comment: str, unit: CompilationUnit) -> ParsedComment:
        """Parse a comment and store its operations and security schemes in the document."""
        parsed = self.parse_comment(comment, unit)
        for name, scheme in parsed.security_schemes.items():
            self.document.register_security_scheme(name, scheme)
        for item in parsed.operations:
            logger.debug("Adding operation %s %s", item.method.upper(), item.path)
            self.document.add_operation(item.path, item.method, item.operation)
        return parsed

    def parse_comment(self, comment: str, unit: CompilationUnit) -> ParsedComment:
        """
        Parse one documentation comment.

        Args:
            comment: Comment text without comment markers
            unit: Compilation unit the comment belongs to, for type references

        Returns:
            ParsedComment; empty when the comment declares no operation

        Raises:
            DirectiveError: If a directive line is invalid
            ValidationError: If an operation has no response
        """
        parsed = ParsedComment()
        declared: dict[tuple[str, str], bool] = {}
        operation = Operation()

        for raw_line in comment.split("\n"):
            line = raw_line.strip()
            try:
                self._parse_line(line, unit, operation, declared, parsed)
            except AnnotationError as e:
                raise DirectiveError(e, line) from e

        if not declared:
            return parsed

        if not operation.responses:
            path, method = next(iter(declared))
            raise ValidationError(f"no {RESPONSE_PREFIX.strip()} for: {method.upper()} {path}")

        for (path, method), deprecated in declared.items():
            parsed.operations.append(ParsedOperation(path, method, operation.with_deprecation(deprecated)))
        return parsed

    def _parse_line(
        self,
        line: str,
        unit: CompilationUnit,
        operation: Operation,
        declared: dict[tuple[str, str], bool],
        parsed: ParsedComment,
    ) -> None:
        if line.startswith(PATH_PREFIX):
            method, path, deprecated = self.parse_path(line)
            declared[(path, method)] = deprecated

        elif line.startswith(PARAM_PREFIX):
            operation.parameters.append(self.parse_param(line))

        elif line.startswith(TAGS_PREFIX):
            operation.tags = parse_tags(line)

        elif line.startswith(SUMMARY_PREFIX):
            operation.summary = line[len(SUMMARY_PREFIX) :].strip()

        elif line.startswith(DESC_PREFIX):
            text = line[len(DESC_PREFIX) :].strip()
            operation.description = f"{operation.description}\n{text}" if operation.description else text

        elif line.startswith(REQUEST_PREFIX):
            content_type, media = self.parse_request(line, unit)
            if operation.request_body is None:
                operation.request_body = RequestBody()
            operation.request_body.content[content_type] = media

        elif line.startswith(RESPONSE_PREFIX):
            status, content_type, media = self.parse_response(line, unit)
            response = operation.responses.setdefault(status, Response(description=status_description(status)))
            response.content[content_type] = media

        elif line.startswith(SECURITY_PREFIX):
            name, scheme = self.parse_security(line)
            parsed.security_schemes[name] = scheme
            if not any(name in requirement for requirement in operation.security):
                operation.security.append({name: []})

    def parse_path(self, line: str) -> tuple[str, str, bool]:
        """@openapi GET /foo/bar [deprecated]"""
        tokens = line[len(PATH_PREFIX) :].split()
        method = get_str(tokens, 0).lower()
        path = get_str(tokens, 1)
        deprecated = get_str(tokens, 2) == DEPRECATED_TOKEN
        validate_path(method, path)
        return method, path, deprecated

    def parse_param(self, line: str) -> Parameter:
        """@openapiParam foo in=path, type=int, default=1, required"""
        name, _, attributes = line[len(PARAM_PREFIX) :].strip().partition(" ")
        params = parse_params(attributes)

        declared_type = params.get("type", "")
        primitive_type, primitive_format = PRIMITIVE_TYPES.get(declared_type, ("", ""))
        location = params.get("in", "")

        if "required" in params:
            required = params["required"].lower() not in FALSE_VALUES
        else:
            required = location == "path"

        param = Parameter(
            name=name,
            location=location,
            required=required,
            description=params.get("description", ""),
            schema=SchemaNode(
                type=declared_type if declared_type in PARAM_TYPES else primitive_type,
                format=params.get("format") or primitive_format,
                example=params.get("example", ""),
                default=params.get("default", ""),
            ),
        )
        validate_param(param)
        return param

    def parse_request(self, line: str, unit: CompilationUnit) -> tuple[str, MediaContent]:
        """@openapiRequest application/json {"foo": "bar"}"""
        content_type, _, payload = line[len(REQUEST_PREFIX) :].strip().partition(" ")
        validate_request_content_type(content_type)
        return content_type, self.parse_payload(payload.strip(), unit)

    def parse_response(self, line: str, unit: CompilationUnit) -> tuple[str, str, MediaContent]:
        """@openapiResponse 200 application/json {"foo": "bar"}"""
        tokens = line[len(RESPONSE_PREFIX) :].strip().split(None, 2)
        status = get_str(tokens, 0)
        content_type = get_str(tokens, 1)
        payload = get_str(tokens, 2).strip()
        validate_response(status, content_type)

        if content_type == BINARY_CONTENT_TYPE:
            return status, content_type, MediaContent(schema=SchemaNode(type="string", format="binary"))
        return status, content_type, self.parse_payload(payload, unit)

    def parse_security(self, line: str) -> tuple[str, SecurityScheme]:
        """@openapiSecurity Name Type In KeyName"""
        tokens = line[len(SECURITY_PREFIX) :].split()
        if len(tokens) != 4:
            raise ValidationError("Invalid security directive, expected: name type in key")
        name, scheme_type, location, key_name = tokens
        return name, SecurityScheme(type=scheme_type, name=key_name, location=location)

    def parse_payload(self, payload: str, unit: CompilationUnit) -> MediaContent:
        """
        Parse a request or response payload.

        The payload is either a JSON literal (kept verbatim as example), a
        `{field: typeRef}` pseudo-schema, or a single type reference.
        """
        if not payload:
            return MediaContent()

        if is_json_literal(payload):
            return MediaContent(example=payload)

        if payload.startswith("{"):
            schema = SchemaNode(type="object")
            for name, type_ref in parse_pseudo_schema(payload).items():
                schema.properties[name] = self.synthesizer.property_for_ref(type_ref, unit)
            return MediaContent(schema=schema)

        return MediaContent(schema=self.synthesizer.schema_for_ref(payload, unit))


def parse_tags(line: str) -> list[str]:
    """@openapiTags foo, bar"""
    return [tag.strip() for tag in line[len(TAGS_PREFIX) :].split(",") if tag.strip()]
