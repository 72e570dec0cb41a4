"""
Field tag options.

Struct field tags carry documentation overrides in several namespaces:

    json:"name,omitempty"              output name, "-" drops the field
    openapi:"required,type=string,format=uuid,example=x,default=y,enum=a|b"
    openapiDesc:"Free text"
    openapiExample:"value"
    openapiEnum:"a,b,c"
    openapiExt:"x-key=value,x-other=value"

The dedicated namespaces take precedence over the same key inside `openapi`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..utils import parse_params, struct_tag_lookup

NAME_TAG = "json"
OPTIONS_TAG = "openapi"
DESCRIPTION_TAG = "openapiDesc"
EXAMPLE_TAG = "openapiExample"
ENUM_TAG = "openapiEnum"
EXTENSIONS_TAG = "openapiExt"

OMIT_NAME = "-"
INLINE_ENUM_SEPARATOR = "|"


@dataclass
class FieldTagOptions:
    """Typed view of a field's tag."""

    name: str = ""  # Output name from the json tag
    omit: bool = False
    type: str = ""
    format: str = ""
    example: str = ""
    default: str = ""
    description: str = ""
    required: bool = False
    enum: list[str] = field(default_factory=list)
    extensions: dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, raw_tag: str) -> FieldTagOptions:
        """Parse a raw struct tag (with or without surrounding backticks)."""
        options = cls()

        json_name = (struct_tag_lookup(raw_tag, NAME_TAG) or "").split(",")[0]
        if json_name == OMIT_NAME:
            options.omit = True
        else:
            options.name = json_name

        params = parse_params(struct_tag_lookup(raw_tag, OPTIONS_TAG) or "")
        options.type = params.get("type", "")
        options.format = params.get("format", "")
        options.example = params.get("example", "")
        options.default = params.get("default", "")
        options.description = params.get("description", "")
        options.required = "required" in params
        if params.get("enum"):
            options.enum = [v.strip() for v in params["enum"].split(INLINE_ENUM_SEPARATOR)]

        description = struct_tag_lookup(raw_tag, DESCRIPTION_TAG)
        if description:
            options.description = description
        example = struct_tag_lookup(raw_tag, EXAMPLE_TAG)
        if example:
            options.example = example
        enum = struct_tag_lookup(raw_tag, ENUM_TAG)
        if enum:
            options.enum = [v.strip() for v in enum.split(",")]
        extensions = struct_tag_lookup(raw_tag, EXTENSIONS_TAG)
        if extensions:
            options.extensions = parse_params(extensions)

        return options

    def output_name(self, field_name: str) -> str | None:
        """Name of the property in the schema, or None if the field is omitted."""
        if self.omit:
            return None
        return self.name or field_name
