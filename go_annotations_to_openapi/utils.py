"""
Utility functions for directive and tag parsing.
"""

from __future__ import annotations

import json
import re

# key:"value" pairs of a Go struct tag
_STRUCT_TAG_PATTERN = re.compile(r'([^\s:"]+):"((?:[^"\\]|\\.)*)"')

_OPENING = "{["
_CLOSING = "}]"


def split_top_level(text: str, separator: str = ",") -> list[str]:
    """Split text on a separator, ignoring separators nested in braces or brackets.

    Examples:
        "a=1, b={'x': 1, 'y': 2}" -> ["a=1", " b={'x': 1, 'y': 2}"]
    """
    parts = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char in _OPENING:
            depth += 1
        elif char in _CLOSING and depth > 0:
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def parse_params(text: str) -> dict[str, str]:
    """Parse a comma separated list of `key=value` and bare `key` tokens.

    Bare tokens map to "". Brace-delimited values may use single quotes,
    which are converted to double quotes so the value is valid JSON.

    Examples:
        "required, type=string, example=1" -> {"required": "", "type": "string", "example": "1"}
        "example={'foo': 'bar'}" -> {"example": '{"foo": "bar"}'}
    """
    params: dict[str, str] = {}
    for item in split_top_level(text):
        key, _, value = item.partition("=")
        key = key.strip()
        if not key:
            continue
        value = value.strip()
        if value[:1] in _OPENING:
            value = value.replace("'", '"')
        params[key] = value
    return params


def struct_tag_lookup(tag: str, key: str) -> str | None:
    """Return the value for a key in a Go struct tag, or None if absent.

    Examples:
        struct_tag_lookup('json:"name,omitempty" openapi:"required"', "json") -> "name,omitempty"
    """
    for match in _STRUCT_TAG_PATTERN.finditer(tag.strip("`")):
        if match.group(1) == key:
            try:
                return json.loads(f'"{match.group(2)}"')
            except ValueError:
                return match.group(2)
    return None


def get_str(items: list[str], index: int) -> str:
    """Return items[index] or "" when out of range."""
    if index >= len(items):
        return ""
    return items[index]
