"""
Directive parsing for `@openapi...` documentation comments.
"""

from __future__ import annotations

from .parser import DirectiveParser, ParsedComment, ParsedOperation, parse_pseudo_schema, parse_tags

__all__ = [
    "DirectiveParser",
    "ParsedComment",
    "ParsedOperation",
    "parse_pseudo_schema",
    "parse_tags",
]
