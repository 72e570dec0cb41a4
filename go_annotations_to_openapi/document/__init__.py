"""
OpenAPI document model and serialization.
"""

from __future__ import annotations

from .models import (
    Document,
    Info,
    MediaContent,
    Operation,
    Parameter,
    RequestBody,
    Response,
    SchemaNode,
    SecurityScheme,
)
from .writer import DocumentWriter

__all__ = [
    "Document",
    "Info",
    "MediaContent",
    "Operation",
    "Parameter",
    "RequestBody",
    "Response",
    "SchemaNode",
    "SecurityScheme",
    "DocumentWriter",
]
