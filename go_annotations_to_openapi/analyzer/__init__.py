"""
Analyzer: struct catalog, type resolution and schema synthesis.
"""

from __future__ import annotations

from .name_resolver import dedup_key
from .reference_resolver import CrossReferenceResolver
from .schema_synthesizer import SchemaSynthesizer
from .struct_catalog import StructCatalog
from .tags import FieldTagOptions
from .type_descriptor import PRIMITIVE_TYPES, TypeDescriptor, TypeDescriptorBuilder, TypeKind

__all__ = [
    "StructCatalog",
    "CrossReferenceResolver",
    "TypeDescriptor",
    "TypeDescriptorBuilder",
    "TypeKind",
    "PRIMITIVE_TYPES",
    "SchemaSynthesizer",
    "FieldTagOptions",
    "dedup_key",
]
