"""
Name resolver for schema table keys.

Types from different packages may share a name. The first one claims
the bare name; later ones are prefixed with segments of their own import
path, innermost first: `Type`, `pkg.Type`, `outer.pkg.Type`, ...
"""

from __future__ import annotations

from collections.abc import Mapping

from ..document.models import SchemaNode
from ..errors import SchemaNameConflict
from ..source.nodes import CompilationUnit


def dedup_key(name: str, unit: CompilationUnit, table: Mapping[str, SchemaNode]) -> tuple[str, bool]:
    """
    Compute the schema table key for a named type.

    Args:
        name: The type's name in its unit
        unit: The unit declaring the type
        table: The document's schema table

    Returns:
        (key, already_present): already_present is True when the key holds
        an entry from the same unit

    Raises:
        SchemaNameConflict: If every prefixed key is claimed by another unit
    """
    key = name
    segments = unit.package_segments

    while True:
        existing = table.get(key)
        if existing is None:
            return key, False
        if existing.origin == unit:
            return key, True
        if not segments:
            break
        key = f"{segments.pop()}.{key}"

    raise SchemaNameConflict(name, unit.import_path)
