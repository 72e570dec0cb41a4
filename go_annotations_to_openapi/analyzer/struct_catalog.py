"""
Struct catalog: indexes the named types of a compilation unit.

Each unit is scanned once per run and the result is memoized by import
path. Anonymous inline structs are lifted into synthetic named types so
that every field type can be expressed as a plain type reference.
"""

from __future__ import annotations

import logging

from ..source.loader import SourceLoader
from ..source.nodes import (
    CompilationUnit,
    FieldDefinition,
    NominalTypeDefinition,
    TypeDeclaration,
    TypeExpr,
    TypeExprKind,
)

logger = logging.getLogger(__name__)

SYSTEM_FIELD_NAME = "_"


def type_text(expr: TypeExpr | None) -> str:
    """
    Serialize a type expression into its canonical textual form.

    Examples:
        *User -> "*User"
        []*time.Time -> "[]*time.Time"
        map[string]int -> "map"
        func() -> ""

    Unsupported shapes, and wrappers around them, serialize to "".
    """
    if expr is None:
        return ""
    if expr.kind in (TypeExprKind.NAME, TypeExprKind.QUALIFIED):
        return expr.name
    if expr.kind == TypeExprKind.MAP:
        return "map"
    if expr.kind in (TypeExprKind.POINTER, TypeExprKind.SLICE):
        inner = type_text(expr.elem)
        if not inner:
            return ""
        return ("*" if expr.kind == TypeExprKind.POINTER else "[]") + inner
    return ""


def alias_target(expr: TypeExpr | None) -> str | None:
    """Return the aliased type text if a declaration is a pure rename."""
    if expr is None:
        return None
    if expr.kind in (TypeExprKind.NAME, TypeExprKind.QUALIFIED, TypeExprKind.MAP):
        return type_text(expr)
    if expr.kind == TypeExprKind.SLICE:
        return type_text(expr) or None
    return None


class StructCatalog:
    """Per-unit index of named types."""

    def __init__(self, loader: SourceLoader):
        """
        Initialize the catalog.

        Args:
            loader: Source loader providing the parsed files of each unit
        """
        self.loader = loader
        self._catalogs: dict[str, dict[str, NominalTypeDefinition]] = {}

    def catalog(self, unit: CompilationUnit) -> dict[str, NominalTypeDefinition]:
        """
        Return the named types of a unit, scanning it on first request.

        Args:
            unit: The compilation unit to index

        Returns:
            Mapping of type name to definition

        Raises:
            SourceEnumerationError: If the unit's sources cannot be read
        """
        cached = self._catalogs.get(unit.import_path)
        if cached is not None:
            return cached

        types: dict[str, NominalTypeDefinition] = {}
        for source_file in self.loader.files(unit):
            if source_file.is_test:
                continue
            for declaration in source_file.type_declarations:
                self._classify(unit, declaration, types)

        logger.debug("Indexed %d types in %s", len(types), unit.import_path)
        self._catalogs[unit.import_path] = types
        return types

    def lookup(self, name: str, unit: CompilationUnit) -> NominalTypeDefinition | None:
        return self.catalog(unit).get(name)

    def _classify(
        self,
        unit: CompilationUnit,
        declaration: TypeDeclaration,
        types: dict[str, NominalTypeDefinition],
    ) -> None:
        expr = declaration.type_expr
        target = alias_target(expr)
        if target is not None:
            types[declaration.name] = NominalTypeDefinition(unit=unit, name=declaration.name, alias_target=target)
            return

        if expr is None or expr.kind != TypeExprKind.STRUCT:
            return

        types[declaration.name] = NominalTypeDefinition(
            unit=unit,
            name=declaration.name,
            fields=self._fields(unit, declaration.name, expr, types),
        )

    def _fields(
        self,
        unit: CompilationUnit,
        enclosing: str,
        struct_expr: TypeExpr,
        types: dict[str, NominalTypeDefinition],
    ) -> list[FieldDefinition]:
        fields = []
        for raw in struct_expr.fields:
            for name in raw.names:
                if name == SYSTEM_FIELD_NAME:
                    fields.append(FieldDefinition(name=name, tag=raw.tag, is_exported=False, is_system=True))
                    continue
                if not name[:1].isupper():
                    continue

                type_ref = self._field_type(unit, enclosing, name, raw.type_expr, types)
                if not type_ref:
                    continue
                fields.append(FieldDefinition(name=name, type_ref=type_ref, tag=raw.tag))
        return fields

    def _field_type(
        self,
        unit: CompilationUnit,
        enclosing: str,
        field_name: str,
        expr: TypeExpr | None,
        types: dict[str, NominalTypeDefinition],
    ) -> str:
        """Serialize a field type, lifting inline structs into synthetic types."""
        prefix = ""
        core = expr
        while core is not None and core.kind in (TypeExprKind.POINTER, TypeExprKind.SLICE):
            prefix += "*" if core.kind == TypeExprKind.POINTER else "[]"
            core = core.elem

        if core is None or core.kind != TypeExprKind.STRUCT:
            return type_text(expr)

        synthetic = f"{enclosing}Virt{field_name}"
        types[synthetic] = NominalTypeDefinition(
            unit=unit,
            name=synthetic,
            fields=self._fields(unit, synthetic, core, types),
        )
        return prefix + synthetic
