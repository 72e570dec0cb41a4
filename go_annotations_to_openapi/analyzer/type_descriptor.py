"""
Type descriptors: classification of Go type references.

A descriptor is built fresh for every reference. Pointers are stripped,
aliases are followed and qualified names are resolved into the unit that
declares them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..errors import AliasCycleError, TypeNotFound
from ..source.nodes import CompilationUnit
from .reference_resolver import CrossReferenceResolver
from .struct_catalog import StructCatalog

TEMPORAL_TYPE = "time.Time"
MAP_MARKER = "map"
SLICE_PREFIX = "[]"

# Go built-in name -> (OpenAPI type, format)
PRIMITIVE_TYPES: dict[str, tuple[str, str]] = {
    "int": ("integer", ""),
    "int8": ("integer", ""),
    "int16": ("integer", ""),
    "int32": ("integer", ""),
    "int64": ("integer", ""),
    "uint": ("integer", ""),
    "uint8": ("integer", ""),
    "uint16": ("integer", ""),
    "uint32": ("integer", ""),
    "uint64": ("integer", ""),
    "rune": ("integer", ""),
    "float": ("number", "float"),
    "float32": ("number", "float"),
    "float64": ("number", "double"),
    "bool": ("boolean", ""),
    "string": ("string", ""),
    "byte": ("string", ""),
    "[]byte": ("string", "binary"),
}


class TypeKind(Enum):
    """Kind of a described type."""

    PRIMITIVE = "primitive"
    TEMPORAL = "temporal"
    MAP = "map"
    ARRAY = "array"
    NOMINAL = "nominal"


@dataclass(frozen=True)
class TypeDescriptor:
    """A classified type reference."""

    kind: TypeKind
    name: str
    unit: CompilationUnit | None = None
    nested: TypeDescriptor | None = None  # Element type of ARRAY


def is_primitive(name: str) -> bool:
    return name in PRIMITIVE_TYPES


def split_qualified(name: str) -> tuple[str, str]:
    """Split "pkg.Type" into ("pkg", "Type"); unqualified names give ("", name)."""
    if "." not in name:
        return "", name
    package, local = name.split(".", 1)
    return package, local


class TypeDescriptorBuilder:
    """Builds TypeDescriptors using the struct catalog and cross-reference resolver."""

    def __init__(self, catalog: StructCatalog, resolver: CrossReferenceResolver):
        self.catalog = catalog
        self.resolver = resolver

    def describe(self, type_ref: str, unit: CompilationUnit) -> TypeDescriptor:
        """
        Classify a type reference.

        Args:
            type_ref: Canonical type text such as "*[]pkg.User"
            unit: The unit in which the reference appears

        Returns:
            TypeDescriptor for the reference

        Raises:
            TypeNotFound: If an unqualified name is not declared in its unit
            AliasCycleError: If aliases refer back to themselves
            ReferenceNotFound, PathUnresolved: If a package cannot be resolved
        """
        return self._describe(type_ref.strip(), unit, ())

    def _describe(self, type_ref: str, unit: CompilationUnit, alias_chain: tuple[str, ...]) -> TypeDescriptor:
        type_ref = type_ref.lstrip("*")

        if type_ref == TEMPORAL_TYPE:
            return TypeDescriptor(kind=TypeKind.TEMPORAL, name=type_ref, unit=unit)

        if is_primitive(type_ref):
            return TypeDescriptor(kind=TypeKind.PRIMITIVE, name=type_ref, unit=unit)

        if type_ref == MAP_MARKER or type_ref.startswith(MAP_MARKER + "["):
            return TypeDescriptor(kind=TypeKind.MAP, name=MAP_MARKER, unit=unit)

        if type_ref.startswith(SLICE_PREFIX):
            nested = self._describe(type_ref[len(SLICE_PREFIX) :], unit, alias_chain)
            return TypeDescriptor(kind=TypeKind.ARRAY, name=type_ref, unit=unit, nested=nested)

        package, name = split_qualified(type_ref)
        if package:
            foreign = self.resolver.resolve(package, unit)
            return self._describe(name, foreign, alias_chain)

        definition = self.catalog.lookup(name, unit)
        if definition is None:
            raise TypeNotFound(name, unit.import_path, unit.directory)

        if definition.is_alias:
            link = f"{unit.import_path}.{name}"
            if link in alias_chain:
                raise AliasCycleError([*alias_chain, link], unit.import_path, unit.directory)
            return self._describe(definition.alias_target, unit, (*alias_chain, link))

        return TypeDescriptor(kind=TypeKind.NOMINAL, name=name, unit=unit)
