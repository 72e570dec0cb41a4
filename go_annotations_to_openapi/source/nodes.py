"""
Records describing Go source as seen by the analyzer.

The Go reader produces SourceFile records made of raw type expressions;
the struct catalog turns them into NominalTypeDefinition entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class CompilationUnit:
    """A Go package, identified by its import path."""

    import_path: str
    directory: str = field(default="", compare=False)

    @property
    def package_segments(self) -> list[str]:
        return [segment for segment in self.import_path.split("/") if segment]


class TypeExprKind(Enum):
    """Shape of a Go type expression."""

    NAME = "name"  # User, int
    QUALIFIED = "qualified"  # time.Time
    POINTER = "pointer"  # *T
    SLICE = "slice"  # []T, [N]T
    MAP = "map"  # map[K]V
    STRUCT = "struct"  # struct { ... }
    UNSUPPORTED = "unsupported"  # func, chan, interface, generics


@dataclass
class RawField:
    """A field declaration inside a struct type expression."""

    names: list[str] = field(default_factory=list)  # Empty for embedded fields
    type_expr: TypeExpr | None = None
    tag: str = ""  # Tag text without the surrounding quotes


@dataclass
class TypeExpr:
    """A structural Go type expression."""

    kind: TypeExprKind = TypeExprKind.UNSUPPORTED
    name: str = ""  # NAME: identifier, QUALIFIED: "pkg.Name"
    elem: TypeExpr | None = None  # POINTER and SLICE element
    fields: list[RawField] = field(default_factory=list)  # STRUCT fields


@dataclass
class TypeDeclaration:
    """A top level `type Name <expr>` declaration."""

    name: str = ""
    type_expr: TypeExpr | None = None


@dataclass
class ImportSpec:
    """A single import statement."""

    path: str = ""
    name: str | None = None  # Explicit rename binding

    @property
    def local_name(self) -> str:
        if self.name:
            return self.name
        return self.path.rsplit("/", 1)[-1]


@dataclass
class CommentGroup:
    """Text of a group of adjacent comments with markers removed."""

    text: str = ""
    line: int = 0  # 1-based line of the first comment


@dataclass
class SourceFile:
    """Declarations and comments of one Go file."""

    path: str = ""
    package_name: str = ""
    imports: list[ImportSpec] = field(default_factory=list)
    type_declarations: list[TypeDeclaration] = field(default_factory=list)
    comments: list[CommentGroup] = field(default_factory=list)

    @property
    def is_test(self) -> bool:
        return self.path.endswith("_test.go")


@dataclass
class FieldDefinition:
    """A struct field as recorded by the catalog."""

    name: str = ""
    type_ref: str = ""  # Canonical text: "*T", "[]pkg.T", "map", ...
    tag: str = ""
    is_exported: bool = True
    is_system: bool = False


@dataclass
class NominalTypeDefinition:
    """A named Go type: either a struct with fields or an alias of another type."""

    unit: CompilationUnit
    name: str = ""
    alias_target: str | None = None
    fields: list[FieldDefinition] = field(default_factory=list)

    @property
    def is_alias(self) -> bool:
        return self.alias_target is not None
