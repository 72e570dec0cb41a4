"""
Go source access: tree-sitter reader, package locator and per-run cache.
"""

from __future__ import annotations

from .go_reader import GoSourceReader
from .loader import SourceLoader
from .nodes import (
    CommentGroup,
    CompilationUnit,
    FieldDefinition,
    ImportSpec,
    NominalTypeDefinition,
    RawField,
    SourceFile,
    TypeDeclaration,
    TypeExpr,
    TypeExprKind,
)
from .package_locator import GoModule, PackageLocator, parse_go_mod

__all__ = [
    "GoSourceReader",
    "SourceLoader",
    "PackageLocator",
    "GoModule",
    "parse_go_mod",
    "CompilationUnit",
    "CommentGroup",
    "FieldDefinition",
    "ImportSpec",
    "NominalTypeDefinition",
    "RawField",
    "SourceFile",
    "TypeDeclaration",
    "TypeExpr",
    "TypeExprKind",
]
