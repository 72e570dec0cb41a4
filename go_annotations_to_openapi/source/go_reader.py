"""
Go source reader.

Uses tree-sitter and tree-sitter-go to parse Go files into SourceFile
records: package name, imports, top level type declarations and
comment groups.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import tree_sitter_go as ts_go
from tree_sitter import Language, Node, Parser

from ..errors import SourceEnumerationError
from .nodes import (
    CommentGroup,
    ImportSpec,
    RawField,
    SourceFile,
    TypeDeclaration,
    TypeExpr,
    TypeExprKind,
)

logger = logging.getLogger(__name__)


class GoSourceReader:
    """Parses Go files with tree-sitter."""

    SLICE_NODE_TYPES = {"slice_type", "array_type", "implicit_length_array_type"}

    def __init__(self):
        self._parser = Parser(Language(ts_go.language()))

    def read_directory(self, directory: str | Path) -> list[SourceFile]:
        """Parse every `.go` file directly inside a directory.

        Args:
            directory: Directory holding one Go package

        Returns:
            SourceFile records sorted by file name

        Raises:
            SourceEnumerationError: If the directory or a file cannot be read or parsed
        """
        directory = Path(directory)
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            raise SourceEnumerationError(f"cannot list Go sources in '{directory}': {e}") from e

        return [self.read_file(path) for path in entries if path.suffix == ".go" and path.is_file()]

    def read_file(self, path: str | Path) -> SourceFile:
        """Parse a single Go file."""
        path = Path(path)
        try:
            source = path.read_bytes()
        except OSError as e:
            raise SourceEnumerationError(f"cannot read '{path}': {e}") from e

        return self.parse(source, str(path))

    def parse(self, source: bytes, path: str = "") -> SourceFile:
        """Parse Go source code into a SourceFile record.

        Raises:
            SourceEnumerationError: If the code has syntax errors
        """
        tree = self._parser.parse(source)
        root = tree.root_node
        if root.has_error:
            errors = self._find_errors(root)
            line = errors[0].start_point[0] + 1 if errors else 0
            raise SourceEnumerationError(f"failed to parse '{path}' at line {line}: syntax error")

        source_file = SourceFile(path=path)
        for child in root.named_children:
            if child.type == "package_clause":
                for ident in child.named_children:
                    if ident.type == "package_identifier":
                        source_file.package_name = _text(ident)
            elif child.type == "import_declaration":
                source_file.imports.extend(self._parse_imports(child))
            elif child.type == "type_declaration":
                source_file.type_declarations.extend(self._parse_type_declaration(child))

        source_file.comments = self._collect_comments(root)
        return source_file

    def _find_errors(self, node: Node) -> list[Node]:
        if node.type == "ERROR" or node.is_missing:
            return [node]
        errors = []
        for child in node.children:
            if child.has_error or child.is_missing:
                errors.extend(self._find_errors(child))
        return errors

    def _parse_imports(self, node: Node) -> list[ImportSpec]:
        specs = []
        for spec in _walk(node):
            if spec.type != "import_spec":
                continue
            path_node = spec.child_by_field_name("path")
            name_node = spec.child_by_field_name("name")
            name = _text(name_node) if name_node is not None else None
            # Dot and blank imports do not bind a usable package name
            if name in (".", "_"):
                continue
            specs.append(ImportSpec(path=_unquote(_text(path_node)), name=name))
        return specs

    def _parse_type_declaration(self, node: Node) -> list[TypeDeclaration]:
        declarations = []
        for spec in node.named_children:
            if spec.type not in ("type_spec", "type_alias"):
                continue
            name_node = spec.child_by_field_name("name")
            type_node = spec.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            if spec.child_by_field_name("type_parameters") is not None:
                logger.debug("Skipping generic type %s", _text(name_node))
                continue
            declarations.append(TypeDeclaration(name=_text(name_node), type_expr=self._type_expr(type_node)))
        return declarations

    def _type_expr(self, node: Node) -> TypeExpr:
        """Convert a type node into a TypeExpr."""
        if node.type == "type_identifier":
            return TypeExpr(kind=TypeExprKind.NAME, name=_text(node))

        if node.type == "qualified_type":
            return TypeExpr(kind=TypeExprKind.QUALIFIED, name="".join(_text(node).split()))

        if node.type == "pointer_type":
            return TypeExpr(kind=TypeExprKind.POINTER, elem=self._type_expr(node.named_children[-1]))

        if node.type in self.SLICE_NODE_TYPES:
            element = node.child_by_field_name("element")
            if element is None:
                element = node.named_children[-1]
            return TypeExpr(kind=TypeExprKind.SLICE, elem=self._type_expr(element))

        if node.type == "map_type":
            return TypeExpr(kind=TypeExprKind.MAP)

        if node.type == "struct_type":
            return TypeExpr(kind=TypeExprKind.STRUCT, fields=self._struct_fields(node))

        if node.type == "parenthesized_type" and node.named_children:
            return self._type_expr(node.named_children[0])

        logger.debug("Unsupported type expression: %s", node.type)
        return TypeExpr(kind=TypeExprKind.UNSUPPORTED)

    def _struct_fields(self, node: Node) -> list[RawField]:
        fields = []
        for body in node.named_children:
            if body.type != "field_declaration_list":
                continue
            for decl in body.named_children:
                if decl.type != "field_declaration":
                    continue
                type_node = decl.child_by_field_name("type")
                tag_node = decl.child_by_field_name("tag")
                fields.append(
                    RawField(
                        names=[_text(n) for n in decl.children_by_field_name("name")],
                        type_expr=self._type_expr(type_node) if type_node is not None else TypeExpr(),
                        tag=_unquote(_text(tag_node)) if tag_node is not None else "",
                    )
                )
        return fields

    def _collect_comments(self, root: Node) -> list[CommentGroup]:
        """Group adjacent comments the way go/ast does."""
        groups: list[list[Node]] = []
        for node in _walk(root):
            if node.type != "comment":
                continue
            if groups and node.start_point[0] <= groups[-1][-1].end_point[0] + 1:
                groups[-1].append(node)
            else:
                groups.append([node])

        comments = []
        for group in groups:
            text = _comment_text(group)
            if text:
                comments.append(CommentGroup(text=text, line=group[0].start_point[0] + 1))
        return comments


def _walk(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def _text(node: Node) -> str:
    return node.text.decode("utf8")


def _unquote(literal: str) -> str:
    """Strip Go string literal quotes."""
    if literal.startswith("`") and literal.endswith("`"):
        return literal[1:-1]
    try:
        return json.loads(literal)
    except ValueError:
        return literal.strip('"')


def _comment_text(group: list[Node]) -> str:
    """Return comment text without markers, like go/ast CommentGroup.Text."""
    lines: list[str] = []
    for node in group:
        raw = _text(node)
        if raw.startswith("//"):
            body = raw[2:]
            if body.startswith("go:"):
                continue
            if body.startswith(" "):
                body = body[1:]
            lines.append(body)
        else:
            lines.extend(raw[2:-2].split("\n"))

    lines = [line.rstrip() for line in lines]
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
