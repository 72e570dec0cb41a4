#!/usr/bin/env python3

from pathlib import Path

import pytest

from go_annotations_to_openapi.errors import SourceEnumerationError
from go_annotations_to_openapi.source import GoSourceReader, TypeExprKind

TEST_DATA = Path(__file__).parent / "test_data"

SOURCE = b"""package sample

import (
	"fmt"
	json2 "encoding/json"
	. "strings"
	_ "embed"
)

import "time"

//go:generate stringer -type=Kind

// User is a user.
//
// @openapi GET /users
// @openapiResponse 200 application/json User
type User struct {
	ID, Rank int            `json:"id"`
	Name     *string        `json:"name,omitempty"`
	Roles    []Role
	Grid     [4]int
	Meta     map[string]any
	Created  time.Time
	Nested   struct{ A int }
	Handler  func()
	fmt.Stringer
}

type Role string

type Alias = User

type Box[T any] struct {
	Value T
}

/*
Block comment
  indented
*/
func main() { _ = fmt.Sprint(json2.Valid, TrimSpace, time.Now) }
"""


@pytest.fixture(scope="module")
def parsed():
    return GoSourceReader().parse(SOURCE, "sample.go")


class TestGoSourceReader:
    def test_package_name(self, parsed):
        assert parsed.package_name == "sample"

    def test_imports(self, parsed):
        imports = [(spec.path, spec.name) for spec in parsed.imports]
        assert imports == [("fmt", None), ("encoding/json", "json2"), ("time", None)]
        assert parsed.imports[1].local_name == "json2"
        assert parsed.imports[0].local_name == "fmt"

    def test_type_declarations(self, parsed):
        names = [declaration.name for declaration in parsed.type_declarations]
        # Generic types are not supported and skipped
        assert names == ["User", "Role", "Alias"]
        assert parsed.type_declarations[1].type_expr.kind == TypeExprKind.NAME
        assert parsed.type_declarations[2].type_expr.name == "User"

    def test_struct_fields(self, parsed):
        user = parsed.type_declarations[0].type_expr
        assert user.kind == TypeExprKind.STRUCT
        by_name = {tuple(f.names): f for f in user.fields}

        id_field = by_name[("ID", "Rank")]
        assert id_field.type_expr.name == "int"
        assert id_field.tag == 'json:"id"'

        name_field = by_name[("Name",)]
        assert name_field.type_expr.kind == TypeExprKind.POINTER
        assert name_field.type_expr.elem.name == "string"

        assert by_name[("Roles",)].type_expr.kind == TypeExprKind.SLICE
        assert by_name[("Grid",)].type_expr.kind == TypeExprKind.SLICE
        assert by_name[("Grid",)].type_expr.elem.name == "int"
        assert by_name[("Meta",)].type_expr.kind == TypeExprKind.MAP
        assert by_name[("Created",)].type_expr.kind == TypeExprKind.QUALIFIED
        assert by_name[("Created",)].type_expr.name == "time.Time"
        assert by_name[("Nested",)].type_expr.kind == TypeExprKind.STRUCT
        assert by_name[("Handler",)].type_expr.kind == TypeExprKind.UNSUPPORTED

        embedded = by_name[()]
        assert embedded.type_expr.name == "fmt.Stringer"

    def test_comment_groups(self, parsed):
        texts = [group.text for group in parsed.comments]
        assert texts[0] == (
            "User is a user.\n\n@openapi GET /users\n@openapiResponse 200 application/json User\n"
        )
        assert parsed.comments[0].line == 14

    def test_go_directives_are_dropped(self, parsed):
        assert not any("stringer" in group.text for group in parsed.comments)

    def test_block_comment(self, parsed):
        assert parsed.comments[-1].text == "Block comment\n  indented\n"

    def test_syntax_error(self):
        with pytest.raises(SourceEnumerationError, match="syntax error"):
            GoSourceReader().parse(b"package broken\n\ntype User struct {\n", "broken.go")

    def test_read_directory(self):
        files = GoSourceReader().read_directory(TEST_DATA / "petstore" / "model")
        assert [Path(f.path).name for f in files] == ["alias.go", "order.go", "pet.go", "pet_test.go"]
        assert files[-1].is_test
        assert not files[0].is_test

    def test_read_missing_directory(self, tmp_path):
        with pytest.raises(SourceEnumerationError):
            GoSourceReader().read_directory(tmp_path / "missing")


if __name__ == "__main__":
    pytest.main([__file__])
