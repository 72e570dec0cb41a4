#!/usr/bin/env python3

from pathlib import Path

import pytest

from go_annotations_to_openapi.analyzer import dedup_key
from go_annotations_to_openapi.config import GeneratorConfig
from go_annotations_to_openapi.document import SchemaNode
from go_annotations_to_openapi.analyzer.type_descriptor import TypeDescriptor, TypeKind
from go_annotations_to_openapi.errors import AliasCycleError, AnnotationError, SchemaNameConflict, TypeNotFound
from go_annotations_to_openapi.generator import OpenAPIGenerator
from go_annotations_to_openapi.source import CompilationUnit

PETSTORE = Path(__file__).parent / "test_data" / "petstore"


def make_generator() -> tuple[OpenAPIGenerator, CompilationUnit]:
    generator = OpenAPIGenerator(GeneratorConfig())
    return generator, generator.loader.unit_for_directory(PETSTORE / "handlers")


class TestDedupKey:
    def test_free_name(self):
        unit = CompilationUnit("example.com/app/model")
        assert dedup_key("User", unit, {}) == ("User", False)

    def test_same_unit_is_present(self):
        unit = CompilationUnit("example.com/app/model")
        table = {"User": SchemaNode(origin=unit)}
        assert dedup_key("User", unit, table) == ("User", True)

    def test_prefixes_innermost_segment_first(self):
        model = CompilationUnit("example.com/app/model")
        api_model = CompilationUnit("example.com/api/model")
        table = {"User": SchemaNode(origin=model), "model.User": SchemaNode(origin=model)}
        assert dedup_key("User", api_model, table) == ("api.model.User", False)

    def test_exhausted(self):
        model = CompilationUnit("model")
        other = CompilationUnit("other/model")
        table = {"User": SchemaNode(origin=other), "model.User": SchemaNode(origin=other)}
        with pytest.raises(SchemaNameConflict):
            dedup_key("User", model, table)

    def test_exhausted_by_distinct_import_paths(self):
        generator, _ = make_generator()
        schemas = generator.document.schemas
        schemas["Pet"] = SchemaNode(type="object", origin=CompilationUnit("example.com/models"))
        schemas["models.Pet"] = SchemaNode(type="object", origin=CompilationUnit("example.com/v2/models"))
        descriptor = TypeDescriptor(kind=TypeKind.NOMINAL, name="Pet", unit=CompilationUnit("models"))

        with pytest.raises(SchemaNameConflict) as exc_info:
            generator.synthesizer.schema_for(descriptor)
        assert isinstance(exc_info.value, AnnotationError)
        assert set(schemas) == {"Pet", "models.Pet"}


class TestSchemaSynthesizer:
    def test_nominal_type_is_registered_and_referenced(self):
        generator, handlers = make_generator()
        node = generator.synthesizer.schema_for_ref("model.Pet", handlers)

        assert node.to_dict() == {"$ref": "#/components/schemas/Pet"}
        assert "Pet" in generator.document.schemas
        assert generator.document.resolve(node).type == "object"

    def test_schema_is_memoized(self):
        generator, handlers = make_generator()
        first = generator.synthesizer.schema_for_ref("model.Pet", handlers)
        body = generator.document.schemas["Pet"]
        second = generator.synthesizer.schema_for_ref("*model.Pet", handlers)

        assert first.ref == second.ref
        assert generator.document.schemas["Pet"] is body

    def test_pet_properties(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        pet = generator.document.schemas["Pet"].to_dict()
        properties = pet["properties"]

        assert pet["description"] == "A pet in the store"
        assert pet["required"] == ["id", "name"]
        assert properties["id"] == {"type": "integer", "example": "7"}
        assert properties["name"] == {"type": "string", "description": "Display name"}
        assert properties["kind"] == {"type": "string", "enum": ["dog", "cat"]}
        assert properties["status"] == {"type": "string"}
        assert properties["tags"] == {"type": "array", "items": {"type": "string"}}
        assert properties["attributes"] == {"type": "object", "additionalProperties": {}}
        assert properties["born"] == {"type": "string", "format": "date-time"}
        assert properties["weight"] == {"type": "number", "format": "double"}
        assert properties["photo"] == {"type": "string", "format": "binary"}
        assert properties["owner"] == {"$ref": "#/components/schemas/Owner"}
        assert properties["location"] == {"$ref": "#/components/schemas/PetVirtLocation"}

    def test_omitted_and_unexported_fields(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        properties = generator.document.schemas["Pet"].properties

        assert "Secret" not in properties
        assert "internal" not in properties
        assert "Callback" not in properties

    def test_explicit_type_bypasses_inference(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        external_id = generator.document.schemas["Pet"].properties["external_id"]
        assert external_id.to_dict() == {"type": "string", "format": "uuid"}

    def test_self_reference(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        properties = generator.document.schemas["Pet"].to_dict()["properties"]

        assert properties["parent"] == {"$ref": "#/components/schemas/Pet"}
        assert properties["children"] == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}

    def test_field_without_json_name_uses_field_name(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        owner = generator.document.schemas["Owner"].to_dict()
        assert set(owner["properties"]) == {"name", "Email"}

    def test_inline_struct(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        location = generator.document.schemas["PetVirtLocation"].to_dict()
        assert location["properties"]["lat"] == {"type": "number", "format": "float"}

    def test_same_name_from_other_package(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        node = generator.synthesizer.schema_for_ref("legacy.Pet", handlers)

        assert node.ref == "#/components/schemas/shared.Pet"
        assert set(generator.document.schemas["shared.Pet"].properties) == {"label"}
        assert set(generator.document.schemas["Pet"].properties) != {"label"}

    def test_alias_resolves_to_target_schema(self):
        generator, handlers = make_generator()
        node = generator.synthesizer.schema_for_ref("model.PetAliasAlias", handlers)
        assert node.ref == "#/components/schemas/Pet"
        assert "PetAlias" not in generator.document.schemas
        assert "PetAliasAlias" not in generator.document.schemas

    def test_array_of_nominal(self):
        generator, handlers = make_generator()
        node = generator.synthesizer.schema_for_ref("model.PetList", handlers)
        assert node.to_dict() == {"type": "array", "items": {"$ref": "#/components/schemas/Pet"}}

    def test_primitive_schema(self):
        generator, handlers = make_generator()
        assert generator.synthesizer.schema_for_ref("int32", handlers).to_dict() == {"type": "integer"}
        assert generator.document.schemas == {}

    def test_errors_leave_no_placeholder(self):
        generator, handlers = make_generator()
        with pytest.raises(AliasCycleError):
            generator.synthesizer.schema_for_ref("model.Loop", handlers)
        with pytest.raises(TypeNotFound):
            generator.synthesizer.schema_for_ref("Missing", handlers)
        assert generator.document.schemas == {}

    def test_failed_expansion_removes_mutual_references(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Pet", handlers)
        before = set(generator.document.schemas)

        with pytest.raises(TypeNotFound):
            generator.synthesizer.schema_for_ref("model.Order", handlers)
        assert "Order" not in generator.document.schemas
        assert "Customer" not in generator.document.schemas
        assert set(generator.document.schemas) == before

    def test_field_overrides_kept_beside_reference(self):
        generator, handlers = make_generator()
        generator.synthesizer.schema_for_ref("model.Shelter", handlers)
        resident = generator.document.schemas["Shelter"].to_dict()["properties"]["resident"]

        assert resident == {
            "$ref": "#/components/schemas/Pet",
            "description": "Current resident",
            "example": "7",
        }
        assert "description" not in generator.document.schemas["Pet"].properties["owner"].to_dict()


if __name__ == "__main__":
    pytest.main([__file__])
