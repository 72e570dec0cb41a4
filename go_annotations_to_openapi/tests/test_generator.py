#!/usr/bin/env python3

from pathlib import Path

import pytest

from go_annotations_to_openapi import GeneratorConfig, OpenAPIGenerator, SourceEnumerationError

TEST_DATA = Path(__file__).parent / "test_data"
PETSTORE = TEST_DATA / "petstore"


class TestOpenAPIGenerator:
    """End to end generation over the fixture trees"""

    @pytest.fixture(scope="class")
    def result(self):
        return OpenAPIGenerator(GeneratorConfig(title="Pets", version="2.0.0")).generate(PETSTORE)

    def test_success(self, result):
        assert result.ok
        assert result.failures == []

    def test_paths(self, result):
        data = result.document.to_dict()
        assert list(data["paths"]) == ["/pets", "/pets/{id}", "/pets/{id}/photo"]
        assert list(data["paths"]["/pets"]) == ["get", "post"]
        assert data["paths"]["/pets/{id}/photo"]["get"]["deprecated"] is True

    def test_info_and_servers(self, result):
        data = result.document.to_dict()
        assert data["openapi"] == "3.0.0"
        assert data["info"] == {"title": "Pets", "description": "OpenAPI", "version": "2.0.0"}
        assert data["servers"] == [{"url": "https://localhost:8000"}]

    def test_components(self, result):
        components = result.document.to_dict()["components"]
        assert sorted(components["schemas"]) == ["Owner", "Pet", "PetVirtLocation", "shared.Pet"]
        assert components["securitySchemes"]["api_key"]["in"] == "header"

    def test_operation_content(self, result):
        paths = result.document.to_dict()["paths"]
        list_pets = paths["/pets"]["get"]
        assert list_pets["summary"] == "List pets"
        assert list_pets["parameters"][0]["name"] == "limit"
        assert list_pets["responses"]["200"]["content"]["application/json"]["schema"] == {
            "type": "array",
            "items": {"$ref": "#/components/schemas/Pet"},
        }

        create = paths["/pets"]["post"]
        assert create["description"] == "Creates a pet.\nThe identifier is assigned by the server."
        assert create["requestBody"]["content"]["application/json"]["schema"] == {"$ref": "#/components/schemas/Pet"}
        legacy = create["responses"]["201"]["content"]["application/json"]["schema"]["properties"]["legacy"]
        assert legacy == {"$ref": "#/components/schemas/shared.Pet"}

    def test_test_files_are_ignored(self, result):
        assert "/test-only" not in result.document.paths

    def test_include_tests(self):
        result = OpenAPIGenerator(GeneratorConfig(include_tests=True)).generate(PETSTORE)
        assert "/test-only" in result.document.paths

    def test_failures_are_collected(self):
        result = OpenAPIGenerator(GeneratorConfig()).generate(TEST_DATA / "broken")
        assert not result.ok
        assert len(result.failures) == 1

        failure = result.failures[0]
        assert failure.file == "main.go"
        assert failure.line == 3
        assert failure.message == "no @openapiResponse for: GET /nothing"
        # Other comments are still processed
        assert "/valid" in result.document.paths

    def test_skipped_directories(self, tmp_path):
        (tmp_path / "go.mod").write_text("module example.com/skip\n", encoding="utf-8")
        for name in ("vendor", ".hidden", "api"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "api.go").write_text(
                f"package {name.strip('.')}\n\n// @openapi GET /{name.strip('.')}\n// @openapiResponse 200 text/plain\n",
                encoding="utf-8",
            )
        result = OpenAPIGenerator(GeneratorConfig()).generate(tmp_path)
        assert list(result.document.paths) == ["/api"]

    def test_syntax_error_aborts(self, tmp_path):
        (tmp_path / "bad.go").write_text("package bad\n\nfunc {\n", encoding="utf-8")
        with pytest.raises(SourceEnumerationError):
            OpenAPIGenerator(GeneratorConfig()).generate(tmp_path)


if __name__ == "__main__":
    pytest.main([__file__])
