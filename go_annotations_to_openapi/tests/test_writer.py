#!/usr/bin/env python3

import json

import pytest
import yaml

from go_annotations_to_openapi import __version__
from go_annotations_to_openapi.config import GeneratorConfig, OutputFormat
from go_annotations_to_openapi.document import Document, DocumentWriter, Info, Operation, Response
from go_annotations_to_openapi.errors import OutputError


def make_document() -> Document:
    document = Document(info=Info(title="Pets"), servers=["https://api.example.com"])
    document.add_operation("/pets", "get", Operation(summary="List", responses={"200": Response(description="OK")}))
    return document


class TestDocumentWriter:
    def test_yaml_with_header(self):
        writer = DocumentWriter(GeneratorConfig())
        content = writer.render(make_document(), "go_annotations_to_openapi ./api")

        first_line = content.splitlines()[0]
        assert first_line == f"# Generated by go_annotations_to_openapi v{__version__} : go_annotations_to_openapi ./api"
        data = yaml.safe_load(content)
        assert data["openapi"] == "3.0.0"
        assert data["paths"]["/pets"]["get"]["responses"]["200"]["description"] == "OK"

    def test_yaml_key_order(self):
        content = DocumentWriter(GeneratorConfig(add_generation_comment=False)).render(make_document())
        top_level = [line.split(":")[0] for line in content.splitlines() if line and not line.startswith((" ", "-"))]
        assert top_level == ["openapi", "info", "servers", "paths"]
        assert not content.startswith("#")

    def test_indent(self):
        content = DocumentWriter(GeneratorConfig(indent=4, add_generation_comment=False)).render(make_document())
        assert "\n    title: Pets\n" in content

    def test_json(self):
        writer = DocumentWriter(GeneratorConfig(output_format=OutputFormat.JSON))
        content = writer.render(make_document(), "ignored")
        data = json.loads(content)
        assert data["info"]["title"] == "Pets"
        assert data["servers"] == [{"url": "https://api.example.com"}]

    def test_write(self, tmp_path):
        writer = DocumentWriter(GeneratorConfig())
        target = tmp_path / "out" / "openapi.yaml"
        content = writer.render(make_document())
        writer.write(target, content)

        assert target.read_text(encoding="utf-8") == content
        assert [p.name for p in target.parent.iterdir()] == ["openapi.yaml"]

    def test_invalid_content_is_not_written(self, tmp_path):
        writer = DocumentWriter(GeneratorConfig())
        target = tmp_path / "openapi.yaml"
        target.write_text("previous", encoding="utf-8")

        with pytest.raises(OutputError):
            writer.write(target, "- not\n- a mapping\n")
        assert target.read_text(encoding="utf-8") == "previous"
        assert [p.name for p in tmp_path.iterdir()] == ["openapi.yaml"]

    def test_validate_json(self):
        writer = DocumentWriter(GeneratorConfig(output_format=OutputFormat.JSON))
        with pytest.raises(OutputError, match="not valid json"):
            writer.validate("{not json")


if __name__ == "__main__":
    pytest.main([__file__])
