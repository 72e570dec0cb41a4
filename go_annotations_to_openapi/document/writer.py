"""
Document serialization and atomic output.

The document is rendered to YAML or JSON, prefixed with a generation
comment (YAML only), and written through a temporary file in the target
directory that replaces the target once the content re-parses.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import jinja2
import yaml

from .. import __version__
from ..config import GeneratorConfig, OutputFormat
from ..errors import OutputError
from .models import Document

CURRENT_DIR = Path(__file__).parent.parent.resolve().absolute()


class _DocumentDumper(yaml.SafeDumper):
    """Safe dumper that indents block sequences under their parent key."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


class DocumentWriter:
    """Serializes a Document and writes it to disk."""

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True)
        with open(CURRENT_DIR / "templates" / "header.yaml.jinja2", encoding="utf-8") as f:
            self.header = self.jinja_env.from_string(f.read())

    def render(self, document: Document, command_line: str = "") -> str:
        """
        Serialize a document.

        Args:
            document: The document to serialize
            command_line: Command line recorded in the generation comment

        Returns:
            YAML or JSON text
        """
        data = document.to_dict()

        if self.config.output_format == OutputFormat.JSON:
            return json.dumps(data, indent=self.config.indent, ensure_ascii=False) + "\n"

        body = yaml.dump(
            data,
            Dumper=_DocumentDumper,
            indent=self.config.indent,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
        if not self.config.add_generation_comment:
            return body

        header = self.header.render(version=__version__, command_line=command_line).rstrip("\n")
        return f"{header}\n{body}"

    def write(self, path: Path, content: str) -> None:
        """Write content to a file atomically.

        Raises:
            OutputError: If the content does not parse back
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)
            self.validate(content)
            temp_path.replace(path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def validate(self, content: str) -> None:
        """Check that serialized content parses back into a mapping.

        Raises:
            OutputError: If validation fails
        """
        try:
            if self.config.output_format == OutputFormat.JSON:
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (ValueError, yaml.YAMLError) as e:
            raise OutputError(f"Generated document is not valid {self.config.output_format.value}: {e}") from e

        if not isinstance(data, dict) or "openapi" not in data:
            raise OutputError("Generated document has no 'openapi' version field")
