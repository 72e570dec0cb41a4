"""
Configuration for the OpenAPI generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class OutputFormat(str, Enum):
    """Serialization format of the output document."""

    YAML = "yaml"
    JSON = "json"


@dataclass
class GeneratorConfig:
    """Configuration options for document generation."""

    # Document info
    title: str = "API Docs"
    description: str = "OpenAPI"
    version: str = "1.0.0"

    # Server URLs
    servers: list[str] = field(default_factory=lambda: ["https://localhost:8000"])

    # Output serialization
    output_format: OutputFormat = OutputFormat.YAML
    indent: int = 2

    # Add generation comment at top of the YAML output
    add_generation_comment: bool = True

    # Directory names never descended into
    skip_dirs: list[str] = field(default_factory=lambda: ["vendor", "testdata", "node_modules"])

    # Whether comments of _test.go files are parsed
    include_tests: bool = False

    # Go toolchain locations for resolving imports (environment when empty)
    goroot: str = ""
    gopath: str = ""
    gomodcache: str = ""

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        config.output_format = OutputFormat(config.output_format)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "title": self.title,
            "description": self.description,
            "version": self.version,
            "servers": self.servers,
            "output_format": self.output_format.value,
            "indent": self.indent,
            "add_generation_comment": self.add_generation_comment,
            "skip_dirs": self.skip_dirs,
            "include_tests": self.include_tests,
            "goroot": self.goroot,
            "gopath": self.gopath,
            "gomodcache": self.gomodcache,
        }
