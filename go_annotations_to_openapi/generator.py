"""
Run orchestration.

Walks a source tree, builds one compilation unit per Go package
directory and feeds every comment to the directive parser. Errors of a
single comment are collected and never stop the run; a package whose
sources cannot be read aborts it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .analyzer import CrossReferenceResolver, SchemaSynthesizer, StructCatalog, TypeDescriptorBuilder
from .config import GeneratorConfig
from .directives import DirectiveParser
from .document.models import Document, Info
from .errors import AnnotationError
from .source import CompilationUnit, GoSourceReader, PackageLocator, SourceLoader

logger = logging.getLogger(__name__)


@dataclass
class CommentFailure:
    """A comment that could not be turned into operations."""

    file: str
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.message} - {self.file}:{self.line}"


@dataclass
class GenerationResult:
    document: Document
    failures: list[CommentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class OpenAPIGenerator:
    """Generates an OpenAPI document from annotated Go sources."""

    def __init__(self, config: GeneratorConfig | None = None, loader: SourceLoader | None = None):
        """
        Initialize the generator.

        Args:
            config: Generation options
            loader: Source loader; one is built from the config when omitted
        """
        self.config = config or GeneratorConfig()
        self.loader = loader or SourceLoader(
            GoSourceReader(),
            PackageLocator(
                goroot=self.config.goroot or None,
                gopath=self.config.gopath or None,
                gomodcache=self.config.gomodcache or None,
            ),
        )
        self.document = Document(
            info=Info(title=self.config.title, description=self.config.description, version=self.config.version),
            servers=list(self.config.servers),
        )
        self.catalog = StructCatalog(self.loader)
        self.resolver = CrossReferenceResolver(self.loader)
        self.builder = TypeDescriptorBuilder(self.catalog, self.resolver)
        self.synthesizer = SchemaSynthesizer(self.document, self.catalog, self.builder)
        self.parser = DirectiveParser(self.document, self.synthesizer)

    def generate(self, root: str | Path) -> GenerationResult:
        """
        Process every Go package under a directory.

        Args:
            root: Root of the source tree

        Returns:
            GenerationResult with the document and collected comment failures

        Raises:
            SourceEnumerationError: If a package's sources cannot be read
        """
        root = Path(root).resolve()
        result = GenerationResult(document=self.document)
        for directory in self.package_directories(root):
            unit = self.loader.unit_for_directory(directory)
            result.failures.extend(self.process_unit(unit, root))
        return result

    def process_unit(self, unit: CompilationUnit, root: Path | None = None) -> list[CommentFailure]:
        """Parse all comments of one unit, returning the failures."""
        logger.info("Processing package %s", unit.import_path)
        failures = []
        for source_file in self.loader.files(unit):
            if source_file.is_test and not self.config.include_tests:
                continue
            display_path = _display_path(source_file.path, root)
            for comment in source_file.comments:
                try:
                    self.parser.apply_comment(comment.text, unit)
                except AnnotationError as e:
                    failures.append(CommentFailure(file=display_path, line=comment.line, message=str(e)))
        return failures

    def package_directories(self, root: Path) -> list[Path]:
        """Directories under root (root included) that contain Go files, in walk order."""
        directories = []
        pending = [root]
        while pending:
            directory = pending.pop(0)
            children = sorted(p for p in directory.iterdir())
            if any(p.suffix == ".go" and p.is_file() for p in children):
                directories.append(directory)
            pending.extend(p for p in children if p.is_dir() and not self._skipped(p))
        return directories

    def _skipped(self, directory: Path) -> bool:
        return directory.name.startswith((".", "_")) or directory.name in self.config.skip_dirs


def _display_path(path: str, root: Path | None) -> str:
    if root is None:
        return path
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return path
