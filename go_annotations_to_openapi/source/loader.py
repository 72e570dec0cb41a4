"""
Per-run cache of parsed Go packages.

Sources are read once per compilation unit and never invalidated: a run
reads a source tree that does not change while it is being analyzed.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .go_reader import GoSourceReader
from .nodes import CompilationUnit, ImportSpec, SourceFile
from .package_locator import PackageLocator

logger = logging.getLogger(__name__)


class SourceLoader:
    """Loads and memoizes the source files of compilation units."""

    def __init__(self, reader: GoSourceReader | None = None, locator: PackageLocator | None = None):
        self.reader = reader or GoSourceReader()
        self.locator = locator or PackageLocator()
        self._files: dict[str, list[SourceFile]] = {}

    def unit_for_directory(self, directory: str | Path) -> CompilationUnit:
        """Build the compilation unit of a local directory."""
        directory = Path(directory).resolve()
        return CompilationUnit(import_path=self.locator.import_path_for(directory), directory=str(directory))

    def files(self, unit: CompilationUnit) -> list[SourceFile]:
        """Return the parsed files of a unit, reading them on first request.

        Raises:
            SourceEnumerationError: If the unit's sources cannot be read
        """
        if unit.import_path not in self._files:
            logger.debug("Reading package %s from %s", unit.import_path, unit.directory)
            self._files[unit.import_path] = self.reader.read_directory(unit.directory)
        return self._files[unit.import_path]

    def imports(self, unit: CompilationUnit) -> list[ImportSpec]:
        """All import statements of the unit's non-test files."""
        return [spec for source_file in self.files(unit) if not source_file.is_test for spec in source_file.imports]
