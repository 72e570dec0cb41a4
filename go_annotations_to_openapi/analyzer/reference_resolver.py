"""
Cross-reference resolver for qualified type names.

Maps the package part of `pkg.Type` to the compilation unit it was
imported from.
"""

from __future__ import annotations

import logging

from ..errors import ReferenceNotFound
from ..source.loader import SourceLoader
from ..source.nodes import CompilationUnit, ImportSpec

logger = logging.getLogger(__name__)


class CrossReferenceResolver:
    """Resolves package names to compilation units."""

    def __init__(self, loader: SourceLoader):
        """
        Initialize the resolver.

        Args:
            loader: Source loader giving access to imports and the package locator
        """
        self.loader = loader
        self._resolved: dict[tuple[str, str], CompilationUnit] = {}

    def resolve(self, local_name: str, unit: CompilationUnit) -> CompilationUnit:
        """
        Resolve a package name used inside a unit.

        Args:
            local_name: Package name or import alias, e.g. "json2" in "json2.RawMessage"
            unit: The unit in which the name appears

        Returns:
            The imported compilation unit

        Raises:
            ReferenceNotFound: If the unit has no matching import
            PathUnresolved: If the import path cannot be mapped to a directory
        """
        key = (unit.import_path, local_name)
        if key in self._resolved:
            return self._resolved[key]

        spec = self.find_import(local_name, unit)
        if spec is None:
            raise ReferenceNotFound(local_name, unit.import_path)

        directory = self.loader.locator.locate(spec.path, unit.directory)
        resolved = CompilationUnit(import_path=spec.path, directory=directory)
        logger.debug("Package %s in %s resolves to %s", local_name, unit.import_path, directory)
        self._resolved[key] = resolved
        return resolved

    def find_import(self, local_name: str, unit: CompilationUnit) -> ImportSpec | None:
        """Find the import binding a package name; explicit renames win."""
        imports = self.loader.imports(unit)
        for spec in imports:
            if spec.name == local_name:
                return spec
        for spec in imports:
            if not spec.name and spec.local_name == local_name:
                return spec
        return None
