"""
Package locator: maps Go import paths to directories.

Looks in vendor directories, the enclosing module (including local
replace directives), GOROOT, the module cache and GOPATH, in that order.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from ..errors import PathUnresolved

logger = logging.getLogger(__name__)

_DIRECTIVE_PATTERN = re.compile(r"^(module|require|replace)\b\s*(.*)$")


@dataclass
class GoModule:
    """The parts of a go.mod file needed for package lookup."""

    root: Path
    path: str = ""
    requires: dict[str, str] = field(default_factory=dict)  # module -> version
    replaces: dict[str, tuple[str, str]] = field(default_factory=dict)  # module -> (target, version)

    def owns(self, import_path: str) -> bool:
        return bool(self.path) and (import_path == self.path or import_path.startswith(self.path + "/"))


def parse_go_mod(text: str, root: Path) -> GoModule:
    """Parse the module, require and replace directives of a go.mod file."""
    module = GoModule(root=root)
    block: str | None = None

    for raw_line in text.splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue

        if block is not None:
            if line == ")":
                block = None
            else:
                _apply_directive(module, block, line)
            continue

        match = _DIRECTIVE_PATTERN.match(line)
        if not match:
            continue
        directive, rest = match.groups()
        if rest == "(":
            block = directive
        else:
            _apply_directive(module, directive, rest)

    return module


def _apply_directive(module: GoModule, directive: str, rest: str) -> None:
    if directive == "module":
        module.path = rest.strip('"')
    elif directive == "require":
        parts = rest.split()
        if len(parts) >= 2:
            module.requires[parts[0]] = parts[1]
    elif directive == "replace" and "=>" in rest:
        source, target = (side.split() for side in rest.split("=>", 1))
        if source and target:
            module.replaces[source[0]] = (target[0], target[1] if len(target) > 1 else "")


def escape_module_path(path: str) -> str:
    """Escape upper case letters the way the Go module cache does."""
    return re.sub(r"[A-Z]", lambda m: "!" + m.group(0).lower(), path)


class PackageLocator:
    """Resolves import paths to package directories."""

    def __init__(
        self,
        goroot: str | None = None,
        gopath: str | None = None,
        gomodcache: str | None = None,
    ):
        """
        Initialize the locator.

        Args:
            goroot: Go installation root (defaults to $GOROOT)
            gopath: GOPATH (defaults to $GOPATH or ~/go)
            gomodcache: Module cache (defaults to $GOMODCACHE or $GOPATH/pkg/mod)
        """
        self.goroot = goroot or os.environ.get("GOROOT") or ""
        self.gopath = gopath or os.environ.get("GOPATH") or str(Path.home() / "go")
        self.gomodcache = gomodcache or os.environ.get("GOMODCACHE") or str(Path(self.gopath) / "pkg" / "mod")
        self._modules: dict[Path, GoModule | None] = {}

    def locate(self, import_path: str, anchor: str | Path) -> str:
        """
        Find the directory of an imported package.

        Args:
            import_path: The import path as written in the import statement
            anchor: Directory of the importing package

        Returns:
            Directory holding the imported package's sources

        Raises:
            PathUnresolved: If no candidate directory exists
        """
        anchor = Path(anchor).resolve()
        for candidate in self._candidates(import_path, anchor):
            if candidate.is_dir():
                logger.debug("Resolved import %s to %s", import_path, candidate)
                return str(candidate)

        raise PathUnresolved(import_path, str(anchor))

    def import_path_for(self, directory: str | Path) -> str:
        """Derive the import path of a directory from its enclosing module."""
        directory = Path(directory).resolve()
        module = self.find_module(directory)
        if module is None or not module.path:
            return directory.as_posix()

        relative = directory.relative_to(module.root).as_posix()
        if relative == ".":
            return module.path
        return f"{module.path}/{relative}"

    def find_module(self, directory: Path) -> GoModule | None:
        """Return the go.mod enclosing a directory, if any."""
        for candidate in (directory, *directory.parents):
            if candidate in self._modules:
                return self._modules[candidate]
            go_mod = candidate / "go.mod"
            if go_mod.is_file():
                module = parse_go_mod(go_mod.read_text(encoding="utf-8"), candidate)
                self._modules[candidate] = module
                return module
        return None

    def _candidates(self, import_path: str, anchor: Path) -> Iterator[Path]:
        for directory in (anchor, *anchor.parents):
            yield directory / "vendor" / import_path

        module = self.find_module(anchor)
        if module is not None:
            if module.owns(import_path):
                yield module.root / import_path[len(module.path) :].lstrip("/")

            replaced = _longest_prefix(import_path, module.replaces)
            if replaced:
                target, version = module.replaces[replaced]
                rest = import_path[len(replaced) :].lstrip("/")
                if target.startswith((".", "/")):
                    yield (module.root / target).resolve() / rest
                elif version:
                    yield Path(self.gomodcache) / f"{escape_module_path(target)}@{version}" / rest

        if self.goroot:
            yield Path(self.goroot) / "src" / import_path

        if module is not None:
            required = _longest_prefix(import_path, module.requires)
            if required:
                rest = import_path[len(required) :].lstrip("/")
                yield Path(self.gomodcache) / f"{escape_module_path(required)}@{module.requires[required]}" / rest

        yield Path(self.gopath) / "src" / import_path


def _longest_prefix(import_path: str, modules: dict[str, object]) -> str:
    matches = [m for m in modules if import_path == m or import_path.startswith(m + "/")]
    return max(matches, key=len, default="")
