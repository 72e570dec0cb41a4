"""
Exception hierarchy for annotation processing.

Errors raised while handling a single documentation comment derive from
AnnotationError and are collected per comment. SourceEnumerationError is
fatal for the whole run.
"""

from __future__ import annotations


class AnnotationError(Exception):
    """Base class for errors attributable to one directive or type reference."""


class ValidationError(AnnotationError):
    """Raised when a directive is syntactically valid but semantically wrong.

    This can happen when:
    - The HTTP method is unknown or the path is malformed
    - The content type is not supported for a request or response
    - The status code is out of range
    - An operation declares no response
    """


class SchemaSyntaxError(AnnotationError):
    """Raised when a brace-delimited pseudo-schema payload cannot be parsed."""


class ResolutionError(AnnotationError):
    """Base class for failures while resolving a type reference."""


class ReferenceNotFound(ResolutionError):
    """Raised when no import in the current unit matches a package name."""

    def __init__(self, package_name: str, import_path: str):
        self.package_name = package_name
        self.import_path = import_path
        super().__init__(f"not found import path for package '{package_name}' in '{import_path}'")


class PathUnresolved(ResolutionError):
    """Raised when an import path cannot be mapped to a directory."""

    def __init__(self, import_path: str, anchor: str):
        self.import_path = import_path
        self.anchor = anchor
        super().__init__(f"file system path for '{import_path}' not found from '{anchor}'")


class SchemaNameConflict(ResolutionError):
    """Raised when every import path prefix of a type name is claimed by another package."""

    def __init__(self, name: str, import_path: str):
        self.name = name
        self.import_path = import_path
        super().__init__(f"cannot find a free schema name for '{name}' from '{import_path}'")


class TypeNotFound(ResolutionError):
    """Raised when a type name is neither a built-in nor declared in its unit."""

    def __init__(self, name: str, import_path: str, directory: str):
        self.name = name
        self.import_path = import_path
        self.directory = directory
        super().__init__(f"type with name '{name}' was not found in package '{directory}' with import path '{import_path}'")


class AliasCycleError(TypeNotFound):
    """Raised when a chain of type aliases refers back to itself."""

    def __init__(self, chain: list[str], import_path: str, directory: str):
        self.chain = chain
        super().__init__(chain[-1], import_path, directory)
        self.args = (f"type alias cycle: {' -> '.join(chain)} in package '{directory}' with import path '{import_path}'",)


class DirectiveError(AnnotationError):
    """Wraps an AnnotationError with the directive line that caused it."""

    def __init__(self, cause: AnnotationError, line: str):
        self.cause = cause
        self.line = line
        super().__init__(f"{cause} ({line.strip()})")


class SourceEnumerationError(Exception):
    """Raised when a directory's Go sources cannot be read or parsed.

    No partial catalog is usable after this error, so it aborts the run.
    """


class OutputError(Exception):
    """Raised when the serialized document fails validation before being written."""
