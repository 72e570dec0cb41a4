"""Go annotations to OpenAPI

Builds an OpenAPI 3.0 document from `@openapi...` annotations found in
the documentation comments of Go source code, deriving component schemas
from the Go struct types the annotations reference.
"""

__version__ = "1.0.0"

from .config import GeneratorConfig, OutputFormat
from .document import Document, DocumentWriter
from .errors import AnnotationError, OutputError, SourceEnumerationError
from .generator import CommentFailure, GenerationResult, OpenAPIGenerator

__all__ = [
    "OpenAPIGenerator",
    "GenerationResult",
    "CommentFailure",
    "GeneratorConfig",
    "OutputFormat",
    "Document",
    "DocumentWriter",
    "AnnotationError",
    "OutputError",
    "SourceEnumerationError",
]
