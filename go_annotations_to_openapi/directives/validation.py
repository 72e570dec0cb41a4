"""
Validation of parsed directive values.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from ..document.models import Parameter
from ..errors import ValidationError

HTTP_METHODS = ("get", "head", "post", "put", "delete", "connect", "options", "trace", "patch")

PARAM_LOCATIONS = ("path", "query", "header", "cookie")
PARAM_TYPES = ("string", "integer", "number", "boolean", "object", "array")

REQUEST_CONTENT_TYPES = ("application/json", "multipart/form-data", "application/x-www-form-urlencoded")
RESPONSE_CONTENT_TYPES = ("text/plain", "application/json", "application/octet-stream")

DEFAULT_STATUS = "default"
MIN_STATUS = 100
MAX_STATUS = 599


def validate_path(method: str, path: str) -> None:
    if method not in HTTP_METHODS:
        raise ValidationError("Unknown HTTP method")
    if not path.startswith("/") or any(c.isspace() for c in path):
        raise ValidationError("Invalid HTTP path")
    parts = urlsplit(path)
    if parts.scheme or parts.netloc:
        raise ValidationError("Invalid HTTP path")


def validate_param(param: Parameter) -> None:
    if not param.name:
        raise ValidationError("Invalid param name")
    if param.location not in PARAM_LOCATIONS:
        raise ValidationError("Invalid param 'in'")
    if param.schema is None or param.schema.type not in PARAM_TYPES:
        raise ValidationError("Invalid param 'type'")


def validate_request_content_type(content_type: str) -> None:
    if content_type not in REQUEST_CONTENT_TYPES:
        raise ValidationError("Unsupported Content-Type")


def validate_response(status: str, content_type: str) -> None:
    if status != DEFAULT_STATUS:
        if not status.isdigit() or not MIN_STATUS <= int(status) <= MAX_STATUS:
            raise ValidationError("Invalid HTTP status code")
    if content_type not in RESPONSE_CONTENT_TYPES:
        raise ValidationError("Unsupported Content-Type")
