"""
Error Handling Module
---------------------
Typed errors with classification.

Every failure the client can produce is one of three kinds:
- configuration: bad tier, missing key (construction time)
- transport: httpx could not complete the request
- response format: the body was not JSON

Upstream envelope errors (status.code != 200) are data, not exceptions.
"""

from enum import Enum, auto
from typing import Optional


class ErrorCategory(Enum):
    """Categories of errors for handling decisions."""
    CONFIGURATION = auto()     # Invalid tier, key or config value
    TRANSPORT = auto()         # Network/HTTP client failure
    RESPONSE_FORMAT = auto()   # Body could not be decoded as JSON


class RajaOngkirError(Exception):
    """Base class for all client errors."""

    category: ErrorCategory = ErrorCategory.CONFIGURATION
    recoverable: bool = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.category.name}: {self})"


class ConfigurationError(RajaOngkirError):
    """Raised when the client is constructed with unusable settings."""

    category = ErrorCategory.CONFIGURATION
    recoverable = False


class TransportError(RajaOngkirError):
    """
    Raised when the underlying HTTP client fails (DNS, connect, TLS, timeout).

    The original httpx exception is kept on ``cause`` and chained as
    ``__cause__``. Callers may retry; the client never does.
    """

    category = ErrorCategory.TRANSPORT
    recoverable = True

    def __init__(self, cause: Exception, method: str = "", path: str = ""):
        self.cause = cause
        self.method = method
        self.path = path
        target = f"{method} {path}".strip()
        prefix = f"{target}: " if target else ""
        super().__init__(f"{prefix}{type(cause).__name__}: {cause}")


class ResponseFormatError(RajaOngkirError):
    """Raised when a response body is not valid JSON."""

    category = ErrorCategory.RESPONSE_FORMAT
    recoverable = False

    # Keep messages readable when an HTML error page comes back
    PREVIEW_LENGTH = 200

    def __init__(self, body: str, status_code: Optional[int] = None, path: str = ""):
        self.body = body
        self.status_code = status_code
        self.path = path

        preview = body[:self.PREVIEW_LENGTH]
        if len(body) > self.PREVIEW_LENGTH:
            preview += "..."
        where = f" from {path}" if path else ""
        super().__init__(
            f"Response{where} is not valid JSON "
            f"(HTTP {status_code}): {preview!r}"
        )
