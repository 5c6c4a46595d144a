# Core module - error taxonomy shared by every client

from .errors import (
    ErrorCategory,
    RajaOngkirError,
    ConfigurationError,
    TransportError,
    ResponseFormatError,
)

__all__ = [
    "ErrorCategory",
    "RajaOngkirError",
    "ConfigurationError",
    "TransportError",
    "ResponseFormatError",
]
