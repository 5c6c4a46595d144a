# Infrastructure module - logging and configuration
# config is imported by name (rajaongkir.infra.config) since it builds on api.client

from .logging import (
    get_logger, configure_logging, request_scope,
    RequestIdFilter, get_request_id, generate_request_id
)

__all__ = [
    "get_logger",
    "configure_logging",
    "request_scope",
    "RequestIdFilter",
    "get_request_id",
    "generate_request_id",
]
