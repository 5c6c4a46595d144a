# RajaOngkir shipping-rate client
# Province/city/subdistrict lookup, cost calculation and waybill tracking

from .api import AccountTier, AsyncRateClient, ClientConfig, EndpointRequest, RateClient
from .core import (
    ConfigurationError,
    ErrorCategory,
    RajaOngkirError,
    ResponseFormatError,
    TransportError,
)
from .infra.config import ConfigManager, load_client_config

__version__ = "1.0.0"

__all__ = [
    "AccountTier",
    "AsyncRateClient",
    "ClientConfig",
    "ConfigManager",
    "ConfigurationError",
    "EndpointRequest",
    "ErrorCategory",
    "RajaOngkirError",
    "RateClient",
    "ResponseFormatError",
    "TransportError",
    "load_client_config",
]
