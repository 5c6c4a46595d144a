# API module - RajaOngkir endpoints over httpx
# One client per API key and account tier, requests built fresh per call

from .client import AccountTier, AsyncRateClient, ClientConfig, RateClient, decode_response
from .endpoints import EndpointRequest

__all__ = [
    "AccountTier",
    "AsyncRateClient",
    "ClientConfig",
    "EndpointRequest",
    "RateClient",
    "decode_response",
]
