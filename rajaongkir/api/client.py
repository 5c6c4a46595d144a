"""
RajaOngkir API Client
---------------------
Thin façade over httpx for the RajaOngkir shipping-rate service.

Rules:
- Configuration is immutable once the client exists
- Every call builds a fresh EndpointRequest (see endpoints.py)
- Decoded JSON is returned verbatim; status.code is the caller's business
- Transport failures raise TransportError, non-JSON bodies raise
  ResponseFormatError; nothing is retried
- The API key is never logged
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional
import time

import httpx

from rajaongkir.api import endpoints
from rajaongkir.api.endpoints import DEFAULT_WEIGHT, Courier, EndpointRequest
from rajaongkir.core.errors import ConfigurationError, ResponseFormatError, TransportError
from rajaongkir.infra.logging import get_logger, request_scope

SHARED_BASE_URL = "http://api.rajaongkir.com/"
PRO_BASE_URL = "http://pro.rajaongkir.com/api/"

DEFAULT_TIMEOUT_SECONDS = 30.0


class AccountTier(Enum):
    """RajaOngkir subscription levels."""
    STARTER = "starter"
    BASIC = "basic"
    PRO = "pro"

    @classmethod
    def parse(cls, value: Any) -> "AccountTier":
        """Accept a member or its string value; anything else is a ConfigurationError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(tier.value for tier in cls)
            raise ConfigurationError(
                f"Unknown account tier: {value!r}. Expected one of: {valid}"
            ) from None


def _header_items(extra_headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Copy extra headers, turning numbers into strings; anything else is rejected."""
    headers = {}
    for name, value in (extra_headers or {}).items():
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Header name must be a non-empty string, got {name!r}")
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise ConfigurationError(
                f"Header {name!r} must have a string value, got {type(value).__name__}"
            )
        headers[name] = value
    return headers


@dataclass(frozen=True)
class ClientConfig:
    """Credentials and tier for one client. Immutable and hashable."""
    api_key: str = field(repr=False)
    account_tier: AccountTier = AccountTier.STARTER
    # Read-only mapping; equality compares contents, hashing skips it
    extra_headers: Mapping[str, str] = field(default_factory=dict, repr=False, hash=False)
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        if not self.api_key:
            raise ConfigurationError("API key is required")
        object.__setattr__(self, "account_tier", AccountTier.parse(self.account_tier))
        object.__setattr__(
            self, "extra_headers", MappingProxyType(_header_items(self.extra_headers))
        )

    @property
    def base_url(self) -> str:
        if self.account_tier is AccountTier.PRO:
            return PRO_BASE_URL
        return f"{SHARED_BASE_URL}{self.account_tier.value}/"

    @property
    def headers(self) -> httpx.Headers:
        """
        Default headers with extra_headers merged on top.

        Extra headers win on a (case-insensitive) name collision, including
        over 'key' and 'content-type'.
        """
        headers = httpx.Headers({
            "content-type": "application/x-www-form-urlencoded",
            "key": self.api_key,
        })
        headers.update(self.extra_headers)
        return headers


def decode_response(response: httpx.Response, path: str = "") -> Any:
    """Decode a response body as JSON, whatever the HTTP status."""
    try:
        return response.json()
    except ValueError as e:
        raise ResponseFormatError(response.text, response.status_code, path) from e


class _BaseRateClient:
    """Configuration, logging and decoding shared by the sync and async clients."""

    def __init__(
        self,
        api_key: str,
        account_tier: Any = AccountTier.STARTER,
        extra_headers: Optional[Mapping[str, str]] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._config = ClientConfig(
            api_key=api_key,
            account_tier=account_tier,
            extra_headers=extra_headers or {},
            timeout_seconds=timeout,
        )
        self._logger = get_logger("api.client")

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def account_tier(self) -> AccountTier:
        return self._config.account_tier

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(account_tier={self.account_tier.value!r}, "
            f"base_url={self.base_url!r})"
        )

    def _request_kwargs(self, request: EndpointRequest) -> dict:
        if request.is_form:
            return {"data": request.params}
        return {"params": request.params}

    def _log_request(self, request: EndpointRequest) -> float:
        self._logger.debug(
            f"{request.method} {request.path} {request.params}",
            extra={"method": request.method, "path": request.path, "params": request.params},
        )
        return time.perf_counter()

    def _transport_failed(self, request: EndpointRequest, error: httpx.RequestError) -> TransportError:
        self._logger.warning(
            f"{request.method} {request.path} failed: {type(error).__name__}: {error}",
            extra={"method": request.method, "path": request.path},
        )
        return TransportError(error, request.method, request.path)

    def _decode(self, request: EndpointRequest, response: httpx.Response, started: float) -> Any:
        elapsed_ms = (time.perf_counter() - started) * 1000
        self._logger.debug(
            f"{request.method} {request.path} -> {response.status_code} ({elapsed_ms:.0f}ms)",
            extra={
                "method": request.method,
                "path": request.path,
                "status_code": response.status_code,
                "elapsed_ms": round(elapsed_ms, 1),
            },
        )
        try:
            return decode_response(response, request.path)
        except ResponseFormatError:
            self._logger.warning(
                f"{request.method} {request.path} returned a non-JSON body "
                f"(HTTP {response.status_code})"
            )
            raise


class RateClient(_BaseRateClient):
    """
    Blocking RajaOngkir client.

    One instance per API key and account tier. The underlying httpx.Client
    is created once and reused by every call; close() or a with-block
    releases it.

    Usage:
        with RateClient("your-api-key", "starter") as client:
            result = client.get_cost(501, 114, weight=1700, courier="jne")
    """

    def __init__(
        self,
        api_key: str,
        account_tier: Any = AccountTier.STARTER,
        extra_headers: Optional[Mapping[str, str]] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        super().__init__(api_key, account_tier, extra_headers, timeout=timeout)
        self._http = httpx.Client(
            base_url=self._config.base_url,
            headers=self._config.headers,
            timeout=self._config.timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[httpx.BaseTransport] = None
    ) -> "RateClient":
        return cls(
            config.api_key,
            config.account_tier,
            config.extra_headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "RateClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def send(self, request: EndpointRequest) -> Any:
        """Issue one request and return the decoded JSON body."""
        with request_scope():
            started = self._log_request(request)
            try:
                response = self._http.request(
                    request.method, request.path, **self._request_kwargs(request)
                )
            except httpx.RequestError as e:
                raise self._transport_failed(request, e) from e
            return self._decode(request, response, started)

    def get_province(self, province_id=None) -> Any:
        """
        Get province(s).

        Args:
            province_id: ID of one province; None lists all provinces
        """
        return self.send(endpoints.province(province_id))

    def get_city(self, province_id=None, city_id=None) -> Any:
        """
        Get cities, optionally narrowed by province and/or city ID.

        With neither argument every city is listed.
        """
        return self.send(endpoints.city(province_id, city_id))

    def get_subdistrict(self, city_id, subdistrict_id=None) -> Any:
        """Get the subdistricts of a city (pro accounts only)."""
        return self.send(endpoints.subdistrict(city_id, subdistrict_id))

    def get_cost(
        self,
        origin,
        destination,
        weight=DEFAULT_WEIGHT,
        courier: Optional[Courier] = None,
        origin_type: Optional[str] = None,
        destination_type: Optional[str] = None,
    ) -> Any:
        """
        Calculate domestic shipping cost.

        Args:
            origin: ID of origin city or subdistrict
            destination: ID of destination city or subdistrict
            weight: Weight in grams
            courier: Courier code, or a list of codes for several couriers
            origin_type: "city" or "subdistrict"; other values are not sent
            destination_type: "city" or "subdistrict"; other values are not sent
        """
        return self.send(endpoints.cost(
            origin, destination, weight, courier, origin_type, destination_type
        ))

    def get_international_origin(self, city_id=None, province_id=None) -> Any:
        return self.send(endpoints.international_origin(city_id, province_id))

    def get_international_destination(self, country_id=None) -> Any:
        """Get destination countries; None lists all of them."""
        return self.send(endpoints.international_destination(country_id))

    def get_international_cost(
        self,
        origin,
        destination,
        weight=DEFAULT_WEIGHT,
        courier: Optional[Courier] = None,
    ) -> Any:
        """
        Calculate international shipping cost.

        Args:
            origin: ID of origin city
            destination: ID of destination country
            weight: Weight in grams
            courier: Courier code, or a list of codes
        """
        return self.send(endpoints.international_cost(origin, destination, weight, courier))

    def get_waybill(self, waybill, courier: Courier) -> Any:
        """Track a shipment by waybill number with the courier that carries it."""
        return self.send(endpoints.waybill(waybill, courier))


class AsyncRateClient(_BaseRateClient):
    """
    Awaitable RajaOngkir client over httpx.AsyncClient.

    Same operations and error contract as RateClient.
    """

    def __init__(
        self,
        api_key: str,
        account_tier: Any = AccountTier.STARTER,
        extra_headers: Optional[Mapping[str, str]] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, account_tier, extra_headers, timeout=timeout)
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers=self._config.headers,
            timeout=self._config.timeout_seconds,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "AsyncRateClient":
        return cls(
            config.api_key,
            config.account_tier,
            config.extra_headers,
            timeout=config.timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncRateClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    async def send(self, request: EndpointRequest) -> Any:
        """Issue one request and return the decoded JSON body."""
        with request_scope():
            started = self._log_request(request)
            try:
                response = await self._http.request(
                    request.method, request.path, **self._request_kwargs(request)
                )
            except httpx.RequestError as e:
                raise self._transport_failed(request, e) from e
            return self._decode(request, response, started)

    async def get_province(self, province_id=None) -> Any:
        return await self.send(endpoints.province(province_id))

    async def get_city(self, province_id=None, city_id=None) -> Any:
        return await self.send(endpoints.city(province_id, city_id))

    async def get_subdistrict(self, city_id, subdistrict_id=None) -> Any:
        return await self.send(endpoints.subdistrict(city_id, subdistrict_id))

    async def get_cost(
        self,
        origin,
        destination,
        weight=DEFAULT_WEIGHT,
        courier: Optional[Courier] = None,
        origin_type: Optional[str] = None,
        destination_type: Optional[str] = None,
    ) -> Any:
        return await self.send(endpoints.cost(
            origin, destination, weight, courier, origin_type, destination_type
        ))

    async def get_international_origin(self, city_id=None, province_id=None) -> Any:
        return await self.send(endpoints.international_origin(city_id, province_id))

    async def get_international_destination(self, country_id=None) -> Any:
        return await self.send(endpoints.international_destination(country_id))

    async def get_international_cost(
        self,
        origin,
        destination,
        weight=DEFAULT_WEIGHT,
        courier: Optional[Courier] = None,
    ) -> Any:
        return await self.send(endpoints.international_cost(origin, destination, weight, courier))

    async def get_waybill(self, waybill, courier: Courier) -> Any:
        return await self.send(endpoints.waybill(waybill, courier))
