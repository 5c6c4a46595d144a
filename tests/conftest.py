"""
RajaOngkir Test Configuration
-----------------------------
Shared fixtures and configuration for all tests.

Every client in the suite talks to an httpx.MockTransport; real network
access is blocked.
"""

import logging
import sys
from pathlib import Path
from urllib.parse import parse_qsl

import httpx
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from rajaongkir.api.client import RateClient
from rajaongkir.infra import logging as rajaongkir_logging


ENVELOPE = {"rajaongkir": {"status": {"code": 200}}}

# (method name, positional args) covering every endpoint with its required params
OPERATIONS = [
    ("get_province", ()),
    ("get_city", ()),
    ("get_subdistrict", (39,)),
    ("get_cost", (501, 114)),
    ("get_international_origin", ()),
    ("get_international_destination", ()),
    ("get_international_cost", (152, 108)),
    ("get_waybill", ("SOCAG00183235715", "jne")),
]


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, body=None, status_code: int = 200, content: bytes = None, error: Exception = None):
        self.requests = []
        self.status_code = status_code
        self.error = error
        if content is None:
            content = httpx.Response(200, json=ENVELOPE if body is None else body).content
        self.content = content

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def query(request: httpx.Request) -> dict:
    """Query parameters of a recorded request."""
    return dict(request.url.params)


def form(request: httpx.Request) -> dict:
    """Form-encoded body of a recorded request."""
    return dict(parse_qsl(request.content.decode()))


# =============================================================================
# Test Isolation: Block Side Effects
# =============================================================================

@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    """
    Block real HTTP traffic.

    Any client built without a mock transport fails loudly instead of
    reaching rajaongkir.com.
    """
    def _blocked(*args, **kwargs):
        raise RuntimeError(
            "Network access is forbidden during tests. "
            "Pass transport=httpx.MockTransport(...) to the client."
        )

    monkeypatch.setattr(httpx.HTTPTransport, "handle_request", _blocked)
    monkeypatch.setattr(httpx.AsyncHTTPTransport, "handle_async_request", _blocked)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Drop RAJAONGKIR_* variables from the developer's shell."""
    import os

    for name in list(os.environ):
        if name.startswith("RAJAONGKIR_"):
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by a test."""
    yield
    root_logger = logging.getLogger(rajaongkir_logging.ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(logging.NOTSET)


# =============================================================================
# Clients
# =============================================================================

@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def client(recorder):
    """Starter-tier client wired to the recorder."""
    client = RateClient("test-key", transport=httpx.MockTransport(recorder))
    yield client
    client.close()


@pytest.fixture(params=OPERATIONS, ids=[name for name, _ in OPERATIONS])
def operation(request):
    """Every client operation, called with its required arguments."""
    return request.param
