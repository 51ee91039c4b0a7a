"""
Pytest fixtures and test configuration.
"""

import pytest
from types import SimpleNamespace
from aanbieders.adapters.base import Transport
from aanbieders.adapters.environ import MemoryTrackingStore
from aanbieders.clients.aanbieders_client import AanbiedersClient
from aanbieders.models import ClientConfig, ClientCredentials, TransportResponse
from aanbieders.services.dispatcher import Dispatcher
from aanbieders.services.signer import RequestSigner

FIXED_TIME = 1700000000
FIXED_NONCE = "0123456789abcdef0123456789abcdef"


class RecordingTransport(Transport):
    """Transport that records calls and replays queued responses."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.closed = False

    def send(self, url, method, body=None, headers=None):
        self.calls.append(SimpleNamespace(url=url, method=method, body=body, headers=headers))
        if not self.responses:
            return TransportResponse(status_code=200, body='{}')
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def credentials():
    """Sample API credentials."""
    return ClientCredentials(key="public-key", secret="s3cret")


@pytest.fixture
def client_config(credentials):
    """Client configuration pointing at a test host."""
    return ClientConfig(credentials=credentials, base_host="https://api.test")


@pytest.fixture
def signer(credentials):
    """Signer with a frozen clock and nonce."""
    return RequestSigner(
        credentials,
        clock=lambda: FIXED_TIME,
        nonce_source=lambda: FIXED_NONCE
    )


@pytest.fixture
def transport():
    """Recording transport answering 200 {} by default."""
    return RecordingTransport()


@pytest.fixture
def dispatcher(transport, signer):
    """Dispatcher wired to the recording transport."""
    return Dispatcher(
        base_host="https://api.test",
        transport=transport,
        signer=signer,
        tracking_id="visitor-1"
    )


@pytest.fixture
def tracking_store():
    """Tracking store holding an existing visitor id."""
    return MemoryTrackingStore("visitor-1")


@pytest.fixture
def client(client_config, transport, signer, tracking_store):
    """API client with recording transport and deterministic signer."""
    return AanbiedersClient(
        client_config,
        transport=transport,
        tracking_store=tracking_store,
        signer=signer
    )


@pytest.fixture
def make_transport():
    """Factory for recording transports with queued responses."""
    return RecordingTransport
