"""
Tests for transport, IP resolution and tracking id collaborators.
"""

import pytest
import requests
from unittest.mock import Mock
from aanbieders.adapters.base import NullIpResolver, TrackingStore, resolve_tracking_id
from aanbieders.adapters.environ import EnvironIpResolver, MemoryTrackingStore
from aanbieders.adapters.requests_transport import RequestsTransport
from aanbieders.errors import TransportError, TransportTimeoutError
from aanbieders.models import HttpMethod


@pytest.fixture
def mock_session():
    """Mock requests session."""
    session = Mock(spec=requests.Session)
    session.headers = {}
    session.request.return_value = Mock(status_code=200, text='{"ok": true}')
    return session


def test_transport_get(mock_session):
    """Test GET call forwarding."""
    transport = RequestsTransport(timeout=5, session=mock_session)

    response = transport.send("https://api.test/usages.json?a=1", HttpMethod.GET)

    assert response.status_code == 200
    assert response.body == '{"ok": true}'
    mock_session.request.assert_called_once_with(
        "GET",
        "https://api.test/usages.json?a=1",
        data=None,
        headers={},
        timeout=5,
        verify=True
    )
    assert mock_session.headers["User-Agent"].startswith("Aanbieders-Python-Client")


def test_transport_post_body(mock_session):
    """Test POST body and headers forwarding."""
    transport = RequestsTransport(session=mock_session)

    transport.send("https://api.test/x.json", HttpMethod.POST, "a=1", {"Content-Type": "application/x-www-form-urlencoded"})

    args, kwargs = mock_session.request.call_args
    assert args == ("POST", "https://api.test/x.json")
    assert kwargs["data"] == b"a=1"
    assert kwargs["headers"] == {"Content-Type": "application/x-www-form-urlencoded"}


def test_transport_returns_error_status(mock_session):
    """Test that error statuses are returned, not raised."""
    mock_session.request.return_value = Mock(status_code=503, text="down")

    response = RequestsTransport(session=mock_session).send("https://api.test/", HttpMethod.GET)

    assert response.status_code == 503
    assert response.ok is False


def test_transport_timeout(mock_session):
    """Test timeout mapping."""
    mock_session.request.side_effect = requests.Timeout("read timed out")

    with pytest.raises(TransportTimeoutError) as exc_info:
        RequestsTransport(session=mock_session).send("https://api.test/", HttpMethod.GET)

    assert isinstance(exc_info.value.__cause__, requests.Timeout)


def test_transport_connection_error(mock_session):
    """Test network failure mapping."""
    mock_session.request.side_effect = requests.ConnectionError("unreachable")

    with pytest.raises(TransportError) as exc_info:
        RequestsTransport(session=mock_session).send("https://api.test/", HttpMethod.GET)

    assert not isinstance(exc_info.value, TransportTimeoutError)
    assert exc_info.value.status_code is None


def test_transport_context_manager_closes_session(mock_session):
    with RequestsTransport(session=mock_session):
        pass

    mock_session.close.assert_called_once()


@pytest.mark.parametrize("environ,expected", [
    ({"HTTP_CLIENT_IP": "1.1.1.1", "HTTP_X_FORWARDED_FOR": "2.2.2.2", "REMOTE_ADDR": "3.3.3.3"}, "1.1.1.1"),
    ({"HTTP_X_FORWARDED_FOR": "2.2.2.2", "REMOTE_ADDR": "3.3.3.3"}, "2.2.2.2"),
    ({"HTTP_CLIENT_IP": "", "REMOTE_ADDR": "3.3.3.3"}, "3.3.3.3"),
    ({}, ""),
])
def test_environ_ip_resolver(environ, expected):
    """Test IP header precedence."""
    assert EnvironIpResolver(environ).resolve() == expected


def test_null_ip_resolver():
    assert NullIpResolver().resolve() == ""


def test_resolve_tracking_id_without_store():
    assert resolve_tracking_id(None) == ""


def test_resolve_tracking_id_unavailable_store():
    """Test that an unavailable store yields no id and is not written."""
    store = Mock(spec=TrackingStore)
    store.available = False

    assert resolve_tracking_id(store) == ""
    store.set.assert_not_called()


def test_resolve_tracking_id_mints_and_persists():
    store = MemoryTrackingStore()

    tracking_id = resolve_tracking_id(store)

    assert tracking_id
    assert store.value == tracking_id
    assert resolve_tracking_id(store) == tracking_id
