"""
Flask integration: IP resolution and cookie-backed tracking id for clients
created while handling an inbound request.
"""

import threading
from typing import Optional

from flask import after_this_request, g, has_request_context, request

from aanbieders.adapters.base import IpResolver, TrackingStore, TRACKING_COOKIE, TRACKING_TTL_DAYS
from aanbieders.adapters.requests_transport import RequestsTransport

# Connection pool shared by all per-request clients
_shared_transport: Optional[RequestsTransport] = None
_shared_transport_lock = threading.Lock()


class FlaskIpResolver(IpResolver):
    """Resolve the end-user IP from the active Flask request."""

    def resolve(self) -> str:
        if not has_request_context():
            return ""

        for header in ("Client-Ip", "X-Forwarded-For"):
            value = request.headers.get(header)
            if value:
                return value

        return request.remote_addr or ""


class FlaskCookieTrackingStore(TrackingStore):
    """
    Tracking id stored in a long-lived `abcid` cookie.

    A newly minted id is written to the response via after_this_request and
    remembered on flask.g so later reads in the same request see it.
    """

    def __init__(self, cookie_name: str = TRACKING_COOKIE):
        self.cookie_name = cookie_name

    @property
    def available(self) -> bool:
        return has_request_context()

    def get(self) -> Optional[str]:
        if not has_request_context():
            return None
        pending = g.get("_aanbieders_tracking_id")
        if pending:
            return pending
        return request.cookies.get(self.cookie_name)

    def set(self, value: str, ttl_days: int = TRACKING_TTL_DAYS) -> None:
        if not has_request_context():
            return

        g._aanbieders_tracking_id = value
        cookie_name = self.cookie_name

        @after_this_request
        def store_cookie(response):
            response.set_cookie(cookie_name, value, max_age=ttl_days * 86400, path="/")
            return response


def get_request_client():
    """
    Get the API client bound to the active Flask request.

    Built on first use within a request from environment configuration,
    wired to the request's IP and the tracking cookie.

    Returns:
        AanbiedersClient instance
    """
    client = g.get("_aanbieders_client")
    if client is None:
        from aanbieders import create_client

        client = create_client(
            transport=get_shared_transport(),
            tracking_store=FlaskCookieTrackingStore(),
            ip_resolver=FlaskIpResolver(),
            register=False
        )
        g._aanbieders_client = client

    return client


def get_shared_transport() -> RequestsTransport:
    """
    Get the transport shared by per-request clients, creating it once.

    Returns:
        RequestsTransport configured with API_TIMEOUT
    """
    global _shared_transport
    if _shared_transport is None:
        with _shared_transport_lock:
            if _shared_transport is None:
                from aanbieders.config import Config

                _shared_transport = RequestsTransport(timeout=Config.API_TIMEOUT)
    return _shared_transport
