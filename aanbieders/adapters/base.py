"""
Abstract base classes for the client's external collaborators.

The dispatcher only needs three capabilities from its environment:
- a transport that performs one HTTP exchange
- a resolver for the end-user's IP address
- a store that keeps the visitor tracking id (abcid) across requests

Concrete implementations live next to this module (requests, WSGI environ,
in-memory, Flask).
"""

import uuid
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from aanbieders.models import HttpMethod, TransportResponse

TRACKING_COOKIE = "abcid"
TRACKING_TTL_DAYS = 200


class Transport(ABC):
    """Performs a single HTTP request/response exchange."""

    @abstractmethod
    def send(
        self,
        url: str,
        method: HttpMethod,
        body: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        """
        Send one request.

        Args:
            url: Absolute URL, including query string for GET
            method: HTTP method
            body: Encoded request body (POST only)
            headers: Extra request headers

        Returns:
            TransportResponse with status code and body, whatever the status

        Raises:
            TransportError: On network, TLS or timeout failure
        """
        pass

    def close(self) -> None:
        """Release pooled resources, if any."""
        pass


class IpResolver(ABC):
    """Best-effort lookup of the end-user's IP address."""

    @abstractmethod
    def resolve(self) -> str:
        """
        Returns:
            IP address string, or empty string if unknown
        """
        pass


class TrackingStore(ABC):
    """Persistence for the visitor tracking id (a cookie in web contexts)."""

    @property
    def available(self) -> bool:
        """Whether the store can read and persist ids right now."""
        return True

    @abstractmethod
    def get(self) -> Optional[str]:
        """
        Returns:
            Stored tracking id or None
        """
        pass

    @abstractmethod
    def set(self, value: str, ttl_days: int = TRACKING_TTL_DAYS) -> None:
        """
        Persist a tracking id.

        Args:
            value: Tracking id
            ttl_days: Lifetime of the stored value
        """
        pass


class NullIpResolver(IpResolver):
    """Resolver for contexts without an inbound request."""

    def resolve(self) -> str:
        return ""


def new_tracking_id() -> str:
    return uuid.uuid4().hex


def resolve_tracking_id(store: Optional[TrackingStore]) -> str:
    """
    Return the stored tracking id, minting and persisting one if needed.

    Args:
        store: Tracking store, or None when no session mechanism exists

    Returns:
        Tracking id, or empty string if the store is missing or unavailable
    """
    if store is None or not store.available:
        return ""

    existing = store.get()
    if existing:
        return existing

    tracking_id = new_tracking_id()
    store.set(tracking_id, TRACKING_TTL_DAYS)
    return tracking_id
