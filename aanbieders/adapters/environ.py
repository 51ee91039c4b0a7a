"""
Collaborators for plain-Python and WSGI/CGI contexts.
"""

import os
from typing import Mapping, Optional

from aanbieders.adapters.base import IpResolver, TrackingStore, TRACKING_TTL_DAYS

# Checked in order; the first non-empty value wins
IP_ENVIRON_KEYS = ("HTTP_CLIENT_IP", "HTTP_X_FORWARDED_FOR", "REMOTE_ADDR")


class EnvironIpResolver(IpResolver):
    """
    Resolve the caller IP from CGI/WSGI-style environ keys.

    Prefers a client-supplied proxy header, then X-Forwarded-For, then the
    raw connection address.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def resolve(self) -> str:
        for key in IP_ENVIRON_KEYS:
            value = self.environ.get(key)
            if value:
                return value
        return ""


class MemoryTrackingStore(TrackingStore):
    """Tracking id kept for the lifetime of the process."""

    def __init__(self, value: Optional[str] = None):
        self.value = value
        self.ttl_days: Optional[int] = None

    def get(self) -> Optional[str]:
        return self.value

    def set(self, value: str, ttl_days: int = TRACKING_TTL_DAYS) -> None:
        self.value = value
        self.ttl_days = ttl_days
