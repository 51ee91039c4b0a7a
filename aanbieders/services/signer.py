"""
Request signing: authentication fields injected into every API call.
"""

import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Dict, Union

from aanbieders.models import ClientCredentials


def default_nonce() -> str:
    """Unpredictable 32-character hex token."""
    return secrets.token_hex(16)


def compute_signature(credentials: ClientCredentials, timestamp: int, nonce: str) -> str:
    """
    HMAC-SHA1 signature expected by the API.

    The public key is the HMAC key and the secret is part of the message:
    HMAC_SHA1(key=key, msg=secret + time + nonce). The server verifies
    exactly this layout, so the roles must not be swapped.

    Args:
        credentials: API key pair
        timestamp: Unix timestamp sent as `time`
        nonce: Nonce sent as `nonce`

    Returns:
        Lowercase hex digest
    """
    message = f"{credentials.secret}{timestamp}{nonce}"
    return hmac.new(
        credentials.key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha1
    ).hexdigest()


@dataclass(frozen=True)
class AuthFields:
    key: str
    time: int
    nonce: str
    ip: str
    apikey: str
    abcid: str

    def as_dict(self) -> Dict[str, Union[str, int]]:
        return {
            "key": self.key,
            "time": self.time,
            "nonce": self.nonce,
            "ip": self.ip,
            "apikey": self.apikey,
            "abcid": self.abcid,
        }


class RequestSigner:
    """
    Produces the authentication fields for one request.

    Clock and nonce source are injectable so signatures can be reproduced
    in tests.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        clock: Callable[[], float] = time.time,
        nonce_source: Callable[[], str] = default_nonce
    ):
        self.credentials = credentials
        self._clock = clock
        self._nonce_source = nonce_source

    def sign(self, ip: str = "", tracking_id: str = "") -> AuthFields:
        """
        Build a fresh set of authentication fields.

        Args:
            ip: Best-effort end-user IP address
            tracking_id: Visitor tracking id (abcid)

        Returns:
            AuthFields with a new timestamp, nonce and signature
        """
        timestamp = int(self._clock())
        nonce = self._nonce_source()

        return AuthFields(
            key=self.credentials.key,
            time=timestamp,
            nonce=nonce,
            ip=ip or "",
            apikey=compute_signature(self.credentials, timestamp, nonce),
            abcid=tracking_id or ""
        )
