"""
HTTP transport backed by requests.
"""

import requests
from typing import Mapping, Optional

from aanbieders.adapters.base import Transport
from aanbieders.errors import TransportError, TransportTimeoutError
from aanbieders.models import HttpMethod, TransportResponse

USER_AGENT = "Aanbieders-Python-Client/1.0"


class RequestsTransport(Transport):
    """
    Transport implementation using a pooled requests.Session.

    Does not raise on non-2xx responses; status handling belongs to the
    dispatcher.
    """

    def __init__(
        self,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
        verify: bool = True
    ):
        """
        Initialize transport.

        Args:
            timeout: Connect/read timeout in seconds
            session: Preconfigured session (a new one is created if omitted)
            verify: Verify TLS certificates
        """
        self.timeout = timeout
        self.verify = verify

        # Session reuses TCP connections across calls
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json"
        })

    def send(
        self,
        url: str,
        method: HttpMethod,
        body: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None
    ) -> TransportResponse:
        """
        Perform the HTTP exchange.

        Raises:
            TransportTimeoutError: If the request timed out
            TransportError: On connection or TLS failure
        """
        try:
            response = self.session.request(
                HttpMethod(method).value,
                url,
                data=body.encode("utf-8") if body is not None else None,
                headers=dict(headers or {}),
                timeout=self.timeout,
                verify=self.verify
            )
        except requests.Timeout as e:
            raise TransportTimeoutError(f"Request timed out: {str(e)}") from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {str(e)}") from e

        return TransportResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
