"""
Core request dispatch: sign, encode, send, convert.
"""

import json
import time
from collections.abc import Mapping
from types import SimpleNamespace
from typing import Any, Dict, Optional

from aanbieders.adapters.base import IpResolver, NullIpResolver, Transport
from aanbieders.errors import ResponseParseError, TransportError
from aanbieders.models import HttpMethod, OutputMode, ParameterSet, SignedRequest
from aanbieders.services.codec import ParameterCodec
from aanbieders.services.signer import RequestSigner
from aanbieders.utils.logger import get_logger, log_with_context, hash_identifier

logger = get_logger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def to_mapping(value: Any) -> Any:
    """
    Recursively convert an object tree into plain dicts.

    SimpleNamespace objects and mappings become dicts with their key order
    preserved; lists and tuples become lists; everything else is returned
    unchanged.

    Args:
        value: Parsed response (or any nested structure)

    Returns:
        Equivalent structure built from dicts and lists
    """
    if isinstance(value, SimpleNamespace):
        value = vars(value)
    if isinstance(value, Mapping):
        return {key: to_mapping(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_mapping(item) for item in value]
    return value


def parse_body(body: str, mode: OutputMode) -> Any:
    """
    Convert a response body according to the output mode.

    Args:
        body: Raw response body
        mode: Output mode

    Returns:
        Body string (RAW), SimpleNamespace tree (OBJECT) or dict tree (ARRAY)

    Raises:
        ResponseParseError: If a parsed mode is requested and body is not JSON
    """
    if mode is OutputMode.RAW:
        return body

    try:
        parsed = json.loads(body, object_hook=lambda obj: SimpleNamespace(**obj))
    except (TypeError, ValueError) as e:
        raise ResponseParseError(f"Invalid JSON response: {str(e)}", body=body) from e

    if mode is OutputMode.ARRAY:
        return to_mapping(parsed)
    return parsed


class Dispatcher:
    """
    Executes one signed API call.

    Holds no per-call state: every execute() builds a fresh signed request,
    so a dispatcher can be shared between threads.
    """

    def __init__(
        self,
        base_host: str,
        transport: Transport,
        signer: RequestSigner,
        tracking_id: str = "",
        ip_resolver: Optional[IpResolver] = None,
        codec: Optional[ParameterCodec] = None,
        output_mode: OutputMode = OutputMode.RAW
    ):
        """
        Initialize dispatcher.

        Args:
            base_host: Scheme and host of the API (no trailing slash)
            transport: HTTP transport
            signer: Authentication field source
            tracking_id: Visitor tracking id sent as `abcid`
            ip_resolver: End-user IP lookup
            codec: Parameter encoder
            output_mode: Default response conversion
        """
        self.base_host = base_host.rstrip("/")
        self.transport = transport
        self.signer = signer
        self.tracking_id = tracking_id
        self.ip_resolver = ip_resolver or NullIpResolver()
        self.codec = codec or ParameterCodec()
        self.output_mode = OutputMode.parse(output_mode)

    def prepare(
        self,
        path: str,
        method: HttpMethod,
        params: Optional[ParameterSet] = None
    ) -> SignedRequest:
        """
        Merge authentication fields into params and encode the request.

        Reserved keys supplied by the caller are overwritten.

        Args:
            path: Resource path starting with '/'
            method: HTTP method
            params: Caller parameters (not modified)

        Returns:
            SignedRequest ready to send

        Raises:
            EncodingError: If a parameter shape is unsupported
        """
        method = HttpMethod(method)

        merged: Dict[str, Any] = dict(params or {})
        auth = self.signer.sign(ip=self.ip_resolver.resolve(), tracking_id=self.tracking_id)
        merged.update(auth.as_dict())

        encoded = self.codec.encode(merged, method)
        url = f"{self.base_host}{path}"

        if method is HttpMethod.POST:
            return SignedRequest(url=url, method=method, encoded_body=encoded)
        return SignedRequest(url=url, method=method, query_string=encoded)

    def execute(
        self,
        path: str,
        method: HttpMethod = HttpMethod.GET,
        params: Optional[ParameterSet] = None,
        output_mode: Optional[OutputMode] = None
    ) -> Any:
        """
        Perform one API call.

        Args:
            path: Resource path starting with '/'
            method: HTTP method
            params: Caller parameters
            output_mode: Override of the dispatcher's output mode

        Returns:
            Response converted per output mode

        Raises:
            EncodingError: If a parameter shape is unsupported
            TransportError: On transport failure or non-2xx status
            ResponseParseError: If a parsed mode is requested and body is not JSON
        """
        mode = OutputMode.parse(output_mode) if output_mode is not None else self.output_mode
        signed = self.prepare(path, method, params)

        headers = FORM_HEADERS if signed.method is HttpMethod.POST else None

        log_with_context(
            logger, "DEBUG",
            "Dispatching API request",
            method=signed.method.value,
            path=path,
            visitor_hash=hash_identifier(self.tracking_id)
        )

        start_time = time.monotonic()
        response = self.transport.send(signed.full_url, signed.method, signed.encoded_body, headers)
        duration_ms = int((time.monotonic() - start_time) * 1000)

        log_with_context(
            logger, "INFO",
            "API request completed",
            method=signed.method.value,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms
        )

        if not response.ok:
            raise TransportError(
                f"API returned status {response.status_code} for {signed.method.value} {path}",
                status_code=response.status_code,
                body=response.body
            )

        return parse_body(response.body, mode)
