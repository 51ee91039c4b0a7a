"""
Aanbieders API client package and client factory.
"""

from typing import Optional

from aanbieders.adapters.base import IpResolver, TrackingStore, Transport
from aanbieders.adapters.environ import EnvironIpResolver
from aanbieders.adapters.requests_transport import RequestsTransport
from aanbieders.clients.aanbieders_client import AanbiedersClient
from aanbieders.config import Config
from aanbieders.errors import (
    AanbiedersError,
    ConfigError,
    EncodingError,
    ResponseParseError,
    TransportError,
    TransportTimeoutError,
)
from aanbieders.models import ClientConfig, ClientCredentials, HttpMethod, OutputMode
from aanbieders.utils.logger import get_logger
from aanbieders.utils.validators import validate_ean

logger = get_logger(__name__)

# Global client instance
_client: Optional[AanbiedersClient] = None


def create_client(
    transport: Optional[Transport] = None,
    tracking_store: Optional[TrackingStore] = None,
    ip_resolver: Optional[IpResolver] = None,
    register: bool = True
) -> AanbiedersClient:
    """
    Create an API client from environment configuration.

    Args:
        transport: HTTP transport (requests-based with API_TIMEOUT by default)
        tracking_store: Visitor tracking id store; no tracking id if omitted
        ip_resolver: End-user IP lookup (process environ by default)
        register: Keep the client as the global instance returned by get_client()

    Returns:
        Configured AanbiedersClient

    Raises:
        ConfigError: If configuration is invalid
    """
    try:
        client_config = Config.client_config()
    except ConfigError as e:
        logger.error(f"Configuration validation failed: {str(e)}")
        raise

    client = AanbiedersClient(
        client_config,
        transport=transport or RequestsTransport(timeout=client_config.timeout),
        tracking_store=tracking_store,
        ip_resolver=ip_resolver or EnvironIpResolver()
    )

    if register:
        global _client
        _client = client
        logger.info("Initialized Aanbieders client")

    return client


def get_client() -> Optional[AanbiedersClient]:
    """
    Get global client instance.

    Returns:
        AanbiedersClient created by create_client(), or None
    """
    return _client


__all__ = [
    "AanbiedersClient",
    "AanbiedersError",
    "ClientConfig",
    "ClientCredentials",
    "ConfigError",
    "EncodingError",
    "HttpMethod",
    "OutputMode",
    "ResponseParseError",
    "TransportError",
    "TransportTimeoutError",
    "create_client",
    "get_client",
    "validate_ean",
]
