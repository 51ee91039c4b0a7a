"""
Aanbieders (econtract.be) REST API client.

Documentation for the remote API: https://apihelp.econtract.be/
"""

from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote

from aanbieders.adapters.base import IpResolver, TrackingStore, Transport, resolve_tracking_id
from aanbieders.adapters.requests_transport import RequestsTransport
from aanbieders.errors import EncodingError
from aanbieders.models import ClientConfig, HttpMethod, OutputMode, ParameterSet
from aanbieders.services.codec import expand_order_options, route_product_ids
from aanbieders.services.dispatcher import Dispatcher, to_mapping
from aanbieders.services.signer import RequestSigner
from aanbieders.utils.validators import validate_ean


class AanbiedersClient:
    """Client for comparison, product, order and lookup resources."""

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        tracking_store: Optional[TrackingStore] = None,
        ip_resolver: Optional[IpResolver] = None,
        signer: Optional[RequestSigner] = None
    ):
        """
        Initialize client.

        The tracking id is resolved once here and reused for every call.

        Args:
            config: Credentials, host, output mode and timeout
            transport: HTTP transport (requests-based by default)
            tracking_store: Visitor tracking id store; no tracking if omitted
            ip_resolver: End-user IP lookup; empty IP if omitted
            signer: Request signer (built from credentials by default)
        """
        self.config = config
        self.tracking_id = resolve_tracking_id(tracking_store)

        self.dispatcher = Dispatcher(
            base_host=config.base_host,
            transport=transport or RequestsTransport(timeout=config.timeout),
            signer=signer or RequestSigner(config.credentials),
            tracking_id=self.tracking_id,
            ip_resolver=ip_resolver,
            output_mode=config.output_mode
        )

    @property
    def key(self) -> str:
        return self.config.credentials.key

    @property
    def secret(self) -> str:
        return self.config.credentials.secret

    @property
    def base_host(self) -> str:
        return self.config.base_host

    @property
    def output_mode(self) -> OutputMode:
        return self.dispatcher.output_mode

    def set_output_mode(self, mode: Any) -> None:
        """
        Change how responses are returned for subsequent calls.

        Args:
            mode: OutputMode or one of 'json', 'object', 'array'

        Raises:
            ConfigError: If mode is not recognized
        """
        self.dispatcher.output_mode = OutputMode.parse(mode)

    def usages(self, params: ParameterSet) -> Any:
        """
        Get default electricity and/or gas usages.

        GET /usages.json
        """
        return self.dispatcher.execute("/usages.json", HttpMethod.GET, params)

    def compare(self, params: ParameterSet) -> Any:
        """
        Compare products.

        GET /comparison.json
        """
        return self.dispatcher.execute("/comparison.json", HttpMethod.GET, params)

    def read_comparison(self, comparison_id: Any, params: Optional[ParameterSet] = None) -> Any:
        """
        Read a stored comparison.

        GET /comparison/view/{comparison_id}.json
        """
        path = f"/comparison/view/{quote(str(comparison_id), safe='')}.json"
        return self.dispatcher.execute(path, HttpMethod.GET, params)

    def get_products(
        self,
        params: Optional[ParameterSet] = None,
        product_ids: Any = None
    ) -> Any:
        """
        Get one or more products.

        A single numeric id is fetched via GET /products/{id}.json; several
        ids go to GET /products.json as a space-separated `productid`.

        Args:
            params: Extra query parameters
            product_ids: One product id or a sequence of ids
        """
        path, routed = route_product_ids(params, product_ids)
        return self.dispatcher.execute(path, HttpMethod.GET, routed)

    def set_order(self, params: ParameterSet) -> Any:
        """
        Place an order.

        GET /orders.json

        The `opt` list of option ids is expanded into `opt[...]` keys first.
        """
        return self.dispatcher.execute("/orders.json", HttpMethod.GET, expand_order_options(params))

    def get_suppliers(self, params: ParameterSet) -> Any:
        """GET /suppliers.json"""
        return self.dispatcher.execute("/suppliers.json", HttpMethod.GET, params)

    def get_options(self, params: ParameterSet) -> Any:
        """GET /options.json"""
        return self.dispatcher.execute("/options.json", HttpMethod.GET, params)

    def get_affiliates(self, params: ParameterSet) -> Any:
        """GET /affiliates.json"""
        return self.dispatcher.execute("/affiliates.json", HttpMethod.GET, params)

    def get_promotions(self, params: ParameterSet) -> Any:
        """GET /promotions.json"""
        return self.dispatcher.execute("/promotions.json", HttpMethod.GET, params)

    def get_reviews(self, params: ParameterSet) -> Any:
        """GET /reviews.json"""
        return self.dispatcher.execute("/reviews.json", HttpMethod.GET, params)

    def get_contract(self, params: Any) -> Any:
        """
        Generate a contract for an order.

        POST /orders/generate.json

        Args:
            params: Parameters received from the order API; a parsed
                    response object (OBJECT mode) is accepted as well
        """
        params = to_mapping(params)
        if not isinstance(params, Mapping):
            raise EncodingError("Contract parameters must be a mapping or response object")
        return self.dispatcher.execute("/orders/generate.json", HttpMethod.POST, params)

    def get_dnb(self, zip_code: Any, lang: str) -> Any:
        """
        Get the distribution network operator for a postal code.

        GET /dnb.json
        """
        params = {"zip": zip_code, "lang": lang}
        return self.dispatcher.execute("/dnb.json", HttpMethod.GET, params)

    def get_dualfuelpack(self, electricity_id: Any, gas_id: Any) -> Any:
        """
        Get the dual fuel pack combining an electricity and a gas product.

        GET /dualfuelpack.json
        """
        params = {"electricity_id": electricity_id, "gas_id": gas_id}
        return self.dispatcher.execute("/dualfuelpack.json", HttpMethod.GET, params)

    def validate_ean(self, code: str) -> bool:
        return validate_ean(code)

    def close(self) -> None:
        self.dispatcher.transport.close()
