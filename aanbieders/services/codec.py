"""
Parameter encoding for GET query strings and POST form bodies.

Supported value shapes, one level deep:
- scalar: str, int, float, bool
- sequence: list or tuple of scalars
- mapping: dict-like of str -> scalar

GET flattens containers to the same key repeated (tags=a&tags=b).
POST uses bracket-indexed keys (tags[0]=a&tags[1]=b, opt[color]=red).
None values are skipped.
"""

import math
import re
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote, quote_plus, urlencode

from aanbieders.errors import EncodingError
from aanbieders.models import HttpMethod, ParameterSet

SCALAR_TYPES = (str, int, float, bool)
SEQUENCE_TYPES = (list, tuple)


def _is_scalar(value: Any) -> bool:
    return isinstance(value, SCALAR_TYPES)


def format_scalar(value: Any) -> str:
    """Render a scalar the way the API expects it (booleans as 1/0)."""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _items(key: str, value: Any) -> Iterator[Tuple[str, Any]]:
    """Yield (subkey, scalar) pairs of a container value, checking shape."""
    if isinstance(value, Mapping):
        pairs = value.items()
    else:
        pairs = enumerate(value)

    for subkey, item in pairs:
        if item is None:
            continue
        if not _is_scalar(item):
            raise EncodingError(
                f"Unsupported nested value for parameter '{key}': "
                f"{type(item).__name__} inside {type(value).__name__}",
                key=key
            )
        yield str(subkey), item


def validate_parameters(params: ParameterSet) -> None:
    """
    Check that every value has a supported shape.

    Raises:
        EncodingError: On non-string keys, nested containers or unknown types
    """
    for key, value in params.items():
        if not isinstance(key, str):
            raise EncodingError(f"Parameter names must be strings, got {key!r}", key=str(key))
        if value is None or _is_scalar(value):
            continue
        if isinstance(value, (Mapping,) + SEQUENCE_TYPES):
            # Exhaust the generator to surface nested-shape errors
            for _ in _items(key, value):
                pass
            continue
        raise EncodingError(
            f"Unsupported value type for parameter '{key}': {type(value).__name__}",
            key=key
        )


class ParameterCodec:
    """Encodes a parameter set for the wire."""

    def encode(self, params: ParameterSet, method: HttpMethod) -> str:
        """
        Encode parameters for the given HTTP method.

        Args:
            params: Ordered parameter mapping
            method: GET (query string) or POST (form body)

        Returns:
            Encoded string

        Raises:
            EncodingError: If a value shape is unsupported
        """
        validate_parameters(params)

        if HttpMethod(method) is HttpMethod.POST:
            return self.encode_form(params)
        return self.encode_query(params)

    def encode_query(self, params: ParameterSet) -> str:
        """Query string; container values repeat their key per element."""
        pairs: List[Tuple[str, str]] = []

        for key, value in params.items():
            if value is None:
                continue
            if _is_scalar(value):
                pairs.append((key, format_scalar(value)))
            else:
                for _, item in _items(key, value):
                    pairs.append((key, format_scalar(item)))

        return urlencode(pairs)

    def encode_form(self, params: ParameterSet) -> str:
        """Form body; container values become key[subkey]=value pairs."""
        parts: List[str] = []

        for key, value in params.items():
            if value is None:
                continue
            if _is_scalar(value):
                parts.append(self._form_pair(key, value))
            else:
                for subkey, item in _items(key, value):
                    parts.append(self._form_pair(f"{key}[{subkey}]", item))

        return "&".join(parts)

    @staticmethod
    def _form_pair(key: str, value: Any) -> str:
        return f"{quote(key, safe='[]')}={quote_plus(format_scalar(value))}"


def expand_order_options(params: ParameterSet) -> Dict[str, Any]:
    """
    Rewrite the `opt` list of an order into the keys the order endpoint reads.

    More than one option: one `opt[<value>]` key per option, holding the
    option itself. Exactly one option: a single `opt[]` key. An empty list
    drops the parameter.

    Args:
        params: Order parameters (not modified)

    Returns:
        New parameter dict with `opt` replaced

    Raises:
        EncodingError: If an option is not a scalar
    """
    expanded = dict(params)
    if "opt" not in expanded:
        return expanded

    options = expanded.pop("opt")
    if options is None:
        return expanded
    if _is_scalar(options):
        options = [options]
    elif isinstance(options, Mapping):
        options = list(options.values())
    elif not isinstance(options, SEQUENCE_TYPES):
        raise EncodingError(
            f"Order options must be a list or tuple, got {type(options).__name__}",
            key="opt"
        )

    options = list(options)
    for option in options:
        if not _is_scalar(option):
            raise EncodingError("Order options must be scalars", key="opt")

    if len(options) > 1:
        for option in options:
            expanded[f"opt[{format_scalar(option)}]"] = option
    elif len(options) == 1:
        expanded["opt[]"] = options[0]

    return expanded


NUMERIC_PATTERN = re.compile(r"^\s*[+-]?\d+(\.\d+)?([eE][+-]?\d+)?\s*$")


def is_numeric(value: Any) -> bool:
    """True for ints, finite floats and plain decimal strings."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, str):
        return NUMERIC_PATTERN.match(value) is not None
    return False


def format_product_id(value: Any) -> str:
    """Render a product id; whole floats lose their fractional part."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return format_scalar(value).strip()


def route_product_ids(
    params: Optional[ParameterSet],
    product_ids: Any = None
) -> Tuple[str, Dict[str, Any]]:
    """
    Pick the products path and parameters for a set of product ids.

    A single numeric id goes in the path (/products/{id}.json). Several ids,
    or a single non-numeric one, are joined with spaces into `productid`.

    Args:
        params: Caller parameters (not modified)
        product_ids: One id, a list or tuple of ids, or None

    Returns:
        Tuple of (path, parameters)

    Raises:
        EncodingError: If the ids are not a scalar or a list/tuple of scalars
    """
    routed = dict(params or {})

    if product_ids is None:
        return "/products.json", routed
    if _is_scalar(product_ids):
        product_ids = [product_ids]
    elif not isinstance(product_ids, SEQUENCE_TYPES):
        raise EncodingError(
            f"Product ids must be a scalar, list or tuple, got {type(product_ids).__name__}",
            key="productid"
        )

    ids = list(product_ids)
    for product_id in ids:
        if not _is_scalar(product_id):
            raise EncodingError(
                f"Unsupported product id: {type(product_id).__name__}",
                key="productid"
            )

    if not ids:
        return "/products.json", routed

    if len(ids) == 1 and is_numeric(ids[0]):
        product_id = format_product_id(ids[0])
        return f"/products/{quote(product_id, safe='')}.json", routed

    routed["productid"] = " ".join(format_product_id(product_id) for product_id in ids)
    return "/products.json", routed
