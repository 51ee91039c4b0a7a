"""
Command-line entry point.

Usage:
    python run.py <operation> [key=value ...]

Repeating a key sends a list, e.g. `tags=a tags=b`. For `products`,
`productid=` values select the products to fetch.
"""

import sys

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from aanbieders import AanbiedersError, create_client
from aanbieders.utils.logger import get_logger

logger = get_logger(__name__)

OPERATIONS = {
    'usages': 'usages',
    'compare': 'compare',
    'suppliers': 'get_suppliers',
    'options': 'get_options',
    'affiliates': 'get_affiliates',
    'promotions': 'get_promotions',
    'reviews': 'get_reviews',
    'products': 'get_products',
}


def parse_params(args):
    """
    Parse key=value arguments; repeated keys collect into a list.

    Raises:
        ValueError: If an argument has no '='
    """
    params = {}
    for arg in args:
        if '=' not in arg:
            raise ValueError(f"Expected key=value, got: {arg}")
        key, value = arg.split('=', 1)
        if key in params:
            existing = params[key]
            params[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            params[key] = value
    return params


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] not in OPERATIONS:
        print(f"Usage: run.py <{'|'.join(OPERATIONS)}> [key=value ...]", file=sys.stderr)
        return 2

    try:
        params = parse_params(argv[1:])
        client = create_client()
        operation = getattr(client, OPERATIONS[argv[0]])
        if argv[0] == 'products' and 'productid' in params:
            product_ids = params.pop('productid')
            response = operation(params, product_ids=product_ids)
        else:
            response = operation(params)
    except (ValueError, AanbiedersError) as e:
        logger.error(f"Request failed: {str(e)}")
        return 1

    print(response)
    return 0


if __name__ == '__main__':
    sys.exit(main())
