# START OF FILE: quizlite/infra/clients/storefront_client.py

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import requests

from quizlite.domain.errors import CatalogLookupError
from quizlite.domain.models import ProductSummary
from quizlite.shared.config import (
    SHOPIFY_SHOP, STOREFRONT_API_TOKEN, STOREFRONT_API_VERSION, CATALOG_TIMEOUT_SECONDS
)
from quizlite.shared.logger import logger

PRODUCT_BY_HANDLE_QUERY = """
query ProductByHandle($handle: String!) {
  product(handle: $handle) {
    title
    handle
    featuredImage { url altText }
    variants(first: 1) { edges { node { price { amount currencyCode } } } }
  }
}
"""

CENT = Decimal("0.01")


def format_major_units(amount: Any) -> Optional[str]:
    """
    Storefront MoneyV2.amount is already a decimal string in major units
    ("24.0" means 24 dollars), so it is only quantised, never divided by 100.
    """
    if amount is None:
        return None
    try:
        return str(Decimal(str(amount)).quantize(CENT))
    except InvalidOperation:
        logger.warning(f"Ignoring non-numeric price amount from Storefront: {amount!r}")
        return None


class StorefrontClient:
    def __init__(
        self,
        shop: str,
        token: str,
        api_version: str = STOREFRONT_API_VERSION,
        timeout: float = CATALOG_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        if not shop or not token:
            raise ValueError("Shop domain and Storefront API token are required.")
        self.endpoint = f"https://{shop}/api/{api_version}/graphql.json"
        self.headers = {
            "Content-Type": "application/json",
            "X-Shopify-Storefront-Access-Token": token,
        }
        self.timeout = timeout
        self.session = session or requests.Session()
        logger.info(f"StorefrontClient initialized for {shop} (API {api_version}).")

    @classmethod
    def from_env(cls) -> Optional["StorefrontClient"]:
        """Returns None when credentials are not configured; results then stay handle-only."""
        if not (SHOPIFY_SHOP and STOREFRONT_API_TOKEN):
            logger.warning("SHOPIFY_SHOP or STOREFRONT_API_TOKEN is not set. Product enrichment is disabled.")
            return None
        return cls(SHOPIFY_SHOP, STOREFRONT_API_TOKEN)

    def fetch_by_handle(self, handle: str) -> Optional[ProductSummary]:
        """Looks up one product. Returns None if the shop has no such handle."""
        try:
            response = self.session.post(
                self.endpoint,
                headers=self.headers,
                json={"query": PRODUCT_BY_HANDLE_QUERY, "variables": {"handle": handle}},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout as e:
            raise CatalogLookupError(handle, f"timed out after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            raise CatalogLookupError(handle, f"HTTP {e.response.status_code}") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise CatalogLookupError(handle, str(e)) from e

        if payload.get('errors'):
            messages = "; ".join(str(err.get('message', err)) for err in payload['errors'])
            raise CatalogLookupError(handle, f"GraphQL error: {messages}")

        product = (payload.get('data') or {}).get('product')
        if not product:
            logger.info(f"Product '{handle}' not found in the storefront.")
            return None
        return self._to_summary(handle, product)

    @staticmethod
    def _to_summary(handle: str, product: Dict[str, Any]) -> ProductSummary:
        edges = (product.get('variants') or {}).get('edges') or []
        price = ((edges[0].get('node') or {}).get('price') or {}) if edges else {}
        return ProductSummary(
            handle=handle,
            title=product.get('title'),
            image=(product.get('featuredImage') or {}).get('url'),
            price=format_major_units(price.get('amount')),
            currency=price.get('currencyCode'),
        )

# END OF FILE: quizlite/infra/clients/storefront_client.py
