"""
Tests for the Storefront GraphQL lookup.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from quizlite.domain.errors import CatalogLookupError
from quizlite.infra.clients.storefront_client import StorefrontClient, format_major_units


def make_client(payload=None, status=200, exc=None):
    session = MagicMock()
    if exc is not None:
        session.post.side_effect = exc
    else:
        response = MagicMock()
        response.status_code = status
        response.json.return_value = payload
        if status >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(response=response)
        session.post.return_value = response
    client = StorefrontClient("demo.myshopify.com", "sf-token", api_version="2024-07", timeout=3, session=session)
    return client, session


PRODUCT_PAYLOAD = {
    "data": {
        "product": {
            "title": "Soft Pinch Tint",
            "handle": "soft-pinch-tint",
            "featuredImage": {"url": "https://cdn.shopify.com/tint.jpg", "altText": None},
            "variants": {"edges": [{"node": {"price": {"amount": "24.0", "currencyCode": "USD"}}}]},
        }
    }
}


def test_maps_product_fields():
    client, session = make_client(PRODUCT_PAYLOAD)
    summary = client.fetch_by_handle("soft-pinch-tint")

    assert summary.to_dict() == {
        "handle": "soft-pinch-tint",
        "title": "Soft Pinch Tint",
        "image": "https://cdn.shopify.com/tint.jpg",
        "price": "24.00",
        "currency": "USD",
    }
    _, kwargs = session.post.call_args
    assert session.post.call_args[0][0] == "https://demo.myshopify.com/api/2024-07/graphql.json"
    assert kwargs["headers"]["X-Shopify-Storefront-Access-Token"] == "sf-token"
    assert kwargs["json"]["variables"] == {"handle": "soft-pinch-tint"}
    assert kwargs["timeout"] == 3


def test_missing_product_returns_none():
    client, _ = make_client({"data": {"product": None}})
    assert client.fetch_by_handle("ghost") is None


def test_product_without_variants_or_image():
    client, _ = make_client({"data": {"product": {"title": "Gift Card", "variants": {"edges": []}}}})
    summary = client.fetch_by_handle("gift-card")
    assert summary.to_dict() == {"handle": "gift-card", "title": "Gift Card"}


def test_graphql_errors_raise_lookup_error():
    client, _ = make_client({"errors": [{"message": "Throttled"}]})
    with pytest.raises(CatalogLookupError, match="Throttled"):
        client.fetch_by_handle("soft-pinch-tint")


def test_http_error_raises_lookup_error():
    client, _ = make_client(status=401)
    with pytest.raises(CatalogLookupError, match="HTTP 401"):
        client.fetch_by_handle("soft-pinch-tint")


def test_timeout_raises_lookup_error():
    client, _ = make_client(exc=requests.exceptions.Timeout())
    with pytest.raises(CatalogLookupError, match="timed out"):
        client.fetch_by_handle("soft-pinch-tint")


def test_requires_credentials():
    with pytest.raises(ValueError):
        StorefrontClient("", "token")


def test_from_env_without_credentials_is_none():
    with patch("quizlite.infra.clients.storefront_client.STOREFRONT_API_TOKEN", ""):
        assert StorefrontClient.from_env() is None


@pytest.mark.parametrize("amount, expected", [
    ("24.0", "24.00"),
    ("12.345", "12.34"),
    (18, "18.00"),
    (None, None),
    ("free", None),
])
def test_format_major_units(amount, expected):
    assert format_major_units(amount) == expected
