"""Tests for shopify_spinner.shopify_client.ShopifyClient."""

from unittest.mock import MagicMock, patch

import pytest

from shopify_spinner.errors import ApiError
from shopify_spinner.shopify_client import ShopifyClient


def _response(status=200, payload=None, text=""):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.text = text
    response.json.return_value = payload
    return response


def _make_client(response):
    with patch("shopify_spinner.shopify_client.requests.Session") as session_cls:
        session = MagicMock()
        session.headers = {}
        session.post.return_value = response
        session_cls.return_value = session
        client = ShopifyClient("test-store.myshopify.com", "shpat_token", api_version="2025-01")
    return client, session


def test_api_url_and_headers():
    client, session = _make_client(_response(payload={"data": {}}))
    assert client.api_url == "https://test-store.myshopify.com/admin/api/2025-01/graphql.json"
    assert client.headers["X-Shopify-Access-Token"] == "shpat_token"
    assert session.headers["X-Shopify-Access-Token"] == "shpat_token"
    assert session.headers["Content-Type"] == "application/json"


def test_query_returns_data():
    client, session = _make_client(_response(payload={"data": {"shop": {"name": "Test"}}}))
    data = client.query("{ shop { name } }", {"a": 1})

    assert data == {"shop": {"name": "Test"}}
    args, kwargs = session.post.call_args
    assert args[0] == client.api_url
    assert kwargs["json"] == {"query": "{ shop { name } }", "variables": {"a": 1}}
    assert kwargs["timeout"] == client.timeout


def test_query_sends_empty_variables_by_default():
    client, session = _make_client(_response(payload={"data": {}}))
    client.query("{ shop { name } }")
    assert session.post.call_args.kwargs["json"]["variables"] == {}


def test_http_error():
    client, _ = _make_client(_response(status=401, text="Invalid API key"))
    with pytest.raises(ApiError) as exc_info:
        client.query("{ shop { name } }")
    error = exc_info.value
    assert error.kind == ApiError.HTTP
    assert error.status == 401
    assert error.body == "Invalid API key"
    assert str(error) == "Shopify API error (401): Invalid API key"


def test_graphql_errors_take_priority_over_data():
    payload = {
        "data": {"shop": {"name": "Test"}},
        "errors": [{"message": "Field 'x' doesn't exist"}, {"message": "Throttled"}],
    }
    client, _ = _make_client(_response(payload=payload))
    with pytest.raises(ApiError) as exc_info:
        client.query("{ x }")
    error = exc_info.value
    assert error.kind == ApiError.GRAPHQL
    assert error.messages == ["Field 'x' doesn't exist", "Throttled"]
    assert str(error) == "GraphQL errors: Field 'x' doesn't exist, Throttled"


def test_empty_errors_list_is_not_an_error():
    client, _ = _make_client(_response(payload={"data": {"ok": True}, "errors": []}))
    assert client.query("{ ok }") == {"ok": True}


def test_no_data():
    client, _ = _make_client(_response(payload={}))
    with pytest.raises(ApiError) as exc_info:
        client.query("{ shop { name } }")
    assert exc_info.value.kind == ApiError.NO_DATA


def test_mutate_is_query():
    client, session = _make_client(_response(payload={"data": {"productCreate": {}}}))
    assert client.mutate("mutation { x }", {"input": {}}) == {"productCreate": {}}
    assert session.post.call_count == 1
