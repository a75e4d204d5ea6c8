"""Tests for shopify_spinner.publication_service.PublicationService."""

from unittest.mock import MagicMock, patch

import pytest

from shopify_spinner.errors import BuilderError
from shopify_spinner.publication_service import PublicationService

ONLINE_STORE_ID = "gid://shopify/Publication/2"
PUBLICATIONS = {
    "publications": {
        "edges": [
            {"node": {"id": "gid://shopify/Publication/1", "name": "Shop"}},
            {"node": {"id": ONLINE_STORE_ID, "name": "Online Store"}},
        ]
    }
}


def _make_client(publications=PUBLICATIONS, failing_ids=()):
    client = MagicMock()
    client.query.return_value = publications

    def publish(document, variables):
        if variables["id"] in failing_ids:
            return {"publishablePublish": {"userErrors": [{"field": ["id"], "message": "Resource not found"}]}}
        return {"publishablePublish": {"userErrors": []}}

    client.mutate.side_effect = publish
    return client


def test_get_online_store_publication_id():
    client = _make_client()
    service = PublicationService(client)
    assert service.get_online_store_publication_id() == ONLINE_STORE_ID
    assert service.get_online_store_publication_id() == ONLINE_STORE_ID
    assert client.query.call_count == 1


def test_missing_online_store_raises():
    service = PublicationService(_make_client(publications={"publications": {"edges": []}}))
    with pytest.raises(BuilderError, match="Online Store publication not found"):
        service.get_online_store_publication_id()


def test_null_publications_connection_raises_builder_error():
    service = PublicationService(_make_client(publications={"publications": None}))
    with pytest.raises(BuilderError, match="Online Store publication not found"):
        service.get_online_store_publication_id()


def test_publish_sends_publication_input():
    client = _make_client()
    PublicationService(client).publish_product("gid://shopify/Product/1")
    variables = client.mutate.call_args.args[1]
    assert variables == {"id": "gid://shopify/Product/1", "input": [{"publicationId": ONLINE_STORE_ID}]}


def test_publish_user_errors_raise():
    client = _make_client(failing_ids=("gid://shopify/Product/1",))
    with pytest.raises(BuilderError, match="id: Resource not found"):
        PublicationService(client).publish("gid://shopify/Product/1")


@patch("shopify_spinner.publication_service.time.sleep")
def test_publish_products_records_failures(mock_sleep):
    client = _make_client(failing_ids=("p2",))
    result = PublicationService(client).publish_products(["p1", "p2", "p3"], rate_limit_ms=250)

    assert result["published"] == ["p1", "p3"]
    assert result["failed"] == [{"id": "p2", "error": "id: Resource not found"}]
    assert mock_sleep.call_count == 2


@patch("shopify_spinner.publication_service.time.sleep")
def test_publish_collections(mock_sleep):
    client = _make_client()
    result = PublicationService(client).publish_collections(["c1"])
    assert result == {"published": ["c1"], "failed": []}
    mock_sleep.assert_not_called()


@patch("shopify_spinner.publication_service.time.sleep")
def test_batch_fails_fast_without_online_store(mock_sleep):
    client = _make_client(publications={"publications": {"edges": []}})
    with pytest.raises(BuilderError):
        PublicationService(client).publish_products(["p1", "p2"])
    client.mutate.assert_not_called()
