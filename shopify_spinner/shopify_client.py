"""
Shopify API Client — GraphQL requests against the Shopify Admin API.

All builder traffic goes through ShopifyClient.query(). Each call is one
POST to:

    https://{shop}/admin/api/{version}/graphql.json
    Header: X-Shopify-Access-Token: <token>
    Body:   {"query": "...", "variables": {...}}

Errors are classified uniformly as ApiError:
  - HTTP:     non-2xx response (status and raw body kept)
  - GRAPHQL:  2xx with a non-empty "errors" array, even if "data" is present
  - NO_DATA:  2xx with neither "errors" nor "data"

There is no retry, no rate-limit backoff and no query cost accounting.
Callers pace themselves (see the batch loops in the builders).
"""

import logging
from typing import Any, Dict, Optional

import requests

from .errors import ApiError
from .settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class ShopifyClient:
    """Client for the Shopify Admin GraphQL API.

    Attributes:
        shop_domain: The shop's myshopify.com domain.
        api_version: Admin API version (e.g., "2025-01").
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = DEFAULT_SETTINGS["SHOPIFY_API_VERSION"],
        timeout: float = DEFAULT_SETTINGS["REQUEST_TIMEOUT"],
        debug: bool = False,
    ):
        self.shop_domain = shop_domain
        self.api_version = api_version
        self.timeout = timeout
        self.debug = debug
        self._access_token = access_token
        self._session = requests.Session()
        self._session.headers.update(self.headers)

    @property
    def api_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self._access_token,
            "Content-Type": "application/json",
        }

    def query(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a GraphQL document and return its "data" payload.

        Raises:
            ApiError: HTTP, GRAPHQL or NO_DATA (see module docstring).
            requests.RequestException: On transport failures.
        """
        payload = {"query": document, "variables": variables or {}}

        if self.debug:
            logger.debug("POST %s (%d chars)", self.api_url, len(document))

        response = self._session.post(self.api_url, json=payload, timeout=self.timeout)

        if not response.ok:
            raise ApiError.http(response.status_code, response.text)

        result = response.json()

        errors = result.get("errors")
        if errors:
            messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
            raise ApiError.graphql(messages)

        data = result.get("data")
        if data is None:
            raise ApiError.no_data()

        return data

    def mutate(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.query(document, variables)
