"""
Publication Service — Publish products and collections to the Online Store.

Unlike ProductBuilder's inline publish (which only logs), this service is
strict: if the "Online Store" publication cannot be found among the first
ten publications, get_online_store_publication_id() raises BuilderError, and
the batch methods let that error propagate before publishing anything.
Individual publish failures inside a batch are recorded and the loop moves on.
"""

import time
from typing import Dict, List, Optional

from .errors import BuilderError
from .graphql_queries import PUBLICATIONS_QUERY, PUBLISHABLE_PUBLISH_MUTATION
from .settings import DEFAULT_SETTINGS
from .user_errors import format_user_errors

ONLINE_STORE_PUBLICATION = "Online Store"


class PublicationService:
    """Publishes resources to the Online Store sales channel."""

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug
        self._online_store_publication_id: Optional[str] = None

    def get_online_store_publication_id(self) -> str:
        """Find (and cache) the Online Store publication ID.

        Raises:
            BuilderError: If no publication named "Online Store" exists.
        """
        if self._online_store_publication_id:
            return self._online_store_publication_id

        data = self.client.query(PUBLICATIONS_QUERY)

        for edge in (data.get("publications") or {}).get("edges") or []:
            node = edge.get("node") or {}
            if node.get("name") == ONLINE_STORE_PUBLICATION:
                self._online_store_publication_id = node["id"]
                return self._online_store_publication_id

        raise BuilderError(
            "Online Store publication not found. Is the Online Store sales channel enabled?"
        )

    def publish(self, publishable_id: str) -> None:
        """Publish one product or collection.

        Raises:
            BuilderError: If the mutation returned userErrors.
        """
        publication_id = self.get_online_store_publication_id()

        data = self.client.mutate(
            PUBLISHABLE_PUBLISH_MUTATION,
            {"id": publishable_id, "input": [{"publicationId": publication_id}]},
        )

        user_errors = (data.get("publishablePublish") or {}).get("userErrors") or []
        if user_errors:
            raise BuilderError(format_user_errors(user_errors))

    def publish_product(self, product_id: str) -> None:
        self.publish(product_id)

    def publish_many(
        self,
        publishable_ids: List[str],
        rate_limit_ms: int = DEFAULT_SETTINGS["RATE_LIMIT_MS"],
    ) -> Dict[str, list]:
        """Publish several resources one at a time.

        Returns:
            {"published": [id, ...], "failed": [{"id": str, "error": str}, ...]}
        """
        # Resolve once up front; a missing channel fails the whole batch
        self.get_online_store_publication_id()

        published = []
        failed = []

        for index, publishable_id in enumerate(publishable_ids):
            try:
                self.publish(publishable_id)
                published.append(publishable_id)
            except Exception as e:
                failed.append({"id": publishable_id, "error": str(e)})

            if index < len(publishable_ids) - 1 and rate_limit_ms > 0:
                time.sleep(rate_limit_ms / 1000)

        if self.debug:
            print(f"  Published {len(published)}/{len(publishable_ids)} to {ONLINE_STORE_PUBLICATION}")

        return {"published": published, "failed": failed}

    def publish_products(
        self,
        product_ids: List[str],
        rate_limit_ms: int = DEFAULT_SETTINGS["RATE_LIMIT_MS"],
    ) -> Dict[str, list]:
        return self.publish_many(product_ids, rate_limit_ms)

    def publish_collections(
        self,
        collection_ids: List[str],
        rate_limit_ms: int = DEFAULT_SETTINGS["RATE_LIMIT_MS"],
    ) -> Dict[str, list]:
        return self.publish_many(collection_ids, rate_limit_ms)
