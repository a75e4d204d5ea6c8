"""
Collection Builder — One smart collection per product tag.

Tags are lower-cased and de-duplicated across all products (first-seen
order). Each tag becomes a smart collection titled with its first letter
upper-cased and a single rule: TAG EQUALS <tag>.
"""

import time
from typing import Any, Dict, List

from .graphql_queries import COLLECTION_CREATE_MUTATION
from .products import Product
from .settings import DEFAULT_SETTINGS
from .user_errors import unwrap_payload


class CollectionBuilder:
    """Creates tag-based smart collections through a ShopifyClient."""

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug

    @staticmethod
    def extract_unique_tags(products: List[Product]) -> List[str]:
        tags: Dict[str, None] = {}
        for product in products:
            for tag in product.tags:
                tags.setdefault(tag.lower(), None)
        return list(tags)

    @staticmethod
    def build_collection_input(tag: str) -> Dict[str, Any]:
        return {
            "title": tag[:1].upper() + tag[1:],
            "ruleSet": {
                "appliedDisjunctively": False,
                "rules": [
                    {"column": "TAG", "relation": "EQUALS", "condition": tag},
                ],
            },
        }

    def create_collection_for_tag(self, tag: str) -> Dict[str, str]:
        """Create the smart collection for one tag.

        Raises:
            BuilderError: collectionCreate reported userErrors.
            BuilderNoResultError: collectionCreate returned no collection.
        """
        data = self.client.mutate(
            COLLECTION_CREATE_MUTATION, {"input": self.build_collection_input(tag)}
        )
        collection = unwrap_payload(
            data.get("collectionCreate") or {}, "collection", "create collection", "collection"
        )

        if self.debug:
            print(f"  Created collection: {collection.get('title')} ({collection.get('id')})")

        return collection

    def create_collections_from_products(
        self,
        products: List[Product],
        rate_limit_ms: int = DEFAULT_SETTINGS["RATE_LIMIT_MS"],
    ) -> Dict[str, list]:
        """Create a collection for every unique tag.

        Returns:
            {"created": [{"id", "title", "handle"}, ...],
             "failed": [{"tag": str, "error": str}, ...]}
        """
        tags = self.extract_unique_tags(products)
        created = []
        failed = []

        for index, tag in enumerate(tags):
            try:
                created.append(self.create_collection_for_tag(tag))
            except Exception as e:
                failed.append({"tag": tag, "error": str(e)})

            if index < len(tags) - 1 and rate_limit_ms > 0:
                time.sleep(rate_limit_ms / 1000)

        return {"created": created, "failed": failed}
