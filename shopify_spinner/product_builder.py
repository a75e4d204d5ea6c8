"""
Product Builder — Create products and their variants via the Admin API.

Creation is two-phase:

  1. productCreate with the basic fields. If any variant carries options,
     the product's option schema is sent too: the union of option names
     across variants (first-seen order), each with its unique values.

  2. Variants:
       - options present: productVariantsBulkCreate with strategy
         REMOVE_STANDALONE_VARIANT, so the auto-created default variant is
         replaced rather than left orphaned
       - exactly one variant and no options: productVariantsBulkUpdate of
         the default variant Shopify created in phase 1 (price, SKU,
         compare-at price)

Afterwards the product is published to the Online Store channel on a best
effort basis: lookup and publish problems are logged and never change the
outcome of create_product().

Pipeline context:
    Used by the orchestrator's products_imported step. create_products()
    processes products one at a time with a fixed delay between requests.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from .graphql_queries import (
    PRODUCT_CREATE_MUTATION,
    PUBLICATIONS_QUERY,
    PUBLISHABLE_PUBLISH_MUTATION,
    VARIANTS_BULK_CREATE_MUTATION,
    VARIANTS_BULK_UPDATE_MUTATION,
)
from .products import Product, ProductVariant
from .settings import DEFAULT_SETTINGS
from .user_errors import format_user_errors, unwrap_payload

logger = logging.getLogger(__name__)

ONLINE_STORE_PUBLICATION = "Online Store"


def _money(amount: float) -> str:
    return f"{amount:.2f}"


class ProductBuilder:
    """Creates products on a shop through a ShopifyClient."""

    def __init__(self, client, debug: bool = False):
        self.client = client
        self.debug = debug
        self._online_store_publication_id: Optional[str] = None

    # ------------------------------------------------------------------
    # Publishing (best effort)
    # ------------------------------------------------------------------

    def get_online_store_publication_id(self) -> Optional[str]:
        """Return the Online Store publication ID, or None if unavailable.

        The ID is cached once found. A failed lookup (e.g. missing
        read_publications scope) is logged and returns None.
        """
        if self._online_store_publication_id:
            return self._online_store_publication_id

        try:
            data = self.client.query(PUBLICATIONS_QUERY)
        except Exception as e:
            logger.warning(
                "Could not fetch publications (%s); products will need manual publishing", e
            )
            return None

        for edge in (data.get("publications") or {}).get("edges") or []:
            node = edge.get("node") or {}
            if node.get("name") == ONLINE_STORE_PUBLICATION:
                self._online_store_publication_id = node.get("id")
                break

        return self._online_store_publication_id

    def publish_to_online_store(self, product_id: str) -> bool:
        """Publish a product to the Online Store. Never raises.

        Returns:
            True if the publish mutation reported no problems.
        """
        publication_id = self.get_online_store_publication_id()
        if not publication_id:
            logger.warning("Online Store publication not found, skipping publish of %s", product_id)
            return False

        try:
            data = self.client.mutate(
                PUBLISHABLE_PUBLISH_MUTATION,
                {"id": product_id, "input": [{"publicationId": publication_id}]},
            )
        except Exception as e:
            logger.warning("Failed to publish %s to Online Store: %s", product_id, e)
            return False

        user_errors = (data.get("publishablePublish") or {}).get("userErrors") or []
        if user_errors:
            logger.warning(
                "Failed to publish %s to Online Store: %s",
                product_id,
                format_user_errors(user_errors),
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Input construction
    # ------------------------------------------------------------------

    @staticmethod
    def extract_option_names(variants: List[ProductVariant]) -> List[str]:
        """Union of option names across variants, in first-seen order."""
        names: Dict[str, None] = {}
        for variant in variants:
            for name in variant.options:
                names.setdefault(name, None)
        return list(names)

    @staticmethod
    def build_product_options(variants: List[ProductVariant]) -> List[Dict[str, Any]]:
        """Option schema for productCreate: each name with its unique values."""
        options: Dict[str, Dict[str, None]] = {}
        for variant in variants:
            for name, value in variant.options.items():
                options.setdefault(name, {}).setdefault(value, None)

        return [
            {"name": name, "values": [{"name": value} for value in values]}
            for name, values in options.items()
        ]

    @staticmethod
    def build_product_input(product: Product) -> Dict[str, Any]:
        return {
            "title": product.title,
            "descriptionHtml": product.description,
            "vendor": product.vendor,
            "productType": product.type,
            "tags": list(product.tags),
            "handle": product.handle,
            "status": "ACTIVE",
        }

    @staticmethod
    def build_variant_input(variant: ProductVariant, option_names: List[str]) -> Dict[str, Any]:
        variant_input: Dict[str, Any] = {
            "price": _money(variant.price),
            "inventoryItem": {"sku": variant.sku},
        }

        if variant.compare_at_price:
            variant_input["compareAtPrice"] = _money(variant.compare_at_price)

        # Option values follow the product's option order
        if option_names:
            variant_input["optionValues"] = [
                {"optionName": name, "name": variant.options.get(name, "")}
                for name in option_names
            ]

        return variant_input

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_product(self, product: Product) -> Dict[str, str]:
        """Create one product with its variants and publish it.

        Returns:
            {"id", "title", "handle"} of the created product.

        Raises:
            BuilderError: productCreate reported userErrors.
            BuilderNoResultError: productCreate returned no product.
            ApiError: The request itself failed.
        """
        option_names = self.extract_option_names(product.variants)

        product_input = self.build_product_input(product)
        if option_names:
            product_input["productOptions"] = self.build_product_options(product.variants)

        data = self.client.mutate(PRODUCT_CREATE_MUTATION, {"input": product_input})
        created = unwrap_payload(
            data.get("productCreate") or {}, "product", "create product", "product"
        )

        edges = (created.get("variants") or {}).get("edges") or []
        default_variant_id = edges[0]["node"]["id"] if edges else None

        if option_names:
            self._bulk_create_variants(created["id"], product.variants, option_names)
        elif len(product.variants) == 1 and default_variant_id:
            self._update_default_variant(created["id"], default_variant_id, product.variants[0])

        self.publish_to_online_store(created["id"])

        if self.debug:
            print(f"  Created product: {created.get('handle')} ({created['id']})")

        return {
            "id": created["id"],
            "title": created.get("title", product.title),
            "handle": created.get("handle", product.handle),
        }

    def _bulk_create_variants(self, product_id: str, variants: List[ProductVariant], option_names: List[str]):
        data = self.client.mutate(
            VARIANTS_BULK_CREATE_MUTATION,
            {
                "productId": product_id,
                "variants": [self.build_variant_input(v, option_names) for v in variants],
                "strategy": "REMOVE_STANDALONE_VARIANT",
            },
        )
        user_errors = (data.get("productVariantsBulkCreate") or {}).get("userErrors") or []
        if user_errors:
            logger.warning("Failed to create variants for %s: %s", product_id, format_user_errors(user_errors))

    def _update_default_variant(self, product_id: str, variant_id: str, variant: ProductVariant):
        update_input: Dict[str, Any] = {
            "id": variant_id,
            "price": _money(variant.price),
            "inventoryItem": {"sku": variant.sku},
        }
        if variant.compare_at_price:
            update_input["compareAtPrice"] = _money(variant.compare_at_price)

        data = self.client.mutate(
            VARIANTS_BULK_UPDATE_MUTATION,
            {"productId": product_id, "variants": [update_input]},
        )
        user_errors = (data.get("productVariantsBulkUpdate") or {}).get("userErrors") or []
        if user_errors:
            logger.warning("Failed to update variant for %s: %s", product_id, format_user_errors(user_errors))

    def create_products(
        self,
        products: List[Product],
        rate_limit_ms: int = DEFAULT_SETTINGS["RATE_LIMIT_MS"],
    ) -> Dict[str, list]:
        """Create products one at a time, recording each outcome.

        One product failing does not stop the batch. The delay is applied
        between requests and skipped after the last product.

        Returns:
            {"created": [{"id", "title", "handle"}, ...],
             "failed": [{"product": Product, "error": str}, ...]}
        """
        created = []
        failed = []

        for index, product in enumerate(products):
            try:
                created.append(self.create_product(product))
            except Exception as e:
                failed.append({"product": product, "error": str(e)})

            if index < len(products) - 1 and rate_limit_ms > 0:
                time.sleep(rate_limit_ms / 1000)

        return {"created": created, "failed": failed}
