"""
Store Orchestrator — Pipeline coordination for the `create` command.

This module ties the other modules together (config parser, product parser,
ShopifyClient, the builders and StateManager) into a resumable 5-step build:

  Step 1: STORE CREATED
      The store already exists (it was installed via OAuth or the token was
      passed in). Recorded as complete with a note.

  Step 2: THEME CONFIGURED
      When the config has a theme block with colors or typography, the
      ThemeBuilder writes them into the main theme's settings_data.json.
      Otherwise the step is completed with a reminder to push the theme
      with `spinner theme push`.

  Step 3: PRODUCTS IMPORTED
      Parses the product CSV (path relative to the config file), creates
      every product, then publishes the created products to Online Store.

  Step 4: COLLECTIONS CREATED
      One smart collection per unique product tag, then published.

  Step 5: SETTINGS APPLIED
      Currency and timezone are recorded for the merchant to apply in the
      Shopify admin.

State:
    Progress lives in <data_dir>/stores/<store-slug>/state.json and is saved
    after every transition. Steps already marked complete are skipped, so
    re-running `create` after a failure resumes where the build stopped.
    A failed step is recorded and the next step still runs.

Typical usage:
    orchestrator = StoreOrchestrator("store.yaml", shop_domain="my-store")
    results = orchestrator.run()
    orchestrator.print_summary(results)
"""

import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .collection_builder import CollectionBuilder
from .config_parser import parse_config_file
from .config_schema import StoreConfig
from .oauth import normalize_domain
from .product_builder import ProductBuilder
from .product_parser import parse_products_csv
from .products import Product
from .publication_service import PublicationService
from .settings import (
    get_data_dir,
    get_int_setting,
    get_setting,
    get_stores_dir,
    get_tokens_path,
)
from .shopify_client import ShopifyClient
from .state_manager import COMPLETE, FAILED, IN_PROGRESS, PARTIAL, STEP_LABELS, STEP_ORDER, StateManager
from .theme_builder import ThemeBuilder
from .token_store import TokenStore

logger = logging.getLogger(__name__)


def store_slug(name: str) -> str:
    """State directory name for a store: lower-cased, whitespace runs -> '-'."""
    return re.sub(r"\s+", "-", name.lower())


def _banner(title: str) -> None:
    print(f"\n{'='*60}")
    print(title)
    print("=" * 60)


class StoreOrchestrator:
    """Runs the store build pipeline for one config file.

    Attributes:
        config_path: Absolute path to the store YAML config.
        access_token: Admin API token (from the CLI flag or the token store).
        shop_domain: Normalized myshopify.com domain, if known.
        data_dir: Root for tokens.json and stores/ (SPINNER_HOME by default).
        rate_limit_ms: Delay between batch requests.
        debug: Whether to enable verbose output.
    """

    def __init__(
        self,
        config_path: str,
        access_token: Optional[str] = None,
        shop_domain: Optional[str] = None,
        data_dir: Optional[str] = None,
        rate_limit_ms: Optional[int] = None,
        debug: bool = False,
    ):
        self.config_path = os.path.abspath(config_path)
        self.access_token = access_token
        self.shop_domain = normalize_domain(shop_domain) if shop_domain else None
        self.data_dir = data_dir or get_data_dir()
        self.rate_limit_ms = (
            rate_limit_ms if rate_limit_ms is not None else get_int_setting("RATE_LIMIT_MS")
        )
        self.debug = debug

        self.state_manager = StateManager(get_stores_dir(self.data_dir))
        self.token_store = TokenStore(get_tokens_path(self.data_dir))

        self.config: Optional[StoreConfig] = None
        self.store_name: Optional[str] = None
        self.client: Optional[ShopifyClient] = None
        self._products: Optional[List[Product]] = None

    def resolve_credentials(self) -> bool:
        """Fill in the access token from the token store when not given.

        Returns:
            True if both a shop domain and an access token are available.
        """
        if self.shop_domain and not self.access_token:
            stored = self.token_store.get_token(self.shop_domain)
            if stored:
                self.access_token = stored["accessToken"]
                print(f"Using stored token for {self.shop_domain}")

        return bool(self.shop_domain and self.access_token)

    @staticmethod
    def print_install_instructions() -> None:
        print("\nNo credentials found.")
        print("Option 1: Install app via OAuth")
        print("  1. Add shop to whitelist: spinner whitelist add <shop>")
        print("  2. Start OAuth server: spinner serve")
        print("  3. Visit: http://localhost:3000/auth?shop=<shop>")
        print("\nOption 2: Provide credentials directly")
        print("  spinner create --config <config> --shop-domain <shop> --access-token <token>")

    def run(self) -> Dict[str, Any]:
        """Execute the build pipeline.

        Returns:
            A dict containing:
                - started_at/completed_at: ISO timestamps
                - store_name / shop_domain
                - success: True if no step failed
                - credentials_missing: True if the run stopped before any step
                - steps: Final status per step name

        Raises:
            ConfigError: If the config file cannot be loaded or validated.
        """
        results: Dict[str, Any] = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "config_path": self.config_path,
            "success": False,
        }

        print("Loading config...")
        self.config = parse_config_file(self.config_path)
        self.store_name = store_slug(self.config.store.name)
        results["store_name"] = self.store_name
        print(f"Creating store: {self.config.store.name}")

        if not self.resolve_credentials():
            self.print_install_instructions()
            results["credentials_missing"] = True
            results["completed_at"] = datetime.now(timezone.utc).isoformat()
            return results

        results["shop_domain"] = self.shop_domain
        self.client = ShopifyClient(
            self.shop_domain,
            self.access_token,
            api_version=get_setting("SHOPIFY_API_VERSION"),
            timeout=get_int_setting("REQUEST_TIMEOUT"),
            debug=self.debug,
        )

        state = self.state_manager.load_state(self.store_name)
        if state is None:
            state = self.state_manager.initialize_state(self.store_name, self.config_path)
        state["shopDomain"] = self.shop_domain
        self.state_manager.save_state(self.store_name, state)

        step_handlers = {
            "store_created": self._step_store_created,
            "theme_configured": self._step_theme_configured,
            "products_imported": self._step_products_imported,
            "collections_created": self._step_collections_created,
            "settings_applied": self._step_settings_applied,
        }

        for step in STEP_ORDER:
            state = self.state_manager.load_state(self.store_name)
            if state["steps"][step]["status"] == COMPLETE:
                if self.debug:
                    print(f"\nSkipping {STEP_LABELS[step]} (already complete)")
                continue

            try:
                step_handlers[step]()
            except Exception as e:
                self.state_manager.set_step_error(self.store_name, step, str(e))
                print(f"  ✗ {STEP_LABELS[step]} failed: {e}")
                if self.debug:
                    logger.exception("Step %s failed", step)

        final_state = self.state_manager.load_state(self.store_name)
        results["steps"] = {
            step: final_state["steps"][step]["status"] for step in STEP_ORDER
        }
        results["success"] = all(status != FAILED for status in results["steps"].values())
        results["completed_at"] = datetime.now(timezone.utc).isoformat()
        return results

    def _step_store_created(self) -> None:
        _banner("STEP 1: STORE CREATED")
        self.state_manager.update_step(
            self.store_name, "store_created", COMPLETE, {"note": "Using existing store"}
        )
        print(f"  ✓ Using existing store: {self.shop_domain}")

    def _step_theme_configured(self) -> None:
        if self.config.theme is None:
            return

        _banner("STEP 2: THEME CONFIGURED")
        theme_settings = self.config.theme.settings
        has_theme_values = theme_settings is not None and (
            theme_settings.colors is not None or theme_settings.typography is not None
        )

        if not has_theme_values:
            print("  Theme files are pushed separately:")
            print(f"    spinner theme push --shop {self.shop_domain} --path ./themes/<theme-name>")
            self.state_manager.update_step(
                self.store_name,
                "theme_configured",
                COMPLETE,
                {"note": "Theme pushed via Shopify CLI (spinner theme push)"},
            )
            return

        self.state_manager.update_step(self.store_name, "theme_configured", IN_PROGRESS)
        theme_id = ThemeBuilder(self.client, self.debug).configure_theme(self.config.theme)
        self.state_manager.update_step(
            self.store_name, "theme_configured", COMPLETE, {"themeId": theme_id}
        )
        print(f"  ✓ Theme settings applied to {theme_id}")

    def _load_products(self) -> Optional[List[Product]]:
        """Parse the product CSV once per run.

        Raises:
            ValueError: If the CSV has row errors.
        """
        if self._products is not None:
            return self._products
        if self.config.products is None:
            return None

        csv_path = os.path.join(os.path.dirname(self.config_path), self.config.products.source)
        parse_result = parse_products_csv(csv_path)

        if parse_result.errors:
            raise ValueError(f"CSV errors: {', '.join(parse_result.errors)}")

        for warning in parse_result.warnings:
            print(f"  ⚠ {warning}")

        self._products = parse_result.products
        return self._products

    def _step_products_imported(self) -> None:
        if self.config.products is None:
            return

        _banner("STEP 3: PRODUCTS IMPORTED")
        self.state_manager.update_step(self.store_name, "products_imported", IN_PROGRESS)

        products = self._load_products()
        result = ProductBuilder(self.client, self.debug).create_products(products, self.rate_limit_ms)
        print(f"  ✓ {len(result['created'])} products imported")

        if result["failed"]:
            for failure in result["failed"]:
                print(f"  ✗ {failure['product'].handle}: {failure['error']}")
            self.state_manager.update_step(
                self.store_name,
                "products_imported",
                PARTIAL,
                {"created": len(result["created"]), "failed": len(result["failed"])},
            )
        else:
            self.state_manager.update_step(
                self.store_name, "products_imported", COMPLETE, {"count": len(result["created"])}
            )

        product_ids = [p["id"] for p in result["created"]]
        if product_ids:
            print("  Publishing products to Online Store...")
            self._publish(product_ids, "products")

    def _step_collections_created(self) -> None:
        if self.config.products is None or not self.config.products.create_collections:
            return

        try:
            products = self._load_products()
        except ValueError:
            # The products step already recorded the CSV errors.
            return

        _banner("STEP 4: COLLECTIONS CREATED")
        self.state_manager.update_step(self.store_name, "collections_created", IN_PROGRESS)

        result = CollectionBuilder(self.client, self.debug).create_collections_from_products(
            products, self.rate_limit_ms
        )
        print(f"  ✓ {len(result['created'])} collections created")

        if result["failed"]:
            for failure in result["failed"]:
                print(f"  ⚠ {failure['tag']}: {failure['error']}")
            self.state_manager.update_step(
                self.store_name,
                "collections_created",
                PARTIAL,
                {"created": len(result["created"]), "failed": len(result["failed"])},
            )
        else:
            self.state_manager.update_step(
                self.store_name, "collections_created", COMPLETE, {"count": len(result["created"])}
            )

        collection_ids = [c["id"] for c in result["created"]]
        if collection_ids:
            print("  Publishing collections to Online Store...")
            self._publish(collection_ids, "collections")

    def _publish(self, ids: List[str], kind: str) -> None:
        """Publish to Online Store. Failures are reported, never fatal."""
        service = PublicationService(self.client, self.debug)
        try:
            if kind == "collections":
                result = service.publish_collections(ids, self.rate_limit_ms)
            else:
                result = service.publish_products(ids, self.rate_limit_ms)
        except Exception as e:
            print(f"  ⚠ Failed to publish {kind}: {e}")
            return

        print(f"  ✓ {len(result['published'])} {kind} published")
        for failure in result["failed"]:
            print(f"  ⚠ Failed to publish {failure['id']}: {failure['error']}")

    def _step_settings_applied(self) -> None:
        store_settings = self.config.settings
        if store_settings is None:
            return

        _banner("STEP 5: SETTINGS APPLIED")
        self.state_manager.update_step(
            self.store_name,
            "settings_applied",
            COMPLETE,
            {
                "currency": store_settings.currency,
                "timezone": store_settings.timezone,
                "note": "Apply currency and timezone in the Shopify admin",
            },
        )
        print(f"  Currency: {store_settings.currency}")
        print(f"  Timezone: {store_settings.timezone}")
        print("  ⚠ Set these in Shopify admin > Settings > General")

    def print_summary(self, results: Dict[str, Any]) -> None:
        """Print a human-readable build summary.

        Args:
            results: The dict returned by run().
        """
        if results.get("credentials_missing"):
            return

        _banner("BUILD COMPLETE")
        print(f"Status: {'SUCCESS' if results.get('success') else 'FAILED'}")
        print(f"Store configured: {self.config.store.name if self.config else results.get('store_name')}")

        for step, status in results.get("steps", {}).items():
            print(f"  {STEP_LABELS[step]}: {status}")

        shop = results.get("shop_domain")
        if shop:
            print(f"Shop: https://{shop}")
            print(f"Admin: https://{shop}/admin")
