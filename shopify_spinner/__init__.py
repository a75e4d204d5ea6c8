"""
Shopify Store Spinner — Provision Shopify stores from YAML configs.

Modules, one concern each:

  config_parser.py       Load YAML, resolve `extends`, validate (config_schema.py)
  product_parser.py      Product CSV -> Product/ProductVariant (products.py)
  shopify_client.py      Admin GraphQL transport (graphql_queries.py)
  product_builder.py     productCreate + variants + soft publish
  collection_builder.py  One smart collection per product tag
  publication_service.py Publish products/collections to Online Store
  theme_builder.py       Main theme settings via themeFilesUpsert
  state_manager.py       Resumable per-store build state on disk
  orchestrator.py        The `create` pipeline
  oauth.py / token_store.py / whitelist.py / server.py   App installation
  theme_customizer.py / color_extractor.py / shopify_cli.py  Local theme push
  cli.py                 argparse entry point
"""

from pathlib import Path

# Read version from the repo-root VERSION file (e.g., "0.1.0").
VERSION_FILE = Path(__file__).resolve().parent.parent / "VERSION"
__version__ = VERSION_FILE.read_text().strip() if VERSION_FILE.exists() else "unknown"

from .errors import (
    ApiError,
    BuilderError,
    BuilderNoResultError,
    ConfigError,
    OAuthError,
    SpinnerError,
    StateError,
)
from .config_parser import merge_configs, parse_config, parse_config_file, validate_config_file
from .config_schema import StoreConfig
from .products import Product, ProductParseResult, ProductVariant
from .product_parser import parse_products_csv
from .shopify_client import ShopifyClient
from .product_builder import ProductBuilder
from .collection_builder import CollectionBuilder
from .publication_service import PublicationService
from .theme_builder import ThemeBuilder
from .state_manager import StateManager
from .orchestrator import StoreOrchestrator
from .oauth import OAuthHandler, normalize_domain
from .token_store import TokenStore
from .whitelist import Whitelist
