"""
Settings — Default configuration values for the Shopify store spinner.

This module provides the DEFAULT_SETTINGS dict used as fallback values when
environment variables are not set. The actual configuration is loaded from
.env at runtime; these defaults make the CLI usable out of the box.

Configuration precedence (highest to lowest):
  1. CLI flags (--debug, --access-token, --shop-domain, --port)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  SHOPIFY_API_VERSION   Admin API version used in the GraphQL endpoint URL
  SPINNER_HOME          Data directory for tokens, whitelist and build state
  RATE_LIMIT_MS         Delay between batch requests (products, collections)
  REQUEST_TIMEOUT       Seconds before an HTTP request to Shopify times out
  OAUTH_STATE_TTL       Seconds a pending OAuth state nonce stays valid
  SHOPIFY_CLIENT_ID     OAuth app client ID (required for `serve`)
  SHOPIFY_CLIENT_SECRET OAuth app client secret (required for `serve`)
  DEBUG                 Whether to print verbose output
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_SETTINGS = {
    "SHOPIFY_API_VERSION": "2025-01",
    "SPINNER_HOME": str(Path.home() / ".spinner"),
    "RATE_LIMIT_MS": 250,
    "REQUEST_TIMEOUT": 30,
    "OAUTH_STATE_TTL": 600,
    "SHOPIFY_CLIENT_ID": "",
    "SHOPIFY_CLIENT_SECRET": "",
    "DEBUG": False,
}

# Scopes requested during app installation
OAUTH_SCOPES = [
    "read_products",
    "write_products",
    "read_themes",
    "write_themes",
    "read_inventory",
    "write_inventory",
    "read_publications",
    "write_publications",
]

STORES_DIRNAME = "stores"
TOKENS_FILENAME = "tokens.json"
WHITELIST_FILENAME = "whitelist.json"


def load_environment(env_file: str = "./.env", debug: bool = False) -> bool:
    """Load a .env file into the process environment if it exists.

    Returns:
        True if the file was found and loaded.
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)
        if debug:
            print(f"Loaded configuration from: {env_file}")
        return True
    return False


def get_setting(name: str) -> str:
    """Return a setting from the environment, falling back to DEFAULT_SETTINGS."""
    return os.getenv(name, str(DEFAULT_SETTINGS[name]))


def get_int_setting(name: str) -> int:
    try:
        return int(get_setting(name))
    except ValueError:
        return int(DEFAULT_SETTINGS[name])


def get_bool_setting(name: str) -> bool:
    return get_setting(name).lower() == "true"


def get_data_dir() -> str:
    return os.path.expanduser(get_setting("SPINNER_HOME"))


def get_stores_dir(data_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir or get_data_dir(), STORES_DIRNAME)


def get_tokens_path(data_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir or get_data_dir(), TOKENS_FILENAME)


def get_whitelist_path(data_dir: Optional[str] = None) -> str:
    return os.path.join(data_dir or get_data_dir(), WHITELIST_FILENAME)
