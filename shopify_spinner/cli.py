"""
Spinner CLI — argparse entry point for all spinner commands.

Usage:
    spinner validate --config store.yaml
    spinner create --config store.yaml --shop-domain my-store [--access-token shpat_...]
    spinner list
    spinner status <store>
    spinner serve [--port 3000]
    spinner whitelist add|remove <shop>
    spinner whitelist list
    spinner theme push --shop my-store [--path ./themes/spinner] [--config store.yaml] [--unpublished]
    spinner theme list --shop my-store

Global options (before the command):
    --env PATH   .env file to load (default ./.env)
    --debug      Verbose output and DEBUG logging
    --version    Show version and exit

Exit codes: 1 on validation failure or any command-level error, else 0.
"""

import argparse
import logging
import os
import shutil
import sys
import tempfile
from typing import List, Optional

from . import __version__
from .config_parser import parse_config_file, validate_config_file
from .errors import ConfigError, SpinnerError
from .oauth import normalize_domain
from .orchestrator import StoreOrchestrator
from .server import ServerConfig, start_server
from .settings import (
    OAUTH_SCOPES,
    get_bool_setting,
    get_data_dir,
    get_int_setting,
    get_setting,
    get_stores_dir,
    get_whitelist_path,
    load_environment,
)
from .shopify_cli import list_themes, push_theme
from .state_manager import COMPLETE, FAILED, IN_PROGRESS, PARTIAL, STEP_LABELS, StateManager
from .theme_customizer import customize_theme
from .whitelist import Whitelist

logger = logging.getLogger(__name__)

STATUS_ICONS = {
    COMPLETE: "✓",
    IN_PROGRESS: "→",
    FAILED: "✗",
    PARTIAL: "⚠",
}


def cmd_validate(args) -> int:
    print("Validating config...")
    result = validate_config_file(args.config)

    if result.valid:
        print("✓ Config is valid")
        return 0

    print("✗ Config has errors:")
    for error in result.errors:
        print(f"  - {error}")
    return 1


def cmd_create(args) -> int:
    orchestrator = StoreOrchestrator(
        args.config,
        access_token=args.access_token,
        shop_domain=args.shop_domain,
        debug=args.debug,
    )
    results = orchestrator.run()
    orchestrator.print_summary(results)
    return 0


def cmd_list(args) -> int:
    state_manager = StateManager(get_stores_dir())
    stores = state_manager.list_stores()

    if not stores:
        print("No stores found.")
        print('Run "spinner create --config <path>" to create a store.')
        return 0

    print("Managed stores:\n")
    for store_name in stores:
        state = state_manager.load_state(store_name)
        if state is None:
            print(f"  {store_name} (no state)")
            continue

        steps = state.get("steps", {})
        completed = sum(1 for s in steps.values() if s.get("status") == COMPLETE)
        print(f"  {state.get('storeName', store_name)} [{completed}/{len(steps)}]")
        if state.get("shopDomain"):
            print(f"    https://{state['shopDomain']}")
    return 0


def cmd_status(args) -> int:
    state = StateManager(get_stores_dir()).load_state(args.store)

    if state is None:
        print(f"✗ Store not found: {args.store}")
        return 1

    print(f"\nStore: {state.get('storeName')}")
    print(f"Config: {state.get('configPath')}")
    print(f"Created: {state.get('createdAt')}")
    print(f"Updated: {state.get('updatedAt')}")
    if state.get("shopDomain"):
        print(f"Domain: https://{state['shopDomain']}")

    print("\nBuild Progress:\n")
    for step, step_state in state.get("steps", {}).items():
        icon = STATUS_ICONS.get(step_state.get("status"), "○")
        print(f"  {icon} {STEP_LABELS.get(step, step)}")

        if step_state.get("error"):
            print(f"      Error: {step_state['error']}")
        for key, value in (step_state.get("data") or {}).items():
            print(f"      {key}: {value}")
    return 0


def cmd_serve(args) -> int:
    client_id = get_setting("SHOPIFY_CLIENT_ID")
    client_secret = get_setting("SHOPIFY_CLIENT_SECRET")

    if not client_id or not client_secret:
        print("✗ Missing required environment variables:")
        print("  SHOPIFY_CLIENT_ID - Your Shopify app client ID")
        print("  SHOPIFY_CLIENT_SECRET - Your Shopify app client secret")
        print("\nGet these from: Dev Dashboard -> Your App -> API credentials")
        return 1

    data_dir = get_data_dir()
    print("Starting Spinner OAuth server...")
    print(f"Data directory: {data_dir}")

    start_server(
        ServerConfig(
            client_id=client_id,
            client_secret=client_secret,
            data_dir=data_dir,
            port=args.port,
            scopes=list(OAUTH_SCOPES),
            state_ttl=get_int_setting("OAUTH_STATE_TTL"),
        )
    )
    return 0


def cmd_whitelist_add(args) -> int:
    if Whitelist(get_whitelist_path()).add_shop(args.shop):
        print(f"✓ Added {normalize_domain(args.shop)} to whitelist")
    else:
        print(f"⚠ {normalize_domain(args.shop)} is already whitelisted")
    return 0


def cmd_whitelist_remove(args) -> int:
    if Whitelist(get_whitelist_path()).remove_shop(args.shop):
        print(f"✓ Removed {normalize_domain(args.shop)} from whitelist")
    else:
        print(f"⚠ {normalize_domain(args.shop)} is not in the whitelist")
    return 0


def cmd_whitelist_list(args) -> int:
    shops = Whitelist(get_whitelist_path()).list_shops()

    if not shops:
        print("No shops in whitelist")
        print("Add a shop with: spinner whitelist add <shop>")
        return 0

    print("Whitelisted shops:")
    for shop in shops:
        print(f"  • {shop}")
    return 0


def cmd_theme_push(args) -> int:
    base_theme_path = os.path.abspath(args.path)
    if not os.path.isdir(base_theme_path):
        print(f"✗ Theme path does not exist: {base_theme_path}")
        return 1

    shop = normalize_domain(args.shop)
    theme_path = base_theme_path
    temp_dir = None

    try:
        if args.config:
            config_path = os.path.abspath(args.config)
            print("Loading config and customizing theme...")
            config = parse_config_file(config_path)

            temp_dir = tempfile.mkdtemp(prefix="spinner-theme-")
            theme_path = os.path.join(temp_dir, "theme")
            customize_theme(config_path, config, base_theme_path, theme_path)

            settings = config.theme.settings if config.theme else None
            if settings and settings.preset:
                print(f"  Preset: {settings.preset}")
            if settings and settings.logo and settings.extract_colors_from_logo:
                print(f"  Extracted colors from: {settings.logo}")
            if settings and settings.content and settings.content.hero_heading:
                print(f'  Hero: "{settings.content.hero_heading}"')
            print("✓ Theme customized")

        print(f"Pushing theme to {shop}...")
        print(f"Theme path: {theme_path}")
        if args.unpublished:
            print("Pushing as unpublished theme")

        exit_code = push_theme(shop, theme_path, unpublished=args.unpublished)
    finally:
        if temp_dir:
            shutil.rmtree(temp_dir, ignore_errors=True)

    if exit_code != 0:
        print("\n✗ Theme push failed")
        return exit_code

    print("\n✓ Theme pushed successfully")
    if args.unpublished:
        print("\nNext steps:")
        print("  1. Go to your Shopify admin: Themes")
        print('  2. Find the uploaded theme and click "Publish"')
        print(f"  3. Run: spinner create --config <config> --shop-domain {shop}")
    else:
        print("\nNext step:")
        print(f"  Run: spinner create --config <config> --shop-domain {shop}")
    return 0


def cmd_theme_list(args) -> int:
    shop = normalize_domain(args.shop)
    print(f"Listing themes for {shop}...")
    return list_themes(shop)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spinner",
        description="Shopify Store Spinner - Spin up Shopify stores from YAML configs",
    )
    parser.add_argument("--env", "-e", default="./.env", help="Path to .env file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", "-v", action="store_true", help="Show version and exit")

    subparsers = parser.add_subparsers(dest="command")

    validate = subparsers.add_parser("validate", help="Validate a config file without creating a store")
    validate.add_argument("--config", "-c", required=True, help="Path to config file")
    validate.set_defaults(handler=cmd_validate)

    create = subparsers.add_parser("create", help="Create a new store from config")
    create.add_argument("--config", "-c", required=True, help="Path to config file")
    create.add_argument("--access-token", help="Shopify Admin API access token")
    create.add_argument("--shop-domain", help="Shop domain (e.g., store.myshopify.com)")
    create.set_defaults(handler=cmd_create)

    list_cmd = subparsers.add_parser("list", help="List all managed stores")
    list_cmd.set_defaults(handler=cmd_list)

    status = subparsers.add_parser("status", help="Show status of a store build")
    status.add_argument("store", help="Store name")
    status.set_defaults(handler=cmd_status)

    serve = subparsers.add_parser("serve", help="Start OAuth server for app installation")
    serve.add_argument("--port", "-p", type=int, default=3000, help="Port to run server on")
    serve.set_defaults(handler=cmd_serve)

    whitelist = subparsers.add_parser("whitelist", help="Manage shop whitelist")
    whitelist_sub = whitelist.add_subparsers(dest="whitelist_command", required=True)
    wl_add = whitelist_sub.add_parser("add", help="Add shop to whitelist")
    wl_add.add_argument("shop")
    wl_add.set_defaults(handler=cmd_whitelist_add)
    wl_remove = whitelist_sub.add_parser("remove", help="Remove shop from whitelist")
    wl_remove.add_argument("shop")
    wl_remove.set_defaults(handler=cmd_whitelist_remove)
    wl_list = whitelist_sub.add_parser("list", help="List all whitelisted shops")
    wl_list.set_defaults(handler=cmd_whitelist_list)

    theme = subparsers.add_parser("theme", help="Manage Shopify themes")
    theme_sub = theme.add_subparsers(dest="theme_command", required=True)
    push = theme_sub.add_parser("push", help="Push theme to a Shopify store (uses Shopify CLI)")
    push.add_argument("--shop", "-s", required=True, help="Shop domain (e.g., store.myshopify.com)")
    push.add_argument("--path", "-p", default="./themes/spinner", help="Path to theme directory")
    push.add_argument("--config", "-c", help="Customize the theme from this config before pushing")
    push.add_argument("--unpublished", action="store_true", help="Push as unpublished theme")
    push.set_defaults(handler=cmd_theme_push)
    theme_list = theme_sub.add_parser("list", help="List themes on a store")
    theme_list.add_argument("--shop", "-s", required=True, help="Shop domain")
    theme_list.set_defaults(handler=cmd_theme_list)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run one command and return its exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"shopify-store-spinner {__version__}")
        return 0

    load_environment(args.env, debug=args.debug)
    args.debug = args.debug or get_bool_setting("DEBUG")
    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    if not getattr(args, "handler", None):
        parser.print_help()
        return 1

    try:
        return args.handler(args)
    except ConfigError as e:
        if e.kind == ConfigError.VALIDATION_ERROR:
            print("✗ Config has errors:")
            for error in e.errors:
                print(f"  - {error}")
        else:
            print(f"✗ Error: {e}")
        return 1
    except SpinnerError as e:
        print(f"✗ Error: {e}")
        return 1
    except Exception as e:
        print(f"✗ Error: {e}")
        if args.debug:
            logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    sys.exit(main())
