"""
Shopify CLI wrapper — Run `shopify theme ...` commands as subprocesses.

Theme files are uploaded with the official Shopify CLI rather than the
Admin API. Output goes straight to the terminal; only the exit code comes
back.
"""

import subprocess
from typing import List, Optional

SHOPIFY_CLI = "shopify"
INSTALL_HINT = "Make sure Shopify CLI is installed: npm install -g @shopify/cli"


def run_shopify_cli(args: List[str]) -> int:
    """Run the Shopify CLI with args and return its exit code.

    A missing `shopify` binary is reported and returns 1.
    """
    try:
        completed = subprocess.run([SHOPIFY_CLI, *args], check=False)
    except FileNotFoundError as e:
        print(f"✗ Failed to run Shopify CLI: {e}")
        print(f"  {INSTALL_HINT}")
        return 1
    return completed.returncode


def build_theme_push_args(shop: str, theme_path: str, unpublished: bool = False) -> List[str]:
    args = ["theme", "push", "--store", shop, "--path", theme_path]
    if unpublished:
        args.append("--unpublished")
    # Skip the confirmation prompt when pushing over the live theme
    args.append("--allow-live")
    return args


def push_theme(shop: str, theme_path: str, unpublished: bool = False) -> int:
    return run_shopify_cli(build_theme_push_args(shop, theme_path, unpublished))


def list_themes(shop: str, extra_args: Optional[List[str]] = None) -> int:
    return run_shopify_cli(["theme", "list", "--store", shop, *(extra_args or [])])
