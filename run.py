#!/usr/bin/env python3
"""
Shopify Store Spinner — Entry Point.

Runs the spinner CLI from a source checkout without installing the package.
After `pip install -e .` the same commands are available as `spinner`.

The main command (`create`) performs 5 steps, each recorded in
~/.spinner/stores/<store>/state.json so an interrupted build can resume:
  1. Store created (existing store, installed via OAuth or token flag)
  2. Theme configured (main theme colours/fonts, or `theme push` reminder)
  3. Products imported from CSV, then published to Online Store
  4. Collections created (one per product tag), then published
  5. Settings recorded (currency, timezone)

Usage:
    python run.py validate --config store.yaml
    python run.py create --config store.yaml --shop-domain my-store
    python run.py --debug create --config store.yaml --shop-domain my-store
    python run.py --version
    python run.py --env /path/.env serve --port 3000
"""

import sys

from shopify_spinner.cli import main

if __name__ == "__main__":
    sys.exit(main())
