"""
Whitelist — Shops allowed to install the app through the OAuth server.

File format: {"allowed_shops": ["shop.myshopify.com", ...]}
Comparisons use normalized domains, so "Shop" and "SHOP.myshopify.com"
refer to the same entry.
"""

from typing import Any, Dict, List

from .json_store import read_json, write_json_atomic
from .oauth import normalize_domain


class Whitelist:
    def __init__(self, file_path: str):
        self.file_path = file_path

    def _load(self) -> Dict[str, Any]:
        data = read_json(self.file_path, default=lambda: {"allowed_shops": []})
        data.setdefault("allowed_shops", [])
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        write_json_atomic(self.file_path, data)

    def is_allowed(self, shop: str) -> bool:
        normalized = normalize_domain(shop)
        return any(normalize_domain(s) == normalized for s in self._load()["allowed_shops"])

    def add_shop(self, shop: str) -> bool:
        """Add a shop. Returns False if it was already whitelisted."""
        data = self._load()
        normalized = normalize_domain(shop)
        if any(normalize_domain(s) == normalized for s in data["allowed_shops"]):
            return False
        data["allowed_shops"].append(normalized)
        self._save(data)
        return True

    def remove_shop(self, shop: str) -> bool:
        """Remove a shop. Returns False if it was not whitelisted."""
        data = self._load()
        normalized = normalize_domain(shop)
        remaining = [s for s in data["allowed_shops"] if normalize_domain(s) != normalized]
        if len(remaining) == len(data["allowed_shops"]):
            return False
        data["allowed_shops"] = remaining
        self._save(data)
        return True

    def list_shops(self) -> List[str]:
        return list(self._load()["allowed_shops"])
