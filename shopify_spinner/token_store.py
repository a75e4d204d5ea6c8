"""
Token Store — OAuth access tokens persisted for reuse by CLI commands.

File format:
    {"tokens": {"shop.myshopify.com": {"accessToken": "...", "scopes": [...], "shop": "..."}}}

Keys are normalized shop domains; saving a token for a shop replaces any
previous one.
"""

from typing import Any, Dict, List, Optional

from .json_store import read_json, write_json_atomic
from .oauth import normalize_domain


class TokenStore:
    """Stores one access token per shop in a JSON file."""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def _load(self) -> Dict[str, Any]:
        data = read_json(self.file_path, default=lambda: {"tokens": {}})
        data.setdefault("tokens", {})
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        write_json_atomic(self.file_path, data)

    def save_token(self, shop: str, access_token: str, scopes: List[str]) -> None:
        shop = normalize_domain(shop)
        data = self._load()
        data["tokens"][shop] = {"accessToken": access_token, "scopes": list(scopes), "shop": shop}
        self._save(data)

    def get_token(self, shop: str) -> Optional[Dict[str, Any]]:
        return self._load()["tokens"].get(normalize_domain(shop))

    def remove_token(self, shop: str) -> None:
        data = self._load()
        if data["tokens"].pop(normalize_domain(shop), None) is not None:
            self._save(data)

    def list_shops(self) -> List[str]:
        return list(self._load()["tokens"])
