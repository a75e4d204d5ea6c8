"""
OAuth Handler — Shopify app installation (authorization code grant).

Flow:
    1. Redirect the merchant to
       https://{shop}/admin/oauth/authorize?client_id=..&scope=..&redirect_uri=..&state=..
    2. Shopify redirects back to redirect_uri with ?code&state&shop&hmac&timestamp
    3. POST https://{shop}/admin/oauth/access_token
       Body: {"client_id": "...", "client_secret": "...", "code": "..."}
       Response: {"access_token": "shpat_...", "scope": "read_products,write_products"}

Shop domains are always normalized first (see normalize_domain).
"""

import hashlib
import hmac
from typing import Dict, List, Mapping
from urllib.parse import urlencode

import requests

from .errors import OAuthError
from .settings import DEFAULT_SETTINGS

MYSHOPIFY_SUFFIX = ".myshopify.com"


def normalize_domain(shop: str) -> str:
    """Canonical shop domain: lower-case, no scheme or path, suffix added.

    "Test-Store" and "https://TEST-STORE.myshopify.com/admin" both become
    "test-store.myshopify.com". The suffix is only appended when the value
    has no dot, so custom domains pass through lower-cased.
    """
    normalized = shop.strip().lower()
    for scheme in ("https://", "http://"):
        if normalized.startswith(scheme):
            normalized = normalized[len(scheme):]
    normalized = normalized.split("/", 1)[0]

    if "." not in normalized:
        normalized = f"{normalized}{MYSHOPIFY_SUFFIX}"
    return normalized


class OAuthHandler:
    """Builds authorization URLs and exchanges codes for access tokens."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        scopes: List[str],
        redirect_uri: str,
        timeout: float = DEFAULT_SETTINGS["REQUEST_TIMEOUT"],
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.scopes = scopes
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    @staticmethod
    def normalize_domain(shop: str) -> str:
        return normalize_domain(shop)

    def get_authorization_url(self, shop: str, state: str) -> str:
        params = urlencode({
            "client_id": self.client_id,
            "scope": ",".join(self.scopes),
            "redirect_uri": self.redirect_uri,
            "state": state,
        })
        return f"https://{normalize_domain(shop)}/admin/oauth/authorize?{params}"

    def exchange_code_for_token(self, shop: str, code: str) -> Dict[str, str]:
        """Trade an authorization code for a permanent access token.

        Returns:
            The token response, with "access_token" and "scope" keys.

        Raises:
            OAuthError: If Shopify answers with a non-2xx status.
        """
        url = f"https://{normalize_domain(shop)}/admin/oauth/access_token"
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }

        response = requests.post(url, json=payload, timeout=self.timeout)
        if not response.ok:
            raise OAuthError(
                f"OAuth token exchange failed ({response.status_code}): {response.text}",
                status=response.status_code,
                body=response.text,
            )
        return response.json()

    def verify_hmac(self, params: Mapping[str, str]) -> bool:
        """Check the hmac query parameter Shopify signs redirects with.

        The message is every other parameter, sorted by key, joined as
        key=value pairs with '&', signed with the client secret (SHA-256 hex).
        """
        received = params.get("hmac", "")
        if not received:
            return False

        message = "&".join(
            f"{key}={value}"
            for key, value in sorted(params.items())
            if key not in ("hmac", "signature")
        )
        digest = hmac.new(
            self.client_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(digest, received)
