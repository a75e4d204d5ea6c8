"""
OAuth Server — FastAPI app that installs the spinner app on whitelisted shops.

Routes:
  GET /health               {"status": "ok"}
  GET /auth?shop=           302 to Shopify's authorize URL (400 no shop, 403 not whitelisted)
  GET /auth/callback        Exchanges the code, saves the token, returns an HTML page
  GET /shops                {"shops": [...]} shops with a stored token

Each /auth request issues a random state nonce tied to the shop. The callback
must present the same state for the same shop before the nonce expires
(OAUTH_STATE_TTL). Nonces live in a PendingStateStore that belongs to the app
instance, so two apps never share pending installs.
"""

import html
import logging
import secrets
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from .errors import OAuthError
from .oauth import OAuthHandler, normalize_domain
from .settings import DEFAULT_SETTINGS, OAUTH_SCOPES, get_tokens_path, get_whitelist_path
from .token_store import TokenStore
from .whitelist import Whitelist

logger = logging.getLogger(__name__)


@dataclass
class ServerConfig:
    client_id: str
    client_secret: str
    data_dir: str
    port: int = 3000
    scopes: List[str] = field(default_factory=lambda: list(OAUTH_SCOPES))
    state_ttl: int = DEFAULT_SETTINGS["OAUTH_STATE_TTL"]

    @property
    def redirect_uri(self) -> str:
        return f"http://localhost:{self.port}/auth/callback"


class PendingStateStore:
    """State nonce -> shop, each entry valid for `ttl` seconds."""

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._states: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _purge_expired(self, now: float) -> None:
        expired = [state for state, (_, expires) in self._states.items() if expires <= now]
        for state in expired:
            del self._states[state]

    def issue(self, shop: str) -> str:
        state = secrets.token_hex(16)
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._states[state] = (shop, now + self.ttl)
        return state

    def peek(self, state: str) -> Optional[str]:
        """Shop the state was issued for, or None if unknown or expired."""
        with self._lock:
            self._purge_expired(self._clock())
            entry = self._states.get(state)
        return entry[0] if entry else None

    def consume(self, state: str) -> None:
        with self._lock:
            self._states.pop(state, None)

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired(self._clock())
            return len(self._states)


SUCCESS_PAGE = """<html>
  <body style="font-family: sans-serif; padding: 40px; text-align: center;">
    <h1>Installation Successful!</h1>
    <p>Spinner is now connected to <strong>{shop}</strong></p>
    <p>You can close this window and use the Spinner CLI to configure your store.</p>
    <pre style="background: #f5f5f5; padding: 20px; border-radius: 8px;">
spinner create --config ./configs/your-config.yaml --shop-domain {shop}
    </pre>
  </body>
</html>
"""


def create_app(
    config: ServerConfig,
    oauth: Optional[OAuthHandler] = None,
    pending_states: Optional[PendingStateStore] = None,
) -> FastAPI:
    """Build the OAuth app with its own whitelist, token store and state store."""
    whitelist = Whitelist(get_whitelist_path(config.data_dir))
    token_store = TokenStore(get_tokens_path(config.data_dir))
    if oauth is None:
        oauth = OAuthHandler(config.client_id, config.client_secret, config.scopes, config.redirect_uri)
    if pending_states is None:
        pending_states = PendingStateStore(config.state_ttl)

    app = FastAPI(title="Spinner OAuth", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.pending_states = pending_states
    app.state.token_store = token_store
    app.state.whitelist = whitelist

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/auth")
    def auth(shop: Optional[str] = None):
        if not shop:
            return PlainTextResponse(
                "Missing shop parameter. Use /auth?shop=your-store.myshopify.com", status_code=400
            )

        normalized_shop = normalize_domain(shop)
        if not whitelist.is_allowed(normalized_shop):
            return PlainTextResponse(
                f"Shop {normalized_shop} is not authorized to install this app.\n"
                "Contact the app administrator to request access.",
                status_code=403,
            )

        state = pending_states.issue(normalized_shop)
        return RedirectResponse(oauth.get_authorization_url(normalized_shop, state), status_code=302)

    @app.get("/auth/callback")
    def auth_callback(request: Request):
        params = dict(request.query_params)
        code = params.get("code")
        state = params.get("state")
        shop = params.get("shop")

        if not code or not state or not shop:
            return PlainTextResponse("Missing required parameters", status_code=400)

        expected_shop = pending_states.peek(state)
        if expected_shop is None:
            return PlainTextResponse("Invalid or expired state parameter", status_code=400)

        normalized_shop = normalize_domain(shop)
        if normalized_shop != expected_shop:
            return PlainTextResponse("Shop mismatch", status_code=400)

        if "hmac" in params and not oauth.verify_hmac(params):
            return PlainTextResponse("HMAC validation failed", status_code=400)

        pending_states.consume(state)

        try:
            token_response = oauth.exchange_code_for_token(normalized_shop, code)
        except (OAuthError, ValueError, OSError) as e:
            logger.error("OAuth callback error for %s: %s", normalized_shop, e)
            return PlainTextResponse(f"Authentication failed: {e}", status_code=500)

        scopes = [s for s in token_response.get("scope", "").split(",") if s]
        token_store.save_token(normalized_shop, token_response["access_token"], scopes)
        logger.info("Stored access token for %s", normalized_shop)

        return HTMLResponse(SUCCESS_PAGE.format(shop=html.escape(normalized_shop)))

    @app.get("/shops")
    def shops():
        return {"shops": token_store.list_shops()}

    return app


def start_server(config: ServerConfig) -> None:
    app = create_app(config)

    print(f"Spinner OAuth server running on http://localhost:{config.port}")
    print(f"Install URL: http://localhost:{config.port}/auth?shop=SHOP_NAME")

    uvicorn.run(app, host="127.0.0.1", port=config.port)
