"""
client/api.py -- requests-based client for the catalog HTTP API.

CatalogClient owns an AuthState and a ProductState (client/state.py) and is
the only code that mutates them. Every action follows the same shape:

  1. set is_loading, clear the previous error
  2. send the request
  3. on success, fold the response into state
  4. on failure, store the server's "error" text verbatim (or a fallback
     message when the server sent none) and raise CatalogAPIError

fetch_products() is the one exception to step 4: a failed refresh records
the error but does not raise, so a list view can render the error in place.

Requests are not deduplicated; two identical calls send two requests.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from client.state import AuthState, ProductState, UserInfo

logger = logging.getLogger("catalog.client")

DEFAULT_BASE_URL = "http://localhost:8000"
_TIMEOUT = 10


class CatalogAPIError(Exception):
    """A request failed. message is what the user should see.

    status_code is None for transport failures (connection refused, timeout).
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: requests.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return fallback


class CatalogClient:
    """Stateful client for one user session.

    Usage:
        client = CatalogClient("http://localhost:8000")
        client.login("a@b.com", "secret1")
        client.create_product("Widget", "Blue", 9.5)
        client.fetch_products()
        client.products.products   # -> list of product dicts
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        auth: Optional[AuthState] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth = auth if auth is not None else AuthState()
        self.products = ProductState()
        self._session = session if session is not None else requests.Session()
        # Known API, no legitimate reason for long redirect chains.
        self._session.max_redirects = 3

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, json: Any = None, auth: bool = False) -> requests.Response:
        headers: dict[str, str] = {}
        if auth:
            if not self.auth.token:
                raise CatalogAPIError("Not authenticated")
            headers["Authorization"] = f"Bearer {self.auth.token}"
        try:
            return self._session.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                headers=headers,
                timeout=_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise CatalogAPIError(str(e)) from e

    def _call(self, state: AuthState | ProductState, method: str, path: str, fallback: str, **kwargs) -> Any:
        """Run one request with the loading/error bookkeeping described above."""
        state.is_loading = True
        state.error = None
        try:
            resp = self._request(method, path, **kwargs)
            if not resp.ok:
                raise CatalogAPIError(_error_message(resp, fallback), status_code=resp.status_code)
            try:
                return resp.json()
            except ValueError as e:
                raise CatalogAPIError(fallback, status_code=resp.status_code) from e
        except CatalogAPIError as e:
            state.error = e.message
            raise
        finally:
            state.is_loading = False

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _apply_session(self, data: dict[str, Any]) -> UserInfo:
        self.auth.user = UserInfo.from_dict(data["user"])
        self.auth.token = data["token"]
        return self.auth.user

    def login(self, email: str, password: str) -> UserInfo:
        data = self._call(
            self.auth, "POST", "/auth/login", "Login failed", json={"email": email, "password": password}
        )
        return self._apply_session(data)

    def register(self, email: str, password: str, name: str) -> UserInfo:
        data = self._call(
            self.auth,
            "POST",
            "/auth/register",
            "Registration failed",
            json={"email": email, "password": password, "name": name},
        )
        return self._apply_session(data)

    def logout(self) -> None:
        """Drop the token locally. Tokens are stateless; there is no server call."""
        self.auth.clear()
        self.products = ProductState()

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def fetch_products(self) -> list[dict[str, Any]]:
        """Refresh products.products. Records failures in products.error without raising."""
        try:
            data = self._call(self.products, "GET", "/products", "Failed to fetch products", auth=True)
        except CatalogAPIError:
            return self.products.products
        self.products.products = list(data)
        return self.products.products

    def get_product(self, product_id: str) -> dict[str, Any]:
        return self._call(self.products, "GET", f"/products/{product_id}", "Failed to fetch product", auth=True)

    def create_product(self, name: str, description: str, price: float) -> dict[str, Any]:
        created = self._call(
            self.products,
            "POST",
            "/products",
            "Failed to create product",
            json={"name": name, "description": description, "price": price},
            auth=True,
        )
        self.products.products = [*self.products.products, created]
        return created

    def update_product(self, product_id: str, **fields: Any) -> dict[str, Any]:
        """Send only the given fields (name, description, price)."""
        updated = self._call(
            self.products,
            "PUT",
            f"/products/{product_id}",
            "Failed to update product",
            json=fields,
            auth=True,
        )
        self.products.replace(updated)
        return updated

    def delete_product(self, product_id: str) -> None:
        self._call(
            self.products, "DELETE", f"/products/{product_id}", "Failed to delete product", auth=True
        )
        self.products.remove(product_id)
