"""
client/state.py -- Client-side state containers and their persistence boundary.

AuthState and ProductState hold everything a front end renders: the current
user and token, the product list, a loading flag, and the last error message.
CatalogClient (client/api.py) is the only writer.

Persistence is explicit. AuthState.persisted() selects the fields that
survive a restart (user and token); is_loading and error are transient and
never written. SessionFile is the one place that touches disk.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger("catalog.client")


@dataclass
class UserInfo:
    """The user record returned by /auth/register and /auth/login."""

    id: str
    email: str
    name: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserInfo":
        return cls(id=str(data["id"]), email=data["email"], name=data["name"])

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass
class AuthState:
    user: Optional[UserInfo] = None
    token: Optional[str] = None
    is_loading: bool = False
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def clear(self) -> None:
        """Forget the session (logout)."""
        self.user = None
        self.token = None
        self.error = None

    def persisted(self) -> dict[str, Any]:
        """Return the subset of state that is written to disk."""
        return {
            "user": self.user.to_dict() if self.user else None,
            "token": self.token,
        }

    @classmethod
    def restore(cls, data: Optional[dict[str, Any]]) -> "AuthState":
        """Rebuild state from persisted() output. Unknown keys are ignored."""
        if not data:
            return cls()
        user = data.get("user")
        return cls(
            user=UserInfo.from_dict(user) if user else None,
            token=data.get("token"),
        )


@dataclass
class ProductState:
    """Products as last seen from the server. Never persisted."""

    products: list[dict[str, Any]] = field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None

    def replace(self, product: dict[str, Any]) -> None:
        self.products = [product if p.get("id") == product.get("id") else p for p in self.products]

    def remove(self, product_id: str) -> None:
        self.products = [p for p in self.products if p.get("id") != product_id]


class SessionFile:
    """JSON file holding AuthState.persisted() between CLI invocations.

    The file contains a bearer token, so it is created with 0600 permissions.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> AuthState:
        """Return the stored session, or an empty AuthState if none is usable."""
        if not self.path.is_file():
            return AuthState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return AuthState()
        if not isinstance(data, dict):
            return AuthState()
        try:
            return AuthState.restore(data)
        except (KeyError, TypeError) as e:
            logger.warning("Ignoring malformed session file %s: %s", self.path, e)
            return AuthState()

    def save(self, state: AuthState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(state.persisted(), fh)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
