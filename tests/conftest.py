"""
tests/conftest.py -- Shared test fixtures for the catalog integration tests.

This module provides:
  - _make_test_engine(): an isolated in-memory store per test module
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient against the real app with isolated stores
  - register_user: factory that registers a fresh account via the API

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. The named URI format (file:name?mode=memory&cache=shared&uri=true)
shares one in-memory instance across all connections in the same process.

DEBUG must be set before any server module import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError. The
auth rate limit is raised for the same reason: the limiter's in-memory
counters are process-wide and would otherwise trip across test modules.
"""

from __future__ import annotations

import os
import uuid
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any api/auth/core import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("AUTH_RATE_LIMIT", "1000/minute")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from api.main import app
from auth.store import UserStore
from catalog.store import ProductStore
from core.database import get_engine

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_engine(db_suffix: str) -> Engine:
    """Return the cached engine for a named shared-memory SQLite database.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    return get_engine(f"sqlite:///file:test_catalog_{db_suffix}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(engine: Engine, user_store: UserStore, product_store: ProductStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.engine = engine
        app.state.user_store = user_store
        app.state.product_store = product_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def engine() -> Engine:
    """Fresh isolated store engine for unit tests (one DB per test)."""
    return _make_test_engine(f"unit_{uuid.uuid4().hex}")


@pytest.fixture(scope="module")
def api_client(request) -> Generator[TestClient, None, None]:
    """Yield a TestClient wired to stores private to the calling test module.

    Tests hit real route handlers, real auth, and real SQL; only the storage
    location differs from production.
    """
    engine = _make_test_engine(request.module.__name__.replace(".", "_"))
    user_store = UserStore(engine)
    product_store = ProductStore(engine)

    app.router.lifespan_context = _patch_lifespan(engine, user_store, product_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client


@pytest.fixture
def register_user(api_client: TestClient) -> Callable[..., tuple[dict, str]]:
    """Return a function that registers a unique user and yields (user, token).

    Usage:
        user, token = register_user()
        user, token = register_user(email="x@y.com", password="hunter22")
    """

    def _register(email: str | None = None, password: str = "secret1", name: str = "Test User"):
        email = email or f"user-{uuid.uuid4().hex[:12]}@example.com"
        resp = api_client.post("/auth/register", json={"email": email, "password": password, "name": name})
        assert resp.status_code == 201, f"Registration failed: {resp.status_code} {resp.text}"
        data = resp.json()
        return data["user"], data["token"]

    return _register
