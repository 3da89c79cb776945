"""Unit tests for the client package (client/api.py, client/state.py, client/validation.py).

No server is involved: CatalogClient gets a MagicMock session whose
request() returns canned responses.

Covers:
- login/register populate AuthState; later calls carry the bearer token
- server "error" text lands in state.error verbatim; fallback when absent
- is_loading is reset after success and failure
- product list maintenance on create/update/delete
- persisted() excludes transient fields; SessionFile round trip and bad files
- form validation messages
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from client.api import CatalogAPIError, CatalogClient
from client.state import AuthState, ProductState, SessionFile, UserInfo
from client.validation import check_login, check_product, check_registration, parse_price

USER = {"id": "u1", "email": "a@b.com", "name": "A"}
WIDGET = {
    "id": "p1",
    "userId": "u1",
    "name": "Widget",
    "description": "Blue",
    "price": 9.5,
    "createdAt": "2026-01-01T00:00:00+00:00",
    "updatedAt": "2026-01-01T00:00:00+00:00",
}


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


def _client(*responses, token=None):
    session = MagicMock()
    session.request.side_effect = list(responses)
    auth = AuthState(user=UserInfo.from_dict(USER), token=token) if token else None
    return CatalogClient("http://api.test/", auth=auth, session=session), session


def _sent_headers(session, call=-1):
    return session.request.call_args_list[call].kwargs["headers"]


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class TestAuthActions:
    def test_login_stores_user_and_token(self):
        client, session = _client(FakeResponse(200, {"user": USER, "token": "tok"}))
        user = client.login("a@b.com", "secret1")

        assert user == UserInfo(**USER)
        assert client.auth.token == "tok"
        assert client.auth.is_authenticated
        assert client.auth.is_loading is False
        assert client.auth.error is None
        method, url = session.request.call_args.args
        assert (method, url) == ("POST", "http://api.test/auth/login")
        assert session.request.call_args.kwargs["json"] == {"email": "a@b.com", "password": "secret1"}
        assert "Authorization" not in _sent_headers(session)

    def test_register_stores_user_and_token(self):
        client, session = _client(FakeResponse(201, {"user": USER, "token": "tok"}))
        client.register("a@b.com", "secret1", "A")
        assert client.auth.user.email == "a@b.com"
        assert client.auth.token == "tok"
        assert session.request.call_args.kwargs["json"]["name"] == "A"

    def test_server_error_text_is_shown_verbatim(self):
        client, _ = _client(FakeResponse(401, {"error": "Invalid credentials", "code": "bad_credentials"}))
        with pytest.raises(CatalogAPIError) as exc_info:
            client.login("a@b.com", "wrong")
        assert exc_info.value.status_code == 401
        assert client.auth.error == "Invalid credentials"
        assert client.auth.token is None
        assert client.auth.is_loading is False

    def test_fallback_message_when_body_has_no_error(self):
        client, _ = _client(FakeResponse(502))
        with pytest.raises(CatalogAPIError):
            client.register("a@b.com", "secret1", "A")
        assert client.auth.error == "Registration failed"

    def test_new_attempt_clears_previous_error(self):
        client, _ = _client(
            FakeResponse(401, {"error": "Invalid credentials"}),
            FakeResponse(200, {"user": USER, "token": "tok"}),
        )
        with pytest.raises(CatalogAPIError):
            client.login("a@b.com", "wrong")
        client.login("a@b.com", "secret1")
        assert client.auth.error is None

    def test_transport_failure_is_wrapped(self):
        client, _ = _client(requests.ConnectionError("connection refused"))
        with pytest.raises(CatalogAPIError) as exc_info:
            client.login("a@b.com", "secret1")
        assert exc_info.value.status_code is None
        assert "connection refused" in client.auth.error

    def test_logout_is_local(self):
        client, session = _client(token="tok")
        client.products.products = [WIDGET]
        client.logout()
        assert not client.auth.is_authenticated
        assert client.auth.user is None
        assert client.products.products == []
        session.request.assert_not_called()


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class TestProductActions:
    def test_requests_carry_bearer_token(self):
        client, session = _client(FakeResponse(200, [WIDGET]), token="tok")
        assert client.fetch_products() == [WIDGET]
        assert _sent_headers(session)["Authorization"] == "Bearer tok"
        assert session.request.call_args.args == ("GET", "http://api.test/products")

    def test_product_calls_without_token_fail_locally(self):
        client, session = _client()
        with pytest.raises(CatalogAPIError, match="Not authenticated"):
            client.create_product("Widget", "Blue", 9.5)
        session.request.assert_not_called()
        assert client.products.error == "Not authenticated"

    def test_fetch_failure_is_recorded_not_raised(self):
        client, _ = _client(FakeResponse(401, {"error": "Invalid token"}), token="tok")
        client.products.products = [WIDGET]
        assert client.fetch_products() == [WIDGET]
        assert client.products.error == "Invalid token"
        assert client.products.is_loading is False

    def test_create_appends(self):
        client, session = _client(FakeResponse(201, WIDGET), token="tok")
        created = client.create_product("Widget", "Blue", 9.5)
        assert created == WIDGET
        assert client.products.products == [WIDGET]
        assert session.request.call_args.kwargs["json"] == {"name": "Widget", "description": "Blue", "price": 9.5}

    def test_update_sends_only_given_fields_and_replaces(self):
        changed = {**WIDGET, "price": 12.0}
        client, session = _client(FakeResponse(200, changed), token="tok")
        other = {**WIDGET, "id": "p2", "name": "Gadget"}
        client.products.products = [WIDGET, other]

        client.update_product("p1", price=12.0)

        assert session.request.call_args.kwargs["json"] == {"price": 12.0}
        assert client.products.products == [changed, other]

    def test_delete_removes_locally(self):
        client, session = _client(FakeResponse(200, {"success": True}), token="tok")
        client.products.products = [WIDGET, {**WIDGET, "id": "p2"}]
        client.delete_product("p1")
        assert [p["id"] for p in client.products.products] == ["p2"]
        assert session.request.call_args.args == ("DELETE", "http://api.test/products/p1")

    def test_failed_delete_keeps_list(self):
        client, _ = _client(FakeResponse(404, {"error": "Product not found"}), token="tok")
        client.products.products = [WIDGET]
        with pytest.raises(CatalogAPIError):
            client.delete_product("p1")
        assert client.products.products == [WIDGET]
        assert client.products.error == "Product not found"

    def test_success_without_json_body_is_an_error(self):
        client, _ = _client(FakeResponse(200), token="tok")
        with pytest.raises(CatalogAPIError) as exc_info:
            client.get_product("p1")
        assert exc_info.value.status_code == 200
        assert client.products.error == "Failed to fetch product"
        assert client.products.is_loading is False

    def test_identical_calls_are_not_deduplicated(self):
        client, session = _client(FakeResponse(200, WIDGET), FakeResponse(200, WIDGET), token="tok")
        client.get_product("p1")
        client.get_product("p1")
        assert session.request.call_count == 2


# ---------------------------------------------------------------------------
# State and persistence
# ---------------------------------------------------------------------------


class TestState:
    def test_persisted_excludes_transient_fields(self):
        state = AuthState(user=UserInfo(**USER), token="tok", is_loading=True, error="boom")
        assert state.persisted() == {"user": USER, "token": "tok"}

    def test_restore_round_trip(self):
        state = AuthState(user=UserInfo(**USER), token="tok")
        restored = AuthState.restore(state.persisted())
        assert restored.user == state.user
        assert restored.token == "tok"
        assert restored.is_loading is False
        assert restored.error is None

    def test_product_state_replace_ignores_unknown_id(self):
        state = ProductState(products=[WIDGET])
        state.replace({**WIDGET, "id": "other"})
        assert state.products == [WIDGET]


class TestSessionFile:
    def test_save_then_load(self, tmp_path):
        session = SessionFile(tmp_path / "session.json")
        session.save(AuthState(user=UserInfo(**USER), token="tok", error="ignored"))

        on_disk = json.loads((tmp_path / "session.json").read_text())
        assert on_disk == {"user": USER, "token": "tok"}
        loaded = session.load()
        assert loaded.token == "tok"
        assert loaded.user.email == "a@b.com"

    def test_file_is_private(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        SessionFile(path).save(AuthState(token="tok"))
        assert path.stat().st_mode & 0o777 == 0o600

    def test_missing_file_is_empty_session(self, tmp_path):
        assert not SessionFile(tmp_path / "nope.json").load().is_authenticated

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"user": {"id": "u1"}, "token": "t"}'])
    def test_unusable_file_is_empty_session(self, tmp_path, content):
        path = tmp_path / "session.json"
        path.write_text(content)
        assert not SessionFile(path).load().is_authenticated

    def test_clear(self, tmp_path):
        session = SessionFile(tmp_path / "session.json")
        session.save(AuthState(token="tok"))
        session.clear()
        session.clear()
        assert not (tmp_path / "session.json").exists()


# ---------------------------------------------------------------------------
# Form validation
# ---------------------------------------------------------------------------


class TestValidation:
    def test_login(self):
        assert check_login("", "secret1") == "Please fill in all fields"
        assert check_login("a@b.com", "") == "Please fill in all fields"
        assert check_login("a@b.com", "secret1") is None

    @pytest.mark.parametrize(
        "args,expected",
        [
            (("", "a@b.com", "secret1", "secret1"), "Please fill in all fields"),
            (("A", "a@b.com", "secret1", "secret2"), "Passwords do not match"),
            (("A", "a@b.com", "abc", "abc"), "Password must be at least 6 characters"),
            (("A", "a@b.com", "secret1", "secret1"), None),
        ],
    )
    def test_registration(self, args, expected):
        assert check_registration(*args) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [("9.5", 9.5), ("0", 0.0), ("-1", None), ("abc", None), ("nan", None), ("inf", None), ("", None)],
    )
    def test_parse_price(self, raw, expected):
        assert parse_price(raw) == expected

    def test_product(self):
        assert check_product("", "1") == "Name and price are required"
        assert check_product("Widget", "") == "Name and price are required"
        assert check_product("Widget", "cheap") == "Price must be a valid number"
        assert check_product("Widget", "1.50") is None
