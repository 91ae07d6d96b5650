"""Tests for switchyard.asgi — resolving and binding ASGI scopes."""

import pytest

from switchyard.asgi import bind, resolve
from switchyard.errors import RouteNotFound
from switchyard.routing.builder import RouteTableBuilder
from switchyard.routing.route import RouteSpec
from switchyard.routing.table import RouteTable


def _make_scope(**overrides: object) -> dict[str, object]:
    """Build a minimal valid ASGI HTTP scope dict."""
    base: dict[str, object] = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/",
        "raw_path": b"/",
        "query_string": b"",
        "root_path": "",
        "headers": [],
        "server": ("localhost", 8000),
        "client": ("127.0.0.1", 54321),
    }
    base.update(overrides)
    return base


def _show_user() -> str:
    return "user"


def _table() -> RouteTable:
    b = RouteTableBuilder()
    b.get(RouteSpec("/users/{id:int}", name="users.show"), _show_user)
    b.post("/users", _show_user)
    return b.build()


class TestResolve:
    def test_dynamic(self) -> None:
        match = resolve(_table(), _make_scope(path="/users/42"))
        assert match.route.name == "users.show"
        assert match.bindings == {"id": "42"}

    def test_method_from_scope(self) -> None:
        match = resolve(_table(), _make_scope(method="POST", path="/users"))
        assert match.route.method == "POST"

    def test_not_found(self) -> None:
        with pytest.raises(RouteNotFound):
            resolve(_table(), _make_scope(path="/posts/1"))


class TestBind:
    def test_adds_path_params_and_route(self) -> None:
        scope = _make_scope(path="/users/42")
        match = resolve(_table(), scope)
        bound = bind(scope, match)
        assert bound["path_params"] == {"id": "42"}
        assert bound["route"] is match.route
        assert bound["path"] == "/users/42"

    def test_does_not_mutate_scope(self) -> None:
        scope = _make_scope(path="/users/42")
        bind(scope, resolve(_table(), scope))
        assert "path_params" not in scope
        assert "route" not in scope

    def test_bindings_override_existing_params(self) -> None:
        scope = _make_scope(path="/users/42", path_params={"id": "old", "tenant": "acme"})
        bound = bind(scope, resolve(_table(), scope))
        assert bound["path_params"] == {"id": "42", "tenant": "acme"}
