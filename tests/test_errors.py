"""Tests for switchyard.errors — exception hierarchy and error messages."""

import pytest

from switchyard.errors import (
    ConfigurationError,
    HTTPError,
    RouteGenerationFailure,
    RouteNotFound,
    SwitchyardError,
)
from switchyard.routing.builder import RouteTableBuilder


def _handler() -> str:
    return "ok"


class TestHierarchy:
    def test_http_error_is_switchyard_error(self) -> None:
        assert issubclass(HTTPError, SwitchyardError)

    def test_route_not_found_is_http_error(self) -> None:
        assert issubclass(RouteNotFound, HTTPError)

    def test_generation_failure_is_http_error(self) -> None:
        assert issubclass(RouteGenerationFailure, HTTPError)

    def test_configuration_error_is_switchyard_error(self) -> None:
        assert issubclass(ConfigurationError, SwitchyardError)
        assert not issubclass(ConfigurationError, HTTPError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=400, detail="Bad request body")
        assert err.status == 400
        assert err.detail == "Bad request body"
        assert err.headers == ()

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=400)) == "400"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]


class TestRouteNotFound:
    def test_defaults(self) -> None:
        err = RouteNotFound("/missing")
        assert err.status == 404
        assert err.target == "/missing"
        assert err.detail == "No route matches '/missing'"

    def test_custom_detail(self) -> None:
        err = RouteNotFound("users.show", detail="No route named 'users.show'")
        assert str(err) == "404: No route named 'users.show'"

    def test_raised_by_match(self) -> None:
        b = RouteTableBuilder()
        b.get("/users", _handler)
        table = b.build()
        with pytest.raises(RouteNotFound) as exc_info:
            table.match("GET", "/posts")
        assert exc_info.value.target == "/posts"


class TestRouteGenerationFailure:
    def test_missing_variables_message(self) -> None:
        err = RouteGenerationFailure("posts.show", ("user_id", "post_id"))
        assert err.status == 500
        assert err.name == "posts.show"
        assert err.missing == ("user_id", "post_id")
        assert str(err) == (
            "500: Route 'posts.show' generation failed. "
            "Set values for path variables: user_id, post_id"
        )

    def test_without_missing(self) -> None:
        err = RouteGenerationFailure("posts.show")
        assert err.missing == ()
        assert err.detail == "Route 'posts.show' generation failed."

    def test_custom_detail(self) -> None:
        err = RouteGenerationFailure("posts.show", detail="bad value")
        assert err.detail == "bad value"


class TestConfigurationErrors:
    def test_malformed_template_names_path(self) -> None:
        b = RouteTableBuilder()
        with pytest.raises(ConfigurationError, match=r"/users/\{id"):
            b.get("/users/{id", _handler)
