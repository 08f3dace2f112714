"""Tests for request parameter lookup and the _method override."""
import asyncio
from types import SimpleNamespace

from app.routers.params import RequestParams


class FakeRequest:
    def __init__(self, method="GET", query=None, form=None, path="/things/"):
        self.method = method
        self.query_params = query or {}
        self._form_data = form or {}
        self.form_calls = 0
        self.url = SimpleNamespace(path=path)

    async def form(self):
        self.form_calls += 1
        return self._form_data


def run(coro):
    return asyncio.run(coro)


class TestLookup:
    """Query string first, then the form body."""

    def test_query_wins_over_form(self):
        request = FakeRequest("POST", query={"event_id": "Q1"}, form={"event_id": "F1"})
        params = RequestParams(request)
        assert run(params.resolve("event_id")) == "Q1"
        assert request.form_calls == 0

    def test_falls_back_to_form(self):
        request = FakeRequest("POST", form={"event_id": "F1"})
        params = RequestParams(request)
        assert run(params.resolve("event_id")) == "F1"
        assert request.form_calls == 1

    def test_form_parsed_once(self):
        request = FakeRequest("PUT", form={"a": "1", "b": "2"})
        params = RequestParams(request)
        run(params.resolve("a"))
        run(params.resolve("b"))
        run(params.resolve("missing"))
        assert request.form_calls == 1

    def test_get_never_parses_body(self):
        request = FakeRequest("GET", form={"event_id": "F1"})
        params = RequestParams(request)
        assert run(params.resolve("event_id")) == ""
        assert request.form_calls == 0

    def test_get_before_load_ignores_form(self):
        request = FakeRequest("POST", form={"name": "Ana"})
        params = RequestParams(request)
        assert params.get("name") == ""
        run(params.load_form())
        assert params.get("name") == "Ana"

    def test_empty_query_value_falls_through(self):
        request = FakeRequest("POST", query={"name": ""}, form={"name": "Ana"})
        assert run(RequestParams(request).resolve("name")) == "Ana"


class TestMethodOverride:
    """Hidden _method field on POST."""

    def test_override_from_form(self):
        params = RequestParams(FakeRequest("POST", form={"_method": "delete"}))
        assert run(params.method_override()) == "DELETE"
        assert params.effective_method("DELETE") == "DELETE"

    def test_override_from_query(self):
        params = RequestParams(FakeRequest("POST", query={"_method": "PUT"}))
        assert run(params.method_override()) == "PUT"

    def test_invalid_override_ignored(self, caplog):
        params = RequestParams(FakeRequest("POST", form={"_method": "GET"}))
        with caplog.at_level("WARNING"):
            assert run(params.method_override()) is None
        assert "Ignoring invalid _method value 'GET'" in caplog.text
        assert params.effective_method(None) == "POST"

    def test_only_post_is_overridden(self):
        request = FakeRequest("PUT", form={"_method": "DELETE"})
        params = RequestParams(request)
        assert run(params.method_override()) is None
        assert request.form_calls == 0
