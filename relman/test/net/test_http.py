"""Tests for relman.net.http module."""

from __future__ import annotations

from relman.core.result import Err, Ok
from relman.net.http import HttpError, HttpResponse, InvalidUrl, MockHttpClient, build_url


class TestBuildUrl:
    def test_appends_segments(self) -> None:
        result = build_url("https://api.github.com", "repos", "acme", "widget", "releases")
        assert result == Ok("https://api.github.com/repos/acme/widget/releases")

    def test_keeps_base_path(self) -> None:
        result = build_url("https://artifacts.example.com/artifactory/", "api", "build")
        assert result == Ok("https://artifacts.example.com/artifactory/api/build")

    def test_splits_slashed_segment(self) -> None:
        result = build_url("https://a.example.com", "libs-release", "io/example/core/1.0.0")
        assert result == Ok("https://a.example.com/libs-release/io/example/core/1.0.0")

    def test_escapes_segments(self) -> None:
        result = build_url("https://api.github.com", "releases", "tags", "v1.0.0 rc")
        assert result == Ok("https://api.github.com/releases/tags/v1.0.0%20rc")

    def test_query(self) -> None:
        result = build_url(
            "https://uploads.github.com/repos/acme/widget/releases/1/assets",
            query={"name": "app.zip"},
        )
        assert result == Ok("https://uploads.github.com/repos/acme/widget/releases/1/assets?name=app.zip")

    def test_safe_query(self) -> None:
        result = build_url(
            "https://a.example.com",
            "api",
            query=[("properties", "build.number=7;build.name=widget")],
            safe_query="=;",
        )
        assert result == Ok("https://a.example.com/api?properties=build.number=7;build.name=widget")

    def test_rejects_non_http(self) -> None:
        result = build_url("ftp://example.com", "x")
        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidUrl)

    def test_rejects_missing_host(self) -> None:
        result = build_url("https://", "x")
        assert isinstance(result, Err)
        assert result.error.reason == "missing host"


class TestHttpResponse:
    def test_ok_range(self) -> None:
        assert HttpResponse(201).ok
        assert not HttpResponse(404).ok

    def test_json_malformed(self) -> None:
        assert HttpResponse(200, b"{nope").json() is None
        assert HttpResponse(200, b"").json() is None
        assert HttpResponse(200, b'{"a": 1}').json() == {"a": 1}


class TestMockHttpClient:
    def test_unscripted_route_is_404(self) -> None:
        client = MockHttpClient()
        result = client.request("GET", "https://example.com/x")
        assert isinstance(result, Ok)
        assert result.value.status == 404

    def test_responses_served_in_order_then_last_repeats(self) -> None:
        client = MockHttpClient()
        url = "https://example.com/x"
        client.set_response("POST", url, HttpResponse(500), HttpResponse(201))
        statuses = []
        for _ in range(3):
            result = client.request("post", url)
            assert isinstance(result, Ok)
            statuses.append(result.value.status)
        assert statuses == [500, 201, 201]
        assert len(client.calls_to("POST", url)) == 3

    def test_transport_error(self) -> None:
        client = MockHttpClient()
        url = "https://example.com/x"
        client.set_response("GET", url, HttpError(url=url, message="connection refused"))
        result = client.request("GET", url)
        assert isinstance(result, Err)
        assert result.error.message == "connection refused"

    def test_records_headers_and_body(self) -> None:
        client = MockHttpClient()
        client.set_json("PUT", "https://example.com/x", {"ok": True})
        client.request("PUT", "https://example.com/x", body=b'{"a": 1}', headers={"X-A": "1"})
        call = client.calls[0]
        assert call.headers == {"X-A": "1"}
        assert call.json() == {"a": 1}
