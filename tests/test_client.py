"""Tests for NounProjectClient request building and response handling."""

import anyio
import httpx
import pytest

from nounproject_mcp.client import NounProjectClient
from nounproject_mcp.errors import MalformedResponseError
from nounproject_mcp.registry import (
    AutocompleteInput,
    DownloadIconInput,
    GetCollectionInput,
    GetIconInput,
    SearchCollectionsInput,
    SearchIconsInput,
)
from tests.helpers import RecordingTransport, json_response


def _run(coro_fn, *args):
    return anyio.run(coro_fn, *args)


class TestRequests:
    def test_construction_does_no_io(self, make_client):
        transport = RecordingTransport(json_response(200, {}))
        make_client(transport)
        assert transport.requests == []

    def test_search_icons(self, make_client):
        body = {"icons": [{"id": 1}], "next_page": "abc"}
        transport = RecordingTransport(json_response(200, body))
        client = make_client(transport)

        params = SearchIconsInput(query="dog", styles="line", thumbnail_size=84, limit=5)
        assert _run(client.search_icons, params) == body

        (request,) = transport.requests
        assert request.method == "GET"
        assert request.url.path == "/v2/icon"
        assert dict(request.url.params) == {
            "query": "dog",
            "styles": "line",
            "thumbnail_size": "84",
            "limit": "5",
        }

    def test_get_icon_puts_id_in_path(self, make_client):
        transport = RecordingTransport(json_response(200, {"icon": {"id": 123}}))
        client = make_client(transport)

        _run(client.get_icon, GetIconInput(icon_id=123, thumbnail_size=200))

        (request,) = transport.requests
        assert request.url.path == "/v2/icon/123"
        assert dict(request.url.params) == {"thumbnail_size": "200"}

    def test_get_collection(self, make_client):
        transport = RecordingTransport(json_response(200, {"collection": {}}))
        client = make_client(transport)

        _run(client.get_collection, GetCollectionInput(collection_id=42, include_svg=1))

        (request,) = transport.requests
        assert request.url.path == "/v2/collection/42"
        assert dict(request.url.params) == {"include_svg": "1"}

    def test_search_collections(self, make_client):
        transport = RecordingTransport(json_response(200, {"collections": []}))
        client = make_client(transport)

        _run(client.search_collections, SearchCollectionsInput(query="winter", blacklist=1))

        (request,) = transport.requests
        assert request.url.path == "/v2/collection"
        assert dict(request.url.params) == {"query": "winter", "blacklist": "1"}

    def test_autocomplete(self, make_client):
        transport = RecordingTransport(json_response(200, {"suggestions": ["dog"]}))
        client = make_client(transport)

        result = _run(client.autocomplete, AutocompleteInput(query="do", limit=3))

        assert result == {"suggestions": ["dog"]}
        assert transport.requests[0].url.path == "/v2/icon/autocomplete"

    def test_check_usage(self, make_client):
        usage = {"usage": {"monthly": 12}, "limits": {"monthly": 5000}}
        transport = RecordingTransport(json_response(200, usage))
        client = make_client(transport)

        assert _run(client.check_usage) == usage
        (request,) = transport.requests
        assert request.url.path == "/v2/client/usage"
        assert request.url.query == b""

    def test_requests_are_oauth_signed(self, make_client):
        transport = RecordingTransport(json_response(200, {}))
        client = make_client(transport)

        _run(client.check_usage)

        header = transport.requests[0].headers["Authorization"]
        assert header.startswith("OAuth ")
        assert 'oauth_consumer_key="test-key"' in header
        assert 'oauth_signature_method="HMAC-SHA1"' in header
        assert "test-secret" not in header

    def test_custom_auth_is_used(self, credentials):
        class StaticAuth(httpx.Auth):
            def auth_flow(self, request):
                request.headers["X-Signed"] = "yes"
                yield request

        transport = RecordingTransport(json_response(200, {}))
        client = NounProjectClient(credentials, auth=StaticAuth(), transport=transport)

        _run(client.check_usage)

        (request,) = transport.requests
        assert request.headers["X-Signed"] == "yes"
        assert request.url.host == "api.thenounproject.com"


class TestDownloadUrl:
    def test_returns_bare_url(self, make_client):
        body = {"download_url": "https://static.thenounproject.com/x.svg", "expires": 3600}
        transport = RecordingTransport(json_response(200, body))
        client = make_client(transport)

        url = _run(client.get_download_url, DownloadIconInput(icon_id=123, filetype="svg"))

        assert url == "https://static.thenounproject.com/x.svg"
        (request,) = transport.requests
        assert request.url.path == "/v2/icon/123/download"
        assert dict(request.url.params) == {"filetype": "svg"}

    def test_color_and_size(self, make_client):
        transport = RecordingTransport(json_response(200, {"download_url": "https://x/y.png"}))
        client = make_client(transport)

        _run(
            client.get_download_url,
            DownloadIconInput(icon_id=7, color="FF0000", filetype="png", size=200),
        )

        assert dict(transport.requests[0].url.params) == {
            "color": "FF0000",
            "filetype": "png",
            "size": "200",
        }

    def test_missing_url_is_malformed(self, make_client):
        transport = RecordingTransport(json_response(200, {"base64_encoded_file": "..."}))
        client = make_client(transport)

        with pytest.raises(MalformedResponseError, match="missing download_url"):
            _run(client.get_download_url, DownloadIconInput(icon_id=1))


class TestFailures:
    def test_http_error_raises_status_error(self, make_client):
        transport = RecordingTransport(json_response(404, {"error": "not found"}))
        client = make_client(transport)

        with pytest.raises(httpx.HTTPStatusError) as info:
            _run(client.get_icon, GetIconInput(icon_id=1))
        assert info.value.response.status_code == 404

    def test_non_json_body_is_malformed(self, make_client):
        transport = RecordingTransport(lambda request: httpx.Response(200, text="<html>"))
        client = make_client(transport)

        with pytest.raises(MalformedResponseError, match="not valid JSON"):
            _run(client.check_usage)

    def test_network_error_propagates_without_retry(self, make_client):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        transport = RecordingTransport(refuse)
        client = make_client(transport)

        with pytest.raises(httpx.ConnectError, match="Connection refused"):
            _run(client.check_usage)
        assert len(transport.requests) == 1
