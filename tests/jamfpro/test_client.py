"""
Tests for JamfProClient wiring against an in-process Jamf Pro stand-in.

Tests cover:
- Token acquisition on context entry
- Authorization and affinity headers on every request
- Token reuse across calls and refresh after expiry
- Construction from ClientConfig
"""

import pytest
from aiohttp import web

from conftest import CLIENT_ID, CLIENT_SECRET, xml_response
from jamfpro import ClientConfig, JamfProClient, ReconcileConfig
from jamfpro.errors import ApiError, ConfigurationError
from jamfpro.types import ContentType


class TestConstruction:
    @pytest.mark.parametrize("base_url", ["", "example.jamfcloud.com", None])
    def test_rejects_base_url_without_scheme(self, base_url):
        with pytest.raises(ConfigurationError):
            JamfProClient(base_url, "id", "secret")

    def test_rejects_missing_credentials(self):
        with pytest.raises(ConfigurationError):
            JamfProClient("https://example.jamfcloud.com", "", "secret")

    def test_from_config(self):
        config = ClientConfig(
            base_url="https://example.jamfcloud.com/",
            client_id="id",
            client_secret="secret",
            timeout_seconds=15,
            extra_headers={"X-Team": "endpoint"},
            reconcile={"delete_max_attempts": 2},
        )
        client = JamfProClient.from_config(config)

        assert client.base_url == "https://example.jamfcloud.com"
        assert client.dispatcher.timeout_seconds == 15.0
        assert client.reconcile_config == ReconcileConfig(delete_max_attempts=2)
        assert client.encoder.extra_headers["X-Team"] == "endpoint"
        assert client.encoder.extra_headers["User-Agent"] == "jamfpro-client"

    def test_from_config_validates(self):
        with pytest.raises(ConfigurationError):
            JamfProClient.from_config(ClientConfig(base_url="https://x"))


class TestSession:
    async def test_enter_obtains_token(self, fake_jamf, jamf_server):
        async with JamfProClient(str(jamf_server.make_url("/")), CLIENT_ID, CLIENT_SECRET) as client:
            assert fake_jamf.token_calls == 1
            assert client.session.bearer_token == "token-1"
            assert client.session.affinity == ("jpro-ingress", "node-a")

    async def test_enter_with_bad_credentials_fails(self, fake_jamf, jamf_server):
        client = JamfProClient(str(jamf_server.make_url("/")), CLIENT_ID, "wrong")
        with pytest.raises(ApiError) as exc_info:
            async with client:
                pass
        assert exc_info.value.status == 401
        await client.close()

    async def test_every_request_carries_token_and_affinity(self, fake_jamf, client):
        fake_jamf.on("GET", "/uapi/v1/ping", web.json_response({"ok": True}))

        for _ in range(3):
            response = await client.send("GET", "uapi/v1/ping", into=dict)
            assert response.data == {"ok": True}

        pings = fake_jamf.calls("GET", "/uapi/v1/ping")
        assert len(pings) == 3
        for call in pings:
            assert call["headers"]["Authorization"] == "Bearer token-1"
            assert call["headers"]["Cookie"] == "jpro-ingress=node-a"
        assert fake_jamf.token_calls == 1

    async def test_expired_token_is_refreshed_with_affinity(self, fake_jamf, client):
        fake_jamf.expires_in = 0
        fake_jamf.on("GET", "/uapi/v1/ping", web.json_response({}))

        await client.send("GET", "uapi/v1/ping")
        await client.send("GET", "uapi/v1/ping")

        assert fake_jamf.token_calls == 2
        token_requests = fake_jamf.calls("POST", "/api/oauth/token")
        assert "Cookie" not in token_requests[0]["headers"]
        assert token_requests[1]["headers"]["Cookie"] == "jpro-ingress=node-a"
        assert fake_jamf.calls("GET", "/uapi/v1/ping")[1]["headers"]["Authorization"] == (
            "Bearer token-2"
        )

    async def test_token_endpoint_without_affinity_cookie(self, fake_jamf, client):
        fake_jamf.token_cookies = {}
        fake_jamf.on("GET", "/uapi/v1/ping", web.json_response({}))

        await client.send("GET", "uapi/v1/ping")

        assert client.session.affinity is None
        assert "Cookie" not in fake_jamf.calls("GET", "/uapi/v1/ping")[0]["headers"]


class TestSend:
    async def test_unrecognized_content_type_sends_json(self, fake_jamf, client):
        fake_jamf.on("POST", "/uapi/v1/echo", web.json_response({}, status=201))

        response = await client.send(
            "POST", "uapi/v1/echo", body={"name": "HQ"}, content_type="text/plain"
        )

        assert response.status == 201
        call = fake_jamf.calls("POST", "/uapi/v1/echo")[0]
        assert call["headers"]["Content-Type"] == "application/json"
        assert call["body"] == b'{"name":"HQ"}'

    async def test_xml_response_decoded_by_content_type(self, fake_jamf, client):
        fake_jamf.on("GET", "/JSSResource/thing", xml_response("<thing><id>4</id></thing>"))

        response = await client.send("GET", "JSSResource/thing", into=dict)

        assert response.data == {"id": "4"}

    async def test_error_status_raises_with_raw_body(self, fake_jamf, client):
        fake_jamf.on("PUT", "/uapi/v1/buildings/1", web.Response(status=409, text="duplicate name"))

        with pytest.raises(ApiError) as exc_info:
            await client.send("PUT", "uapi/v1/buildings/1", body={"name": "HQ"})
        assert exc_info.value.status == 409
        assert exc_info.value.message == "duplicate name"

    async def test_safe_method_drops_body(self, fake_jamf, client):
        fake_jamf.on("GET", "/uapi/v1/ping", web.json_response({}))

        await client.send("GET", "uapi/v1/ping", body={"name": "HQ"}, content_type=ContentType.JSON)

        call = fake_jamf.calls("GET", "/uapi/v1/ping")[0]
        assert call["body"] == b""
        assert "Content-Type" not in call["headers"]
