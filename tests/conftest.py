"""
pytest configuration for the Jamf Pro client tests.

Adds src directory to Python path for imports and provides an in-process
stand-in for a Jamf Pro server.
"""

import sys
from pathlib import Path

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from jamfpro.client import JamfProClient  # noqa: E402
from jamfpro.resilience.reconcile import ReconcileConfig  # noqa: E402

CLIENT_ID = "test-client"
CLIENT_SECRET = "test-secret"


class FakeJamf:
    """
    Minimal Jamf Pro server.

    Serves the identity endpoint and whatever routes a test registers with
    ``on``. Every request is recorded in ``requests``.
    """

    def __init__(self):
        self.requests: list[dict] = []
        self.token_calls = 0
        self.expires_in = 1200
        self.token_cookies: dict[str, str] = {"jpro-ingress": "node-a"}
        self._routes: dict[tuple[str, str], list] = {}

        @web.middleware
        async def record(request, handler):
            body = await request.read()
            self.requests.append(
                {
                    "method": request.method,
                    "path": request.path,
                    "headers": dict(request.headers),
                    "body": body,
                }
            )
            return await handler(request)

        self.app = web.Application(middlewares=[record])
        self.app.router.add_post("/api/oauth/token", self._token)
        self.app.router.add_route("*", "/{tail:.*}", self._dispatch)

    def on(self, method: str, path: str, *responses) -> None:
        """
        Register responses for ``method path``.

        Each response is a ``web.Response`` or a callable taking the request.
        They are served in order; the last one repeats.
        """
        self._routes[(method.upper(), path)] = list(responses)

    def calls(self, method: str, path: str) -> list[dict]:
        return [r for r in self.requests if r["method"] == method and r["path"] == path]

    async def _token(self, request: web.Request) -> web.Response:
        self.token_calls += 1
        form = await request.post()
        if form.get("client_id") != CLIENT_ID or form.get("client_secret") != CLIENT_SECRET:
            return web.Response(status=401, text="invalid client")

        response = web.json_response(
            {
                "access_token": f"token-{self.token_calls}",
                "scope": "api-role:1",
                "token_type": "Bearer",
                "expires_in": self.expires_in,
            }
        )
        for name, value in self.token_cookies.items():
            response.set_cookie(name, value)
        return response

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        responses = self._routes.get((request.method, request.path))
        if not responses:
            return web.Response(status=404, text="Not Found")

        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if callable(response):
            return response(request)
        # A prepared response cannot be sent twice, so serve a copy
        return web.Response(
            status=response.status, body=response.body, headers=dict(response.headers)
        )


def xml_response(body: str, status: int = 200) -> web.Response:
    return web.Response(status=status, body=body.encode("utf-8"), content_type="text/xml")


@pytest.fixture
def fake_jamf():
    return FakeJamf()


@pytest.fixture
async def jamf_server(fake_jamf):
    server = TestServer(fake_jamf.app)
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
async def client(jamf_server):
    """Client against the fake server with zero-length reconciliation delays."""
    client = JamfProClient(
        str(jamf_server.make_url("/")),
        CLIENT_ID,
        CLIENT_SECRET,
        reconcile_config=ReconcileConfig(base_delay=0.0),
    )
    yield client
    await client.close()
