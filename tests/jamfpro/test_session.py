"""
Tests for Session.

Tests cover:
- Reusing an unexpired token without network calls
- Refreshing an expired token exactly once
- Single-flight refresh under concurrency
- Affinity pinning: first recognized cookie wins, never overwritten
"""

import asyncio
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from jamfpro.errors import ApiError
from jamfpro.oauth2 import OAuth2Token
from jamfpro.session import AFFINITY_COOKIE_NAMES, Session
from jamfpro.transport import Response


def _grant(access_token="token-1", expires_in=1200, cookies=None):
    token = OAuth2Token(
        access_token=access_token,
        token_type="Bearer",
        expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
    )
    return token, Response(status=200, cookies=cookies or {})


@pytest.fixture
def provider():
    provider = MagicMock()
    provider.client_id = "client"
    provider.acquire_token = AsyncMock(return_value=_grant())
    return provider


@pytest.fixture
def session(provider):
    return Session("https://example.jamfcloud.com", provider)


class TestEnsureValid:
    async def test_first_call_acquires_token(self, session, provider):
        token = await session.ensure_valid()

        assert token == "token-1"
        assert session.bearer_token == "token-1"
        assert session.is_valid()
        provider.acquire_token.assert_awaited_once_with(affinity=None)

    async def test_unexpired_token_is_reused_without_calls(self, session, provider):
        await session.ensure_valid()
        for _ in range(5):
            assert await session.ensure_valid() == "token-1"
        assert provider.acquire_token.await_count == 1

    async def test_expired_token_is_refreshed_once(self, session, provider):
        provider.acquire_token.side_effect = [
            _grant("token-1", expires_in=-1),
            _grant("token-2", expires_in=1200),
        ]
        await session.ensure_valid()
        old_expiry = session.token_expiry
        assert not session.is_valid()

        assert await session.ensure_valid() == "token-2"
        assert provider.acquire_token.await_count == 2
        assert session.token_expiry > old_expiry

        assert await session.ensure_valid() == "token-2"
        assert provider.acquire_token.await_count == 2

    async def test_refresh_buffer(self, provider):
        session = Session("https://x", provider, refresh_buffer_seconds=60)
        provider.acquire_token.return_value = _grant(expires_in=30)

        await session.ensure_valid()
        assert not session.is_valid()

    async def test_concurrent_callers_share_one_refresh(self, session, provider):
        release = asyncio.Event()

        async def slow_acquire(affinity=None):
            await release.wait()
            return _grant()

        provider.acquire_token.side_effect = slow_acquire

        tasks = [asyncio.create_task(session.ensure_valid()) for _ in range(10)]
        await asyncio.sleep(0)
        release.set()
        tokens = await asyncio.gather(*tasks)

        assert tokens == ["token-1"] * 10
        assert provider.acquire_token.await_count == 1

    async def test_refresh_failure_propagates_and_retries_later(self, session, provider):
        provider.acquire_token.side_effect = [
            ApiError(401, "invalid client", "POST", "u"),
            _grant("token-2"),
        ]
        with pytest.raises(ApiError):
            await session.ensure_valid()
        assert session.bearer_token is None

        assert await session.ensure_valid() == "token-2"

    async def test_invalidate_forces_refresh(self, session, provider):
        await session.ensure_valid()
        session.invalidate()
        assert not session.is_valid()

        await session.ensure_valid()
        assert provider.acquire_token.await_count == 2


class TestAffinity:
    def test_recognized_cookie_names(self):
        assert AFFINITY_COOKIE_NAMES == {"jpro-ingress", "APBALANCEID"}

    async def test_pins_cookie_from_token_response(self, session, provider):
        provider.acquire_token.return_value = _grant(
            cookies={"other": "x", "APBALANCEID": "aws.usw2.node1"}
        )
        await session.ensure_valid()
        assert session.affinity == ("APBALANCEID", "aws.usw2.node1")

    async def test_pinned_cookie_travels_with_refresh(self, session, provider):
        provider.acquire_token.side_effect = [
            _grant("token-1", expires_in=-1, cookies={"jpro-ingress": "node-a"}),
            _grant("token-2", cookies={"jpro-ingress": "node-b"}),
        ]
        await session.ensure_valid()
        await session.ensure_valid()

        assert provider.acquire_token.await_args_list[1].kwargs == {
            "affinity": ("jpro-ingress", "node-a")
        }
        assert session.affinity == ("jpro-ingress", "node-a")

    def test_first_recognized_cookie_wins(self, session):
        assert session.record_affinity({"jpro-ingress": "node-a", "APBALANCEID": "node-b"})
        assert session.affinity == ("jpro-ingress", "node-a")

    def test_never_overwritten(self, session):
        session.record_affinity({"APBALANCEID": "node-1"})
        assert not session.record_affinity({"jpro-ingress": "node-2"})
        assert session.affinity == ("APBALANCEID", "node-1")

    @pytest.mark.parametrize(
        "cookies",
        [{}, {"JSESSIONID": "abc"}, {"jpro-ingress": ""}],
    )
    def test_ignores_unrecognized_or_empty(self, session, cookies):
        assert not session.record_affinity(cookies)
        assert session.affinity is None
