"""Bearer credential and affinity state shared by every call of one client."""

import asyncio
import logging
import threading
from collections.abc import Mapping
from datetime import datetime

from jamfpro.oauth2.models import OAuth2Token
from jamfpro.oauth2.provider import ClientCredentialsProvider

logger = logging.getLogger(__name__)

# Load balancer cookies that pin a client to one backend node
AFFINITY_COOKIE_NAMES = frozenset({"jpro-ingress", "APBALANCEID"})


class Session:
    """
    Holds the current bearer token, its expiry and the affinity cookie.

    Thread-safe. ``ensure_valid`` returns the cached token without any network
    call while it is unexpired; otherwise a single coroutine refreshes it while
    the others wait and reuse the result.

    The affinity cookie is pinned at most once: the first recognized,
    non-empty cookie the identity endpoint sets wins and is attached to every
    later request. Pinning the client to one node avoids reading stale state
    from a replica that has not caught up with our writes yet.
    """

    def __init__(
        self,
        base_url: str,
        provider: ClientCredentialsProvider,
        refresh_buffer_seconds: int = 0,
    ):
        self.base_url = base_url
        self._provider = provider
        self.refresh_buffer_seconds = refresh_buffer_seconds

        self._token: OAuth2Token | None = None
        self._affinity: tuple[str, str] | None = None
        self._lock = threading.Lock()
        self._refresh_lock = asyncio.Lock()

    @property
    def client_id(self) -> str:
        return self._provider.client_id

    @property
    def bearer_token(self) -> str | None:
        with self._lock:
            return self._token.access_token if self._token else None

    @property
    def token_expiry(self) -> datetime | None:
        with self._lock:
            return self._token.expires_at if self._token else None

    @property
    def affinity(self) -> tuple[str, str] | None:
        with self._lock:
            return self._affinity

    def _valid_token(self) -> str | None:
        with self._lock:
            if self._token and not self._token.is_expired(self.refresh_buffer_seconds):
                return self._token.access_token
        return None

    def is_valid(self) -> bool:
        return self._valid_token() is not None

    async def ensure_valid(self) -> str:
        """
        Return a bearer token that is valid right now.

        Returns:
            Access token string

        Raises:
            ApiError: The identity endpoint rejected the request
            CredentialUnavailableError: The identity endpoint returned no token
            aiohttp.ClientError, TimeoutError: Transport failures, unchanged
        """
        token = self._valid_token()
        if token:
            return token

        async with self._refresh_lock:
            # Another coroutine may have refreshed while we waited
            token = self._valid_token()
            if token:
                logger.debug("Token was refreshed by another coroutine")
                return token

            new_token, response = await self._provider.acquire_token(affinity=self.affinity)

            with self._lock:
                self._token = new_token

            self.record_affinity(response.cookies)

            logger.info(
                "Bearer token acquired",
                extra={
                    "base_url": self.base_url,
                    "expires_at": new_token.expires_at.isoformat(),
                    "expires_in": int(new_token.remaining_lifetime.total_seconds()),
                },
            )
            return new_token.access_token

    def record_affinity(self, cookies: Mapping[str, str]) -> bool:
        """
        Pin the first recognized affinity cookie, unless one is already pinned.

        Args:
            cookies: Cookies in the order the response set them

        Returns:
            True if this call pinned a cookie
        """
        for name, value in cookies.items():
            if name not in AFFINITY_COOKIE_NAMES or not value:
                continue
            with self._lock:
                if self._affinity is not None:
                    return False
                self._affinity = (name, value)
            logger.info("Pinned session affinity", extra={"affinity_cookie": name})
            return True
        return False

    def invalidate(self) -> None:
        """Drop the cached token so the next call refreshes it."""
        with self._lock:
            self._token = None


__all__ = ["Session", "AFFINITY_COOKIE_NAMES"]
