"""Executes prepared requests and decodes their responses."""

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from jamfpro.errors.exceptions import ApiError, is_success_status
from jamfpro.logging.context import get_log_context
from jamfpro.transport.codecs import decode_body
from jamfpro.transport.encoder import PreparedRequest

logger = logging.getLogger(__name__)

# Bodies this small (or of unknown length) are read off before release so the
# connection can go back to the pool.
MAX_BODY_SLURP_SIZE = 2 << 10

STREAM_CHUNK_SIZE = 64 * 1024


@dataclass
class Response:
    """
    Response envelope for one call.

    ``data`` holds the decoded destination (or the raw sink) when the caller
    asked for one.
    """

    status: int
    method: str = ""
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    data: Any = None

    @property
    def ok(self) -> bool:
        return is_success_status(self.status)

    @property
    def content_type(self) -> str:
        return self.headers.get("Content-Type", "")


def _is_sink(into: Any) -> bool:
    return not isinstance(into, type) and callable(getattr(into, "write", None))


def _context_ids() -> dict[str, str]:
    return {k: v for k, v in get_log_context().items() if v}


async def _drain(raw: aiohttp.ClientResponse) -> None:
    """Read off a small leftover body so the connection can be reused."""
    if raw.content.at_eof():
        return
    length = raw.content_length
    if length is not None and length > MAX_BODY_SLURP_SIZE:
        return
    try:
        await raw.content.read(MAX_BODY_SLURP_SIZE)
    except (aiohttp.ClientError, TimeoutError) as e:
        logger.debug("Could not drain response body: %s", e)


class Dispatcher:
    """
    Sends PreparedRequests over a shared aiohttp session.

    The session's cookie jar is disabled; affinity cookies travel in the
    headers the encoder builds.
    """

    def __init__(
        self,
        timeout_seconds: float = 60,
        session: aiohttp.ClientSession | None = None,
    ):
        self.timeout_seconds = float(timeout_seconds)
        self._session = session
        self._owns_session = session is None
        self._closed = False

    async def __aenter__(self) -> "Dispatcher":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("Dispatcher is closed, cannot create new session")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
            self._owns_session = True
        return self._session

    async def open(self) -> None:
        await self._ensure_session()

    async def close(self) -> None:
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)
        self._session = None

    async def send(self, request: PreparedRequest, into: Any = None) -> Response:
        """
        Execute a request.

        Args:
            request: Encoded request
            into: Destination for the body. A pydantic model or any type
                pydantic can validate decodes the body; an object with
                ``write`` receives the raw bytes; None skips the body.

        Returns:
            Response with ``data`` set to the decoded destination

        Raises:
            ApiError: Status outside 200-299, raised before any decoding
            aiohttp.ClientError, TimeoutError: Transport failures, unchanged
        """
        session = await self._ensure_session()
        ctx = _context_ids()

        logger.debug(
            "API request starting",
            extra={
                **ctx,
                "api_method": request.method,
                "api_url": request.url,
                "content_type": request.content_type.value,
            },
        )

        start_time = time.perf_counter()
        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body,
                headers=request.headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as raw:
                try:
                    return await self._handle_response(raw, request, into, start_time)
                finally:
                    await _drain(raw)
        except (aiohttp.ClientError, TimeoutError) as e:
            logger.warning(
                "API transport error",
                extra={
                    **ctx,
                    "api_method": request.method,
                    "api_url": request.url,
                    "timeout_seconds": self.timeout_seconds,
                    "duration_seconds": round(time.perf_counter() - start_time, 3),
                    "error_type": type(e).__name__,
                    "error_message": str(e)[:200],
                },
            )
            raise

    async def _handle_response(
        self,
        raw: aiohttp.ClientResponse,
        request: PreparedRequest,
        into: Any,
        start_time: float,
    ) -> Response:
        response = Response(
            status=raw.status,
            method=request.method,
            url=request.url,
            headers=raw.headers,
            cookies={name: morsel.value for name, morsel in raw.cookies.items()},
        )

        if not is_success_status(raw.status):
            await self._handle_error_response(raw, response, start_time)

        if into is not None:
            if _is_sink(into):
                async for chunk in raw.content.iter_chunked(STREAM_CHUNK_SIZE):
                    into.write(chunk)
                response.data = into
            else:
                payload = await raw.read()
                response.data = decode_body(payload, response.content_type, into)

        duration = time.perf_counter() - start_time
        log_level = logging.INFO if duration > 2.0 else logging.DEBUG
        log_msg = "Slow API request" if duration > 2.0 else "API request succeeded"
        logger.log(
            log_level,
            log_msg,
            extra={
                **_context_ids(),
                "api_method": request.method,
                "api_url": request.url,
                "http_status": raw.status,
                "duration_seconds": round(duration, 3),
            },
        )
        return response

    async def _handle_error_response(
        self,
        raw: aiohttp.ClientResponse,
        response: Response,
        start_time: float,
    ) -> None:
        """Read the error body verbatim and raise ApiError."""
        try:
            body = (await raw.read()).decode("utf-8", errors="replace")
        except (aiohttp.ClientError, TimeoutError):
            body = ""

        error = ApiError(
            raw.status,
            body,
            method=response.method,
            url=response.url,
            response=response,
        )
        # 404 is the expected answer while a write replicates or a delete lands
        log_level = logging.DEBUG if error.is_not_found else logging.WARNING
        logger.log(
            log_level,
            "API request failed",
            extra={
                **_context_ids(),
                "api_method": response.method,
                "api_url": response.url,
                "http_status": raw.status,
                "error_category": error.category.value,
                "response_body": body[:500] + "..." if len(body) > 500 else body,
                "duration_seconds": round(time.perf_counter() - start_time, 3),
            },
        )
        raise error


__all__ = ["Dispatcher", "Response", "MAX_BODY_SLURP_SIZE"]
