"""Jamf Pro API client."""

import logging
from typing import Any

import aiohttp

from jamfpro.config import ClientConfig
from jamfpro.errors.exceptions import ConfigurationError
from jamfpro.oauth2.provider import ClientCredentialsProvider
from jamfpro.resilience.reconcile import ReconcileConfig
from jamfpro.resources.api_roles import ApiRolesService
from jamfpro.resources.buildings import BuildingsService
from jamfpro.resources.categories import CategoriesService
from jamfpro.resources.computer_groups import ComputerGroupsService
from jamfpro.resources.computers import ComputersService
from jamfpro.resources.departments import DepartmentsService
from jamfpro.resources.user_accounts import UserAccountsService
from jamfpro.session import Session
from jamfpro.transport.dispatcher import Dispatcher, Response
from jamfpro.transport.encoder import RequestDescriptor, RequestEncoder
from jamfpro.types import ContentType

logger = logging.getLogger(__name__)


class JamfProClient:
    """
    Async client for one Jamf Pro server.

    Usage:
        async with JamfProClient(url, client_id, client_secret) as client:
            group = await client.computer_groups.get_by_name("Lab Macs")

    Entering the context opens the HTTP session and obtains the first bearer
    token, so bad credentials fail there rather than on the first call.
    """

    def __init__(
        self,
        base_url: str,
        client_id: str,
        client_secret: str,
        *,
        timeout_seconds: float = 60,
        token_refresh_buffer_seconds: int = 0,
        reconcile_config: ReconcileConfig | None = None,
        extra_headers: dict[str, str] | None = None,
        http_session: aiohttp.ClientSession | None = None,
    ):
        base_url = base_url.rstrip("/") if base_url else ""
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"JamfProClient base_url must start with http:// or https://, got: {base_url!r}"
            )

        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.reconcile_config = reconcile_config or ReconcileConfig()

        self.encoder = RequestEncoder(base_url, extra_headers=extra_headers)
        self.dispatcher = Dispatcher(timeout_seconds=timeout_seconds, session=http_session)
        self.session = Session(
            base_url,
            ClientCredentialsProvider(client_id, client_secret, self.encoder, self.dispatcher),
            refresh_buffer_seconds=token_refresh_buffer_seconds,
        )

        self.buildings = BuildingsService(self)
        self.categories = CategoriesService(self)
        self.departments = DepartmentsService(self)
        self.api_roles = ApiRolesService(self)
        self.computers = ComputersService(self)
        self.computer_groups = ComputerGroupsService(self)
        self.user_accounts = UserAccountsService(self)

        logger.info(
            "JamfProClient initialized",
            extra={"base_url": self.base_url, "timeout_seconds": timeout_seconds},
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        http_session: aiohttp.ClientSession | None = None,
    ) -> "JamfProClient":
        config.validate()
        return cls(
            config.base_url,
            config.client_id,
            config.client_secret,
            timeout_seconds=config.timeout_seconds,
            token_refresh_buffer_seconds=config.token_refresh_buffer_seconds,
            reconcile_config=config.reconcile,
            extra_headers=config.headers(),
            http_session=http_session,
        )

    async def __aenter__(self) -> "JamfProClient":
        await self.dispatcher.open()
        await self.session.ensure_valid()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self.dispatcher.close()

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        content_type: ContentType | str = ContentType.JSON,
        into: Any = None,
    ) -> Response:
        """
        Authenticate, encode and dispatch one request.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            body: Payload, encoded per ``content_type`` (ignored for safe methods)
            content_type: Declared body encoding
            into: Decode destination (see Dispatcher.send)

        Returns:
            Response with ``data`` populated when ``into`` was given
        """
        token = await self.session.ensure_valid()
        request = self.encoder.build(
            RequestDescriptor(method=method, path=path, body=body, content_type=content_type),
            bearer_token=token,
            affinity=self.session.affinity,
        )
        return await self.dispatcher.send(request, into=into)


__all__ = ["JamfProClient"]
