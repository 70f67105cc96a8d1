"""Client-credentials provider for the Jamf Pro identity endpoint."""

import json
import logging
import xml.etree.ElementTree as ET

from pydantic import ValidationError

from jamfpro.errors.exceptions import ConfigurationError, CredentialUnavailableError
from jamfpro.oauth2.models import ClientCredentialsGrant, OAuth2Token, TokenResponse
from jamfpro.transport.dispatcher import Dispatcher, Response
from jamfpro.transport.encoder import RequestDescriptor, RequestEncoder
from jamfpro.types import ContentType

logger = logging.getLogger(__name__)

TOKEN_PATH = "api/oauth/token"


class ClientCredentialsProvider:
    """
    Acquires bearer tokens with the client_credentials grant.

    The request goes through the same encoder and dispatcher as every other
    call, so it carries the affinity cookie once one is pinned.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        encoder: RequestEncoder,
        dispatcher: Dispatcher,
    ):
        if not client_id or not client_secret:
            raise ConfigurationError("client_id and client_secret are required")

        self.client_id = client_id
        self._client_secret = client_secret
        self.encoder = encoder
        self.dispatcher = dispatcher

        logger.debug(
            "Initialized client credentials provider",
            extra={"token_url": encoder.url_for(TOKEN_PATH)},
        )

    async def acquire_token(
        self, affinity: tuple[str, str] | None = None
    ) -> tuple[OAuth2Token, Response]:
        """
        Request a new token.

        Args:
            affinity: Affinity cookie to attach, if one is already pinned

        Returns:
            (token, response); the response carries the cookies the identity
            endpoint set

        Raises:
            ApiError: The identity endpoint answered outside 200-299
            CredentialUnavailableError: The body held no usable token
            aiohttp.ClientError, TimeoutError: Transport failures, unchanged
        """
        request = self.encoder.build(
            RequestDescriptor(
                method="POST",
                path=TOKEN_PATH,
                body=ClientCredentialsGrant(
                    client_id=self.client_id,
                    client_secret=self._client_secret,
                ),
                content_type=ContentType.FORM,
            ),
            affinity=affinity,
        )

        try:
            response = await self.dispatcher.send(request, into=TokenResponse)
        except (json.JSONDecodeError, ET.ParseError, ValidationError) as e:
            logger.error(
                "Token response could not be decoded",
                extra={"token_url": request.url, "error_type": type(e).__name__},
            )
            raise CredentialUnavailableError(
                "identity endpoint returned no usable bearer token", cause=e
            ) from e

        token = OAuth2Token.from_response(response.data)
        logger.debug(
            "Acquired bearer token",
            extra={"token_url": request.url, "expires_in": response.data.expires_in},
        )
        return token, response


__all__ = ["ClientCredentialsProvider", "TOKEN_PATH"]
