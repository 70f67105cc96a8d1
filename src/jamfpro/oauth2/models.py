"""OAuth2 data models for the Jamf Pro identity endpoint."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel


class ClientCredentialsGrant(BaseModel):
    """Form body of a client-credentials token request."""

    client_id: str
    client_secret: str
    grant_type: str = "client_credentials"


class TokenResponse(BaseModel):
    """JSON body returned by ``POST /api/oauth/token``."""

    access_token: str
    expires_in: int
    scope: str | None = None
    token_type: str = "Bearer"


@dataclass
class OAuth2Token:
    """
    Bearer token with expiration tracking.

    Attributes:
        access_token: The access token string
        token_type: Token type (typically "Bearer")
        expires_at: UTC timestamp when token expires
        scope: Space-separated scopes granted
    """

    access_token: str
    token_type: str
    expires_at: datetime
    scope: str | None = None

    @classmethod
    def from_response(cls, response: TokenResponse) -> "OAuth2Token":
        """Build a token whose expiry is now + ``expires_in`` seconds."""
        return cls(
            access_token=response.access_token,
            token_type=response.token_type,
            expires_at=datetime.now(UTC) + timedelta(seconds=response.expires_in),
            scope=response.scope,
        )

    def is_expired(self, buffer_seconds: int = 0) -> bool:
        """
        Check if token is expired or close to expiry.

        Args:
            buffer_seconds: Safety buffer before actual expiry

        Returns:
            True unless the expiry is strictly after now + buffer
        """
        return datetime.now(UTC) >= self.expires_at - timedelta(seconds=buffer_seconds)

    @property
    def remaining_lifetime(self) -> timedelta:
        """Get remaining time before token expires."""
        return self.expires_at - datetime.now(UTC)


__all__ = ["ClientCredentialsGrant", "TokenResponse", "OAuth2Token"]
