"""
OAuth2 client-credentials support for the Jamf Pro identity endpoint.

Usage:
    provider = ClientCredentialsProvider(client_id, client_secret, encoder, dispatcher)
    token, response = await provider.acquire_token()

Token caching and refresh-on-demand live in jamfpro.session.Session.
"""

from jamfpro.oauth2.models import ClientCredentialsGrant, OAuth2Token, TokenResponse
from jamfpro.oauth2.provider import TOKEN_PATH, ClientCredentialsProvider

__all__ = [
    "ClientCredentialsGrant",
    "TokenResponse",
    "OAuth2Token",
    "ClientCredentialsProvider",
    "TOKEN_PATH",
]
