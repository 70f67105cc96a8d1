"""
Async client for the Jamf Pro API.

Components:
    - JamfProClient: Session, encoder and dispatcher behind one ``send``
    - Resource services: buildings, categories, departments, API roles,
      computers, computer groups and user accounts
    - Reconciliation: waits for writes to show up on the read path
"""

from jamfpro.client import JamfProClient
from jamfpro.config import ClientConfig, load_config
from jamfpro.errors.exceptions import (
    ApiError,
    ArgError,
    CredentialUnavailableError,
    DeletionNotConfirmedError,
    JamfProError,
    MissingIdError,
    ReconciliationTimeoutError,
    ResourceNotFoundError,
)
from jamfpro.resilience.reconcile import ReconcileConfig
from jamfpro.transport.dispatcher import Response
from jamfpro.types import ContentType

__version__ = "0.1.0"

__all__ = [
    "JamfProClient",
    "ClientConfig",
    "load_config",
    "ReconcileConfig",
    "ContentType",
    "Response",
    "JamfProError",
    "MissingIdError",
    "ApiError",
    "ArgError",
    "CredentialUnavailableError",
    "DeletionNotConfirmedError",
    "ReconciliationTimeoutError",
    "ResourceNotFoundError",
]
