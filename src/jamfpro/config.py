"""Jamf Pro client configuration from YAML and environment.

A config file holds everything under a ``jamfpro:`` section:

    jamfpro:
      url: https://example.jamfcloud.com
      client_id: ${JAMFPRO_CLIENT_ID}
      client_secret: ${JAMFPRO_CLIENT_SECRET}
      timeout_seconds: 60
      reconcile:
        delete_max_attempts: 5

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files. JAMFPRO_URL, JAMFPRO_CLIENT_ID and JAMFPRO_CLIENT_SECRET
override the file.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from jamfpro.errors.exceptions import ConfigurationError
from jamfpro.resilience.reconcile import ReconcileConfig

logger = logging.getLogger(__name__)

ENV_URL = "JAMFPRO_URL"
ENV_CLIENT_ID = "JAMFPRO_CLIENT_ID"
ENV_CLIENT_SECRET = "JAMFPRO_CLIENT_SECRET"
ENV_TIMEOUT = "JAMFPRO_TIMEOUT_SECONDS"

DEFAULT_USER_AGENT = "jamfpro-client"


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


@dataclass
class ClientConfig:
    """Connection, credential and reconciliation settings for one Jamf Pro server."""

    base_url: str = ""
    client_id: str = ""
    client_secret: str = field(default="", repr=False)
    timeout_seconds: float = 60
    token_refresh_buffer_seconds: int = 0
    user_agent: str = DEFAULT_USER_AGENT
    extra_headers: Dict[str, str] = field(default_factory=dict)
    reconcile: ReconcileConfig = field(default_factory=ReconcileConfig)

    def __post_init__(self):
        """Ensure proper types from YAML/env vars."""
        self.timeout_seconds = float(self.timeout_seconds)
        self.token_refresh_buffer_seconds = int(self.token_refresh_buffer_seconds)
        if isinstance(self.reconcile, dict):
            self.reconcile = ReconcileConfig(**self.reconcile)

    def headers(self) -> Dict[str, str]:
        """Headers sent with every request."""
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        headers.update(self.extra_headers)
        return headers

    def validate(self) -> None:
        """Validate configuration for correctness and constraints."""
        if not self.base_url:
            raise ConfigurationError(
                f"base_url is required. Set {ENV_URL} or configure jamfpro.url in config."
            )
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must start with http:// or https://, got: {self.base_url!r}"
            )
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(
                f"client_id and client_secret are required. Set {ENV_CLIENT_ID} and "
                f"{ENV_CLIENT_SECRET} or configure them under jamfpro: in config."
            )
        if self.timeout_seconds <= 0:
            raise ConfigurationError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )
        if self.token_refresh_buffer_seconds < 0:
            raise ConfigurationError(
                "token_refresh_buffer_seconds must not be negative, "
                f"got: {self.token_refresh_buffer_seconds}"
            )


def load_config(
    config_path: Optional[Path] = None,
    env_file: Optional[Path] = None,
) -> ClientConfig:
    """Load client configuration.

    Reads the ``jamfpro:`` section of ``config_path`` (when given), then
    applies environment overrides. ``env_file`` is loaded into the
    environment first with python-dotenv; variables already set win.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    section: Dict[str, Any] = {}
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from file: {config_path}")
        yaml_data = _expand_env_vars(load_yaml(config_path))
        if "jamfpro" not in yaml_data:
            raise ConfigurationError(
                f"Invalid config file: missing 'jamfpro:' section in {config_path}"
            )
        section = yaml_data["jamfpro"] or {}

    try:
        config = ClientConfig(
            base_url=os.getenv(ENV_URL) or section.get("url", ""),
            client_id=os.getenv(ENV_CLIENT_ID) or section.get("client_id", ""),
            client_secret=os.getenv(ENV_CLIENT_SECRET) or section.get("client_secret", ""),
            timeout_seconds=os.getenv(ENV_TIMEOUT) or section.get("timeout_seconds", 60),
            token_refresh_buffer_seconds=section.get("token_refresh_buffer_seconds", 0),
            user_agent=section.get("user_agent", DEFAULT_USER_AGENT),
            extra_headers=section.get("extra_headers") or {},
            reconcile=section.get("reconcile") or {},
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid jamfpro configuration: {e}", cause=e) from e

    config.validate()
    logger.debug(
        "Configuration loaded",
        extra={"base_url": config.base_url, "timeout_seconds": config.timeout_seconds},
    )
    return config


__all__ = ["ClientConfig", "load_config", "load_yaml"]
