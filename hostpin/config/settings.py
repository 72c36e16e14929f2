"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from hostpin.services.engine import Disposition

logger = logging.getLogger(__name__)


def default_known_hosts() -> Path:
    """Default trust store location."""
    return Path.home() / ".ssh" / "known_hosts"


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Trust store
    known_hosts_path: Path = field(default_factory=default_known_hosts)
    hash_known_hosts: bool = field(default=False)
    policy: Disposition = field(default=Disposition.INTERACTIVE)

    # Connection
    default_port: int = field(default=22)
    connect_timeout: int = field(default=30)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from HOSTPIN_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            known_hosts_path=cls._get_known_hosts(),
            hash_known_hosts=cls._get_bool("HOSTPIN_HASH_KNOWN_HOSTS", False),
            policy=cls._get_policy(),
            default_port=cls._get_int("HOSTPIN_DEFAULT_PORT", 22),
            connect_timeout=cls._get_int("HOSTPIN_CONNECT_TIMEOUT", 30),
            log_level=os.getenv("HOSTPIN_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("HOSTPIN_LOG_COLORS", True),
        )

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_known_hosts() -> Path:
        """Get known_hosts path, expanding ``~``."""
        value = os.getenv("HOSTPIN_KNOWN_HOSTS", "").strip()
        if not value:
            return default_known_hosts()
        return Path(os.path.expanduser(value))

    @staticmethod
    def _get_policy() -> Disposition:
        """Get unknown-host policy with validation.

        Returns:
            Disposition (interactive if unset or invalid)
        """
        value = os.getenv("HOSTPIN_HOST_KEY_POLICY", "").strip().lower()
        if not value:
            return Disposition.INTERACTIVE
        try:
            return Disposition(value)
        except ValueError:
            logger.warning(
                "Invalid HOSTPIN_HOST_KEY_POLICY %r, using interactive", value
            )
            return Disposition.INTERACTIVE
