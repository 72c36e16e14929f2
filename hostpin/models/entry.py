"""known_hosts entry models."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class HashedHost:
    """Salted HMAC-SHA1 host pattern (``|1|salt|digest``)."""

    salt: bytes
    digest: bytes


@dataclass(frozen=True)
class TrustEntry:
    """One pinned host key.

    ``host_pattern`` is either a plaintext pattern (``host`` or
    ``[host]:port``) or a HashedHost. Extra aliases of a multi-host line
    are kept in ``aliases`` but never matched.
    """

    host_pattern: str | HashedHost
    key_type: str
    key_blob: bytes
    aliases: tuple[str, ...] = field(default=())

    @property
    def is_hashed(self) -> bool:
        """Whether the host pattern is hashed."""
        return isinstance(self.host_pattern, HashedHost)


class LookupStatus(str, Enum):
    """Outcome of looking up a host key."""

    NOT_FOUND = "not_found"
    FOUND = "found"
    FOUND_DIFFERENT_KEY = "found_different_key"


@dataclass(frozen=True)
class LookupResult:
    """Lookup outcome with the stored key that produced it.

    ``key_blob`` is the matching key for FOUND, the previously pinned key
    for FOUND_DIFFERENT_KEY and None for NOT_FOUND.
    """

    status: LookupStatus
    key_blob: bytes | None = None

    @property
    def found(self) -> bool:
        """Whether the exact key is pinned."""
        return self.status is LookupStatus.FOUND

    @property
    def mismatch(self) -> bool:
        """Whether a different key of the same type is pinned."""
        return self.status is LookupStatus.FOUND_DIFFERENT_KEY
