"""Data models for hostpin."""

from hostpin.models.entry import HashedHost, LookupResult, LookupStatus, TrustEntry
from hostpin.models.target import SSHTarget

__all__ = [
    "HashedHost",
    "LookupResult",
    "LookupStatus",
    "SSHTarget",
    "TrustEntry",
]
