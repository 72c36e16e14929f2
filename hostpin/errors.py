"""Trust verification errors.

KeyMismatchError, UntrustedHostError and TrustStoreUnavailableError each end
a handshake; ParseError is recovered by the store.
"""

from hostpin.utils.fingerprint import fingerprint


class ParseError(ValueError):
    """A known_hosts line could not be decoded."""


class TrustError(Exception):
    """Base class for host trust failures."""

    def __init__(self, host: str, message: str):
        """Initialize trust error.

        Args:
            host: Canonical host identity the failure relates to
            message: Human readable description
        """
        self.host = host
        super().__init__(message)


class KeyMismatchError(TrustError):
    """Host presented a different key than the one pinned for its type."""

    def __init__(
        self,
        host: str,
        key_type: str,
        expected_key: bytes,
        presented_key: bytes,
    ):
        """Initialize key mismatch error.

        Args:
            host: Canonical host identity
            key_type: Key algorithm of both keys
            expected_key: Key bytes recorded in known_hosts
            presented_key: Key bytes offered during the handshake
        """
        self.key_type = key_type
        self.expected_key = expected_key
        self.presented_key = presented_key
        super().__init__(
            host,
            f"HOST KEY FOR {host} HAS CHANGED ({key_type}): "
            f"expected {fingerprint(expected_key)}, "
            f"got {fingerprint(presented_key)}. "
            f"Someone could be eavesdropping on you right now.",
        )


class UntrustedHostError(TrustError):
    """Host key is unknown and was not accepted."""

    def __init__(self, host: str, key_type: str, reason: str = "not trusted"):
        """Initialize untrusted host error.

        Args:
            host: Canonical host identity
            key_type: Key algorithm presented by the host
            reason: Why the key was not accepted
        """
        self.key_type = key_type
        self.reason = reason
        super().__init__(host, f"Host key for {host} ({key_type}) {reason}")


class TrustStoreUnavailableError(TrustError):
    """known_hosts could not be read or written."""

    def __init__(self, host: str, original_error: OSError):
        """Initialize trust store error.

        Args:
            host: Canonical host identity being verified
            original_error: Underlying I/O failure
        """
        self.original_error = original_error
        super().__init__(
            host, f"Trust store unavailable while verifying {host}: {original_error}"
        )
