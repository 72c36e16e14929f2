"""Trust-on-first-use decision engine.

Per handshake:

    START -> LOOKED_UP -> TRUSTED             (key already pinned)
                       -> MISMATCH            (other key pinned for this type)
                       -> DECIDE -> TRUSTED   (auto-trust, or operator said yes)
                                 -> REJECTED  (reject policy, or operator said no)

A mismatch never reaches DECIDE and nothing is ever overwritten. Storage
errors fail closed.
"""

import logging
from enum import Enum
from typing import Any

from hostpin.errors import KeyMismatchError, TrustStoreUnavailableError, UntrustedHostError
from hostpin.known_hosts import TrustStore
from hostpin.services.prompt import TerminalPrompt, TrustPrompt
from hostpin.utils.address import DEFAULT_SSH_PORT, canonicalize
from hostpin.utils.fingerprint import fingerprint

logger = logging.getLogger(__name__)


class Disposition(str, Enum):
    """What to do with a key for a host that has none of its type pinned."""

    REJECT = "reject"
    AUTO_TRUST = "auto"
    INTERACTIVE = "interactive"


class Verdict(str, Enum):
    """Successful verification outcome."""

    KNOWN = "known"
    ADDED = "added"


class TrustDecisionEngine:
    """Verifies presented host keys against a TrustStore."""

    def __init__(
        self,
        store: TrustStore,
        disposition: Disposition = Disposition.INTERACTIVE,
        hash_known_hosts: bool = False,
        prompt: TrustPrompt | None = None,
        default_port: int = DEFAULT_SSH_PORT,
    ) -> None:
        """Initialize engine.

        Args:
            store: Trust store to consult and pin new keys into
            disposition: Handling of keys for unknown hosts
            hash_known_hosts: Write new entries with hashed host names
            prompt: Operator prompt for INTERACTIVE (default: terminal)
            default_port: SSH port omitted from host identities
        """
        self.store = store
        self.disposition = Disposition(disposition)
        self.hash_known_hosts = hash_known_hosts
        self.prompt = prompt if prompt is not None else TerminalPrompt()
        self.default_port = default_port

    def verify(
        self,
        hostname_hint: str,
        remote_address: Any,
        key_type: str,
        key_blob: bytes,
    ) -> Verdict:
        """Decide whether to trust a presented host key.

        Args:
            hostname_hint: Host name the connection was opened for
            remote_address: Transport remote address descriptor
            key_type: Key algorithm advertised in the handshake
            key_blob: Raw public key bytes

        Returns:
            KNOWN if the key was already pinned, ADDED if newly pinned

        Raises:
            KeyMismatchError: Host has a different key of this type pinned
            UntrustedHostError: Key is unknown and was not accepted
            TrustStoreUnavailableError: known_hosts could not be used
        """
        host = canonicalize(hostname_hint, remote_address, self.default_port)

        try:
            result = self.store.lookup(host, key_type, key_blob)
        except OSError as e:
            logger.error("Cannot read %s: %s", self.store.path, e)
            raise TrustStoreUnavailableError(host, e) from e

        if result.found:
            logger.debug("Host key for %s (%s) is trusted", host, key_type)
            return Verdict.KNOWN

        if result.mismatch:
            error = KeyMismatchError(host, key_type, result.key_blob or b"", key_blob)
            logger.error("%s", error)
            raise error

        return self._decide(host, key_type, key_blob)

    def _decide(self, host: str, key_type: str, key_blob: bytes) -> Verdict:
        """Apply the disposition to a key for an unknown host."""
        if self.disposition is Disposition.REJECT:
            logger.warning(
                "Rejecting unknown %s key for %s (policy=reject)", key_type, host
            )
            raise UntrustedHostError(host, key_type, "is not in known_hosts")

        if self.disposition is Disposition.INTERACTIVE:
            if not self.prompt.confirm(host, key_type, fingerprint(key_blob)):
                logger.warning("Operator declined %s key for %s", key_type, host)
                raise UntrustedHostError(host, key_type, "was declined")

        try:
            written = self.store.append(host, key_type, key_blob, self.hash_known_hosts)
        except OSError as e:
            logger.error("Cannot write %s: %s", self.store.path, e)
            raise TrustStoreUnavailableError(host, e) from e

        if not written:
            # Pinned by another writer since our lookup
            logger.debug("%s key for %s was pinned concurrently", key_type, host)
            return Verdict.KNOWN

        logger.info(
            "Permanently added %s (%s %s) to known hosts",
            host,
            key_type,
            fingerprint(key_blob),
        )
        return Verdict.ADDED
