"""File-backed known_hosts trust store.

Persistence rules:
- The file is only ever appended to, one entry per write() call, through an
  O_APPEND descriptor. Existing lines are never rewritten, so malformed
  lines stay on disk untouched and concurrent readers never see a torn file.
- Entries are re-read on every lookup so keys pinned by other processes
  are picked up.
- Two processes racing between lookup and append may both write the same
  entry. The duplicate is harmless: lookups resolve to FOUND either way.
"""

import logging
import os
from pathlib import Path

from hostpin.errors import KeyMismatchError, ParseError
from hostpin.known_hosts.codec import decode_line, encode_entry, hash_host, matches_host
from hostpin.models import LookupResult, LookupStatus, TrustEntry

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


def _decode_text(raw: bytes) -> str:
    try:
        return raw.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise ParseError(f"Invalid UTF-8: {e}") from e


class TrustStore:
    """Append-only known_hosts store."""

    def __init__(self, path: Path | str):
        """Initialize store for a known_hosts path.

        Args:
            path: known_hosts file location (``~`` is expanded)
        """
        self.path = Path(os.path.expanduser(str(path)))
        self._entries: list[TrustEntry] = []

    @classmethod
    def load(cls, path: Path | str) -> "TrustStore":
        """Open a store, creating the file and its directory if missing.

        Raises:
            OSError: If the file cannot be created or read
        """
        store = cls(path)
        store.ensure_exists()
        store.reload()
        return store

    def ensure_exists(self) -> None:
        """Create parent directory and empty file with owner-only modes."""
        if self.path.exists():
            return

        if not self.path.parent.exists():
            self.path.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            logger.info("Created %s", self.path.parent)

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
        os.close(fd)
        logger.info("Created known_hosts file %s", self.path)

    def reload(self) -> list[TrustEntry]:
        """Read every entry from disk, skipping malformed lines.

        Returns:
            Entries in file order
        """
        entries: list[TrustEntry] = []
        with open(self.path, "rb") as f:
            for lineno, raw in enumerate(f, start=1):
                try:
                    line = _decode_text(raw)
                    if not line or line.startswith("#"):
                        continue
                    entries.append(decode_line(line))
                except ParseError as e:
                    logger.warning(
                        "Skipping malformed known_hosts line %s:%d: %s",
                        self.path,
                        lineno,
                        e,
                    )

        self._entries = entries
        logger.debug("Loaded %d entries from %s", len(entries), self.path)
        return entries

    def _ends_with_newline(self) -> bool:
        """Whether the file is empty or its last line is terminated."""
        with open(self.path, "rb") as f:
            f.seek(0, os.SEEK_END)
            if f.tell() == 0:
                return True
            f.seek(-1, os.SEEK_END)
            return f.read(1) == b"\n"

    @property
    def entries(self) -> list[TrustEntry]:
        """Entries as of the last reload."""
        return list(self._entries)

    def entries_for(self, canonical_host: str) -> list[TrustEntry]:
        """Get entries whose host pattern matches a canonical host."""
        return [e for e in self.reload() if matches_host(e, canonical_host)]

    def lookup(
        self,
        canonical_host: str,
        key_type: str,
        key_blob: bytes | None = None,
    ) -> LookupResult:
        """Look up a host key.

        Args:
            canonical_host: Canonical host identity
            key_type: Key algorithm to look for
            key_blob: Presented key bytes to compare against

        Returns:
            FOUND if the exact key is pinned, FOUND_DIFFERENT_KEY carrying the
            pinned key if only other keys of this type are, NOT_FOUND otherwise
        """
        different: bytes | None = None
        for entry in self.entries_for(canonical_host):
            if entry.key_type != key_type:
                continue
            if key_blob is not None and entry.key_blob == key_blob:
                return LookupResult(LookupStatus.FOUND, entry.key_blob)
            if different is None:
                different = entry.key_blob

        if different is None:
            return LookupResult(LookupStatus.NOT_FOUND)
        if key_blob is None:
            # No key to compare; report what is pinned for this type
            return LookupResult(LookupStatus.FOUND, different)
        return LookupResult(LookupStatus.FOUND_DIFFERENT_KEY, different)

    def append(
        self,
        canonical_host: str,
        key_type: str,
        key_blob: bytes,
        hash_host_name: bool = False,
    ) -> bool:
        """Pin a key for a host.

        Args:
            canonical_host: Canonical host identity
            key_type: Key algorithm
            key_blob: Raw key bytes
            hash_host_name: Store a salted hash instead of the plaintext host

        Returns:
            True if a line was written, False if the key was already pinned

        Raises:
            KeyMismatchError: If another key of this type was pinned meanwhile
            OSError: If the file cannot be opened or written
        """
        result = self.lookup(canonical_host, key_type, key_blob)
        if result.found:
            logger.debug("%s key for %s already pinned", key_type, canonical_host)
            return False
        if result.mismatch:
            raise KeyMismatchError(
                canonical_host, key_type, result.key_blob or b"", key_blob
            )

        pattern = hash_host(canonical_host) if hash_host_name else canonical_host
        entry = TrustEntry(host_pattern=pattern, key_type=key_type, key_blob=key_blob)
        data = encode_entry(entry).encode("utf-8")

        self.ensure_exists()
        if not self._ends_with_newline():
            data = b"\n" + data
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
        try:
            written = os.write(fd, data)
        finally:
            os.close(fd)
        if written != len(data):
            raise OSError(f"Short write to {self.path}: {written}/{len(data)} bytes")

        self._entries.append(entry)
        logger.info(
            "Pinned %s key for %s in %s (hashed=%s)",
            key_type,
            canonical_host,
            self.path,
            hash_host_name,
        )
        return True
