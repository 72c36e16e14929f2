"""known_hosts line codec.

Line formats:
    <host>[,<alias>...] <key-type> <base64-key> [comment]
    |1|<base64-salt>|<base64-digest> <key-type> <base64-key> [comment]

No I/O happens here.
"""

import base64
import binascii
import hashlib
import hmac
import secrets

from hostpin.errors import ParseError
from hostpin.models import HashedHost, TrustEntry

HASH_MAGIC = "|1|"
SHA1_SIZE = 20


def hash_host(host: str, salt: bytes | None = None) -> HashedHost:
    """Hash a canonical host with HMAC-SHA1, using a fresh salt by default.

    The host is lowercased first, as OpenSSH does, so hashed entries match
    case-insensitively like plaintext ones.
    """
    if salt is None:
        salt = secrets.token_bytes(SHA1_SIZE)
    digest = hmac.new(salt, host.lower().encode("utf-8"), hashlib.sha1).digest()
    return HashedHost(salt=salt, digest=digest)


def _b64decode(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ParseError(f"Invalid base64 {what}: {e}") from e


def _decode_hashed(pattern: str) -> HashedHost:
    parts = pattern.split("|")
    # ['', '1', salt, digest]
    if len(parts) != 4:
        raise ParseError(f"Malformed hashed host pattern: {pattern}")

    salt = _b64decode(parts[2], "salt")
    digest = _b64decode(parts[3], "digest")
    if len(salt) != SHA1_SIZE or len(digest) != SHA1_SIZE:
        raise ParseError(
            f"Hashed host salt and digest must be {SHA1_SIZE} bytes, "
            f"got {len(salt)} and {len(digest)}"
        )
    return HashedHost(salt=salt, digest=digest)


def decode_line(line: str) -> TrustEntry:
    """Decode one known_hosts line.

    Returns:
        TrustEntry for the line

    Raises:
        ParseError: If the line is not a usable host key entry
    """
    fields = line.split()
    if len(fields) < 3:
        raise ParseError(f"Expected at least 3 fields, got {len(fields)}")

    patterns, key_type, key_data = fields[0], fields[1], fields[2]
    if patterns.startswith("@"):
        raise ParseError(f"Unsupported marker {patterns}")

    key_blob = _b64decode(key_data, "key")
    if not key_blob:
        raise ParseError("Empty key")

    if patterns.startswith(HASH_MAGIC):
        return TrustEntry(
            host_pattern=_decode_hashed(patterns),
            key_type=key_type,
            key_blob=key_blob,
        )

    hosts = [h for h in patterns.split(",") if h]
    if not hosts:
        raise ParseError("Empty host pattern")
    return TrustEntry(
        host_pattern=hosts[0],
        key_type=key_type,
        key_blob=key_blob,
        aliases=tuple(hosts[1:]),
    )


def encode_entry(entry: TrustEntry) -> str:
    """Encode an entry as a single newline-terminated known_hosts line."""
    if isinstance(entry.host_pattern, HashedHost):
        salt = base64.b64encode(entry.host_pattern.salt).decode("ascii")
        digest = base64.b64encode(entry.host_pattern.digest).decode("ascii")
        pattern = f"{HASH_MAGIC}{salt}|{digest}"
    else:
        pattern = entry.host_pattern

    key = base64.b64encode(entry.key_blob).decode("ascii")
    return f"{pattern} {entry.key_type} {key}\n"


def matches_host(entry: TrustEntry, canonical_host: str) -> bool:
    """Check whether an entry's host pattern matches a canonical host.

    Plaintext patterns compare case-insensitively. Hashed patterns are
    recomputed with the entry's salt and compared in constant time.
    """
    pattern = entry.host_pattern
    if isinstance(pattern, HashedHost):
        candidate = hash_host(canonical_host, pattern.salt)
        return hmac.compare_digest(candidate.digest, pattern.digest)
    return pattern.lower() == canonical_host.lower()
