"""Tests for the known_hosts line codec."""

import base64

import pytest

from hostpin.errors import ParseError
from hostpin.known_hosts.codec import decode_line, encode_entry, hash_host, matches_host
from hostpin.models import HashedHost, TrustEntry

KEY = b"\x00\x00\x00\x0bssh-ed25519\x00\x00\x00\x20" + bytes(range(32))
KEY_B64 = base64.b64encode(KEY).decode()


def test_decode_plaintext_line() -> None:
    """Plaintext lines decode host, type and key bytes."""
    entry = decode_line(f"example.net ssh-ed25519 {KEY_B64}")

    assert entry.host_pattern == "example.net"
    assert entry.key_type == "ssh-ed25519"
    assert entry.key_blob == KEY
    assert not entry.is_hashed


def test_decode_ignores_trailing_comment() -> None:
    """Comment field after the key is ignored."""
    entry = decode_line(f"example.net ssh-ed25519 {KEY_B64} root@laptop")
    assert entry.key_blob == KEY


def test_decode_multi_alias_uses_first_pattern() -> None:
    """Only the first alias of a comma-separated list is matched."""
    entry = decode_line(f"example.net,192.0.2.10 ssh-ed25519 {KEY_B64}")

    assert entry.host_pattern == "example.net"
    assert entry.aliases == ("192.0.2.10",)
    assert matches_host(entry, "example.net")
    assert not matches_host(entry, "192.0.2.10")


def test_decode_hashed_line() -> None:
    """Hashed lines decode salt and digest."""
    hashed = hash_host("example.net", salt=b"s" * 20)
    salt = base64.b64encode(hashed.salt).decode()
    digest = base64.b64encode(hashed.digest).decode()

    entry = decode_line(f"|1|{salt}|{digest} ssh-ed25519 {KEY_B64}")

    assert entry.is_hashed
    assert entry.host_pattern == hashed


@pytest.mark.parametrize(
    "line",
    [
        "example.net ssh-ed25519",
        "example.net",
        "example.net ssh-ed25519 !!!not-base64!!!",
        "|1|c2FsdA==|ZGlnZXN0 ssh-ed25519 " + KEY_B64,
        "|1|onlysalt ssh-ed25519 " + KEY_B64,
        "@revoked example.net ssh-ed25519 " + KEY_B64,
        "@cert-authority *.example.net ssh-ed25519 " + KEY_B64,
    ],
)
def test_decode_rejects_malformed_lines(line: str) -> None:
    """Malformed lines raise ParseError."""
    with pytest.raises(ParseError):
        decode_line(line)


def test_encode_plaintext_entry() -> None:
    """Encoding writes one newline-terminated line."""
    entry = TrustEntry(host_pattern="[example.net]:2222", key_type="ssh-rsa", key_blob=KEY)

    assert encode_entry(entry) == f"[example.net]:2222 ssh-rsa {KEY_B64}\n"


def test_encode_drops_aliases() -> None:
    """Encoded lines carry exactly one host pattern."""
    entry = decode_line(f"example.net,192.0.2.10 ssh-ed25519 {KEY_B64}")

    assert encode_entry(entry) == f"example.net ssh-ed25519 {KEY_B64}\n"


def test_encode_hashed_entry_decodes_back() -> None:
    """Hashed entries are written in |1|salt|digest form."""
    entry = TrustEntry(
        host_pattern=hash_host("example.net"), key_type="ssh-ed25519", key_blob=KEY
    )
    line = encode_entry(entry)

    assert line.startswith("|1|")
    assert decode_line(line) == entry


def test_hash_host_uses_fresh_salt() -> None:
    """Each hash gets its own 20-byte salt."""
    first = hash_host("example.net")
    second = hash_host("example.net")

    assert len(first.salt) == 20
    assert first.salt != second.salt
    assert first.digest != second.digest


def test_plaintext_match_is_case_insensitive() -> None:
    """Plaintext host patterns match regardless of case."""
    entry = TrustEntry(host_pattern="Example.NET", key_type="ssh-ed25519", key_blob=KEY)

    assert matches_host(entry, "example.net")
    assert not matches_host(entry, "example.org")
    assert not matches_host(entry, "[example.net]:2222")


def test_hashed_match_is_salt_specific() -> None:
    """Hashed pattern only matches the host it was computed for."""
    salt = b"\x01" * 20
    entry = TrustEntry(
        host_pattern=hash_host("example.net", salt), key_type="ssh-ed25519", key_blob=KEY
    )

    assert matches_host(entry, "example.net")
    assert not matches_host(entry, "example.org")
    assert not matches_host(entry, "[example.net]:2222")


def test_hashed_match_fails_with_other_salt() -> None:
    """Digest computed with a different salt does not match."""
    digest = hash_host("example.net", b"\x01" * 20).digest
    entry = TrustEntry(
        host_pattern=HashedHost(salt=b"\x02" * 20, digest=digest),
        key_type="ssh-ed25519",
        key_blob=KEY,
    )

    assert not matches_host(entry, "example.net")


def test_hashed_match_ignores_case() -> None:
    """Hosts are lowercased before hashing, matching plaintext behavior."""
    entry = TrustEntry(
        host_pattern=hash_host("Example.NET", b"\x03" * 20),
        key_type="ssh-ed25519",
        key_blob=KEY,
    )

    assert matches_host(entry, "example.net")
    assert matches_host(entry, "EXAMPLE.net")
