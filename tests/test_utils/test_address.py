"""Tests for canonical host identities."""

import pytest

from hostpin.utils.address import canonicalize, format_host


def test_format_host_default_port() -> None:
    """Default port is omitted."""
    assert format_host("example.net", 22) == "example.net"


def test_format_host_custom_port() -> None:
    """Non-default port uses the bracketed form."""
    assert format_host("example.net", 2222) == "[example.net]:2222"


def test_overlay_descriptors_share_identity() -> None:
    """Descriptors differing only in connection-scoped fields match."""
    first = "ziti-edge-router connId=1, logical=ziti-sdk[router=tls:er.example.net:3022]"
    second = "ziti-edge-router connId=97, logical=ziti-sdk[router=tls:er.example.net:3022]"

    assert canonicalize("zssh-server", first) == canonicalize("zssh-server", second)
    assert canonicalize("zssh-server", first) == "[er.example.net]:3022"


def test_descriptor_on_default_port() -> None:
    """Plain host:port descriptors on port 22 collapse to the host."""
    assert canonicalize("alias", "Example.NET:22") == "example.net"


def test_bracketed_descriptor() -> None:
    """Brackets around the host are stripped."""
    assert canonicalize("alias", "[example.net]:2222") == "[example.net]:2222"


def test_tuple_descriptor() -> None:
    """asyncssh style (host, port) tuples are used directly."""
    assert canonicalize("alias", ("2001:db8::1", 22)) == "2001:db8::1"
    assert canonicalize("alias", ("example.net", 2222)) == "[example.net]:2222"


def test_custom_default_port() -> None:
    """The omitted port is configurable."""
    assert canonicalize("alias", "example.net:2222", default_port=2222) == "example.net"


@pytest.mark.parametrize(
    "descriptor",
    [
        None,
        "",
        "no-colon-here",
        "tls:example.net:notaport",
        ":22",
        ("", 22),
        ("example.net", "ssh"),
    ],
)
def test_falls_back_to_hint(descriptor: object) -> None:
    """Missing or unparsable descriptors use the hostname hint verbatim."""
    assert canonicalize("My-Host", descriptor) == "My-Host"
