"""Canonical host identities for known_hosts lookups.

Overlay transports report the remote address as a descriptor string that
embeds connection-scoped fields, e.g.::

    ziti-edge-router connId=7, logical=ziti-sdk[router=tls:er.example.net:3022]

Only the trailing ``host:port`` is stable across connections, so that is
what identifies the peer.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SSH_PORT = 22


def format_host(host: str, port: int, default_port: int = DEFAULT_SSH_PORT) -> str:
    """Render ``host`` or ``[host]:port`` for a non-default port."""
    if port == default_port:
        return host
    return f"[{host}]:{port}"


def _split_descriptor(remote_address: Any) -> tuple[str, int] | None:
    if isinstance(remote_address, (tuple, list)) and len(remote_address) >= 2:
        host, port = remote_address[0], remote_address[1]
        if not host:
            return None
        try:
            return str(host), int(port)
        except (TypeError, ValueError):
            return None

    segments = str(remote_address).split(":")
    if len(segments) < 2:
        return None

    host = segments[-2].strip().strip("[]")
    port_text = segments[-1].strip().rstrip("]").strip()
    if not host or not port_text.isdigit():
        return None
    return host, int(port_text)


def canonicalize(
    hostname_hint: str,
    remote_address: Any = None,
    default_port: int = DEFAULT_SSH_PORT,
) -> str:
    """Derive the canonical host identity for a handshake.

    Args:
        hostname_hint: Host name the caller asked to connect to
        remote_address: Transport remote address, a ``(host, port)`` tuple or
            any object whose string form ends in ``host:port``
        default_port: Port that is omitted from the identity

    Returns:
        ``host`` or ``[host]:port``; the hint verbatim if the descriptor is
        missing or cannot be parsed
    """
    if remote_address is None:
        return hostname_hint

    parsed = _split_descriptor(remote_address)
    if parsed is None:
        logger.debug(
            "Cannot parse remote address %r, using hostname %s",
            remote_address,
            hostname_hint,
        )
        return hostname_hint

    host, port = parsed
    return format_host(host.lower(), port, default_port)
