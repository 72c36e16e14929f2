"""SSH target parsing."""

import getpass

from hostpin.models import SSHTarget
from hostpin.utils.address import DEFAULT_SSH_PORT


def parse_target(target: str, default_port: int = DEFAULT_SSH_PORT) -> SSHTarget:
    """Parse a ``[user@]host[:port]`` target.

    Returns:
        SSHTarget, user defaulting to the local login name.

    Raises:
        ValueError: If host is empty or port is not a valid number.
    """
    target = target.strip()

    user, sep, rest = target.rpartition("@")
    if not sep:
        user = getpass.getuser()
    elif not user:
        raise ValueError(f"Invalid target '{target}': empty user")

    host = rest
    port = default_port
    if rest.startswith("["):
        # [host]:port, also used for IPv6 literals
        close = rest.find("]")
        if close == -1:
            raise ValueError(f"Invalid target '{target}': unterminated '['")
        host = rest[1:close]
        tail = rest[close + 1 :]
        if tail:
            if not tail.startswith(":"):
                raise ValueError(f"Invalid target '{target}'")
            port = _parse_port(tail[1:], target)
    elif rest.count(":") == 1:
        host, port_text = rest.split(":", 1)
        port = _parse_port(port_text, target)

    if not host:
        raise ValueError(f"Invalid target '{target}': empty host")

    return SSHTarget(user=user, host=host, port=port)


def _parse_port(value: str, target: str) -> int:
    if not value.isdigit() or not 0 < int(value) < 65536:
        raise ValueError(f"Invalid port in target '{target}': {value!r}")
    return int(value)
