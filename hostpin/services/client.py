"""asyncssh integration.

asyncssh performs the key exchange and hands every server host key to
PinningClient.validate_host_public_key, which defers to the
TrustDecisionEngine. Connections are opened with an empty known_hosts list
so asyncssh never accepts a key on its own.
"""

import logging
import socket
from typing import Any

import asyncssh

from hostpin.errors import TrustError
from hostpin.models import SSHTarget
from hostpin.services.engine import TrustDecisionEngine

logger = logging.getLogger(__name__)


class PinningClient(asyncssh.SSHClient):
    """SSH client that verifies host keys with a TrustDecisionEngine."""

    def __init__(
        self,
        engine: TrustDecisionEngine,
        remote_address: Any = None,
    ) -> None:
        """Initialize client.

        Args:
            engine: Engine that decides on host keys
            remote_address: Transport remote address descriptor, for
                connections dialed over an overlay network
        """
        super().__init__()
        self.engine = engine
        self.remote_address = remote_address
        self.trust_error: TrustError | None = None

    def validate_host_public_key(
        self,
        host: str,
        addr: str,
        port: int,
        key: asyncssh.SSHKey,
    ) -> bool:
        """Accept the server key if the engine trusts it."""
        remote = self.remote_address if self.remote_address is not None else (host, port)
        try:
            self.engine.verify(host, remote, key.get_algorithm(), key.public_data)
        except TrustError as e:
            self.trust_error = e
            return False
        return True


async def connect(
    target: SSHTarget,
    engine: TrustDecisionEngine,
    remote_address: Any = None,
    sock: socket.socket | None = None,
    connect_timeout: int | None = None,
    **kwargs: Any,
) -> asyncssh.SSHClientConnection:
    """Open an SSH connection whose host key is verified by the engine.

    Args:
        target: User, host and port to connect to
        engine: Host key decision engine
        remote_address: Remote address descriptor of a pre-dialed transport
        sock: Pre-dialed connected socket to run SSH over
        connect_timeout: Seconds to wait for the handshake
        **kwargs: Extra asyncssh connection options

    Returns:
        Open asyncssh connection

    Raises:
        TrustError: If the host key was not trusted
        asyncssh.Error: For any other SSH failure
    """
    client = PinningClient(engine, remote_address)
    logger.info(
        "Opening SSH connection to %s@%s:%d", target.user, target.host, target.port
    )

    try:
        conn = await asyncssh.connect(
            target.host,
            port=target.port,
            username=target.user,
            known_hosts=asyncssh.import_known_hosts(""),
            client_factory=lambda: client,
            sock=sock,
            connect_timeout=connect_timeout,
            **kwargs,
        )
    except asyncssh.HostKeyNotVerifiable as e:
        if client.trust_error is not None:
            logger.error(
                "Host key verification failed for %s: %s", target.host, client.trust_error
            )
            raise client.trust_error from e
        raise

    logger.info("Connected to %s", target.host)
    return conn
