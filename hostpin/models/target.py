"""SSH connection target model."""

from dataclasses import dataclass


@dataclass
class SSHTarget:
    """Parsed ``user@host[:port]`` target."""

    user: str
    host: str
    port: int = 22
