"""Interactive host key confirmation."""

import logging
import sys
import threading
from typing import Protocol, TextIO

logger = logging.getLogger(__name__)

# One question on the terminal at a time across all handshakes
_prompt_lock = threading.Lock()


class TrustPrompt(Protocol):
    """Asks the operator whether to trust an unknown host key."""

    def confirm(self, host: str, key_type: str, fingerprint: str) -> bool:
        """Return True if the operator accepts the key."""
        ...


class TerminalPrompt:
    """Yes/no prompt on the operator's terminal.

    Blocks until a line is read; there is no timeout. Anything that does not
    start with ``y`` or ``Y`` (including end of input) means no.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        """Initialize prompt streams.

        Args:
            stdin: Stream to read the answer from (default: sys.stdin)
            stdout: Stream to write the question to (default: sys.stderr)
        """
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stderr

    def confirm(self, host: str, key_type: str, fingerprint: str) -> bool:
        """Ask whether to trust a host key."""
        with _prompt_lock:
            self.stdout.write(
                f"The authenticity of host '{host}' can't be established.\n"
                f"{key_type} key fingerprint is {fingerprint}.\n"
                f"Are you sure you want to continue connecting (yes/no)? "
            )
            self.stdout.flush()
            answer = self.stdin.readline()

        answer = answer.rstrip("\r\n")
        accepted = answer.startswith(("y", "Y"))
        logger.debug("Operator answered %r for %s", answer, host)
        return accepted
