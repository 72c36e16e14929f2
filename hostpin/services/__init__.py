"""Services for hostpin."""

from hostpin.services.client import PinningClient, connect
from hostpin.services.engine import Disposition, TrustDecisionEngine, Verdict
from hostpin.services.prompt import TerminalPrompt, TrustPrompt

__all__ = [
    "Disposition",
    "PinningClient",
    "TerminalPrompt",
    "TrustDecisionEngine",
    "TrustPrompt",
    "Verdict",
    "connect",
]
