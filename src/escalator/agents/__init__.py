"""Investigator (Tier 2) and fixer (Tier 3) agents."""

from .fixer import FixerAgent
from .investigator import InvestigatorAgent
from .session import ClaudeReasoningClient, ReasoningClient, ReasoningSession

__all__ = [
    "ClaudeReasoningClient",
    "FixerAgent",
    "InvestigatorAgent",
    "ReasoningClient",
    "ReasoningSession",
]
