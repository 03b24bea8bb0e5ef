"""Barter negotiation services"""

from .state_machine import BarterStateMachine, CompletionResult
from .manager import BarterService

__all__ = ["BarterStateMachine", "CompletionResult", "BarterService"]
