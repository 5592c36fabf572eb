"""
Immutable state management for the casinojack engine.

This package provides immutable round state classes and pure transition
functions for managing a blackjack round in a predictable and testable way.
"""

from casinojack.state.models import (
    HandState,
    PlayerAction,
    RoundPhase,
    RoundState,
)

from casinojack.state.transitions import RoundTransitions, ValidationReport

__all__ = [
    "HandState",
    "PlayerAction",
    "RoundPhase",
    "RoundState",
    "RoundTransitions",
    "ValidationReport",
]
