"""
Table engine for the casinojack framework.

This package provides the engine that runs blackjack rounds for users and
connects them to the wallet, history and advisory collaborators.
"""

from casinojack.engine.blackjack import BlackjackEngine, RoundSummary

__all__ = ["BlackjackEngine", "RoundSummary"]
