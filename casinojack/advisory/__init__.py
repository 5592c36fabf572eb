"""
Advisory layer: non-binding hit/stand suggestions with a local fallback.
"""

from casinojack.advisory.advisor import (
    Advisor,
    BasicStrategyAdvisor,
    FallbackAdvisor,
    RemoteAdvisor,
    format_round_for_advice,
    parse_advice,
)

__all__ = [
    "Advisor",
    "BasicStrategyAdvisor",
    "FallbackAdvisor",
    "RemoteAdvisor",
    "format_round_for_advice",
    "parse_advice",
]
