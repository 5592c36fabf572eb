"""
Exceptions raised by the casinojack engine.

Exceptions:
    - `IllegalPhaseError`: An operation was invoked outside the round phase it is valid in.
    - `InvalidWagerError`: A wager is non-positive, outside the table limits, or unaffordable.
    - `DeckExhaustedError`: A card was requested from an empty deck.
    - `ExternalServiceUnavailableError`: The remote advisory service failed or is not configured.
"""


class CasinojackError(Exception):
    """Base class for all casinojack errors."""

    pass


class IllegalPhaseError(CasinojackError):
    """Raised when an action is attempted in a phase that does not allow it."""

    def __init__(self, operation: str, phase, expected=None):
        self.operation = operation
        self.phase = phase
        self.expected = tuple(expected or ())
        message = f"{operation} is not allowed in phase {getattr(phase, 'name', phase)}"
        if self.expected:
            allowed = ", ".join(getattr(p, "name", str(p)) for p in self.expected)
            message += f" (expected {allowed})"
        super().__init__(message)


class InvalidWagerError(CasinojackError):
    """Raised when a wager cannot be accepted."""

    def __init__(self, wager, reason: str = "wager must be positive"):
        self.wager = wager
        self.reason = reason
        super().__init__(f"Invalid wager {wager!r}: {reason}")


class DeckExhaustedError(CasinojackError):
    """Raised when dealing from an empty deck."""

    pass


class ExternalServiceUnavailableError(CasinojackError):
    """Raised when the advisory service cannot produce a usable answer."""

    pass
