class BreakupModelError(ValueError):
    """
    Base class for every error raised by the breakup model.

    Subclasses ValueError so callers that validate inputs with a plain
    `except ValueError` keep working.
    """


class InvalidConstruction(BreakupModelError):
    """Wrong number or type of satellites for an event, or a malformed satellite."""


class InvalidKindCode(BreakupModelError):
    """Integer code or name that does not map onto a SatKind."""


class InvalidBounds(BreakupModelError):
    """Minimum characteristic length larger than the maximum, or a non-positive bound."""


class NegativeOrNonFiniteCount(BreakupModelError):
    """A fragment count formula returned a negative, NaN or infinite value."""
