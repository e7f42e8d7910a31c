"""Exception hierarchy shared by the parser, validator and iteration engine."""

from __future__ import annotations


class RootFindingError(Exception):
    """Base class for every error raised by metcalc."""


class ExpressionParseError(RootFindingError, ValueError):
    """Raised when a user-supplied expression cannot be parsed."""


class EvaluationInvalid(RootFindingError):
    """Raised inside a run when f (or f') cannot be evaluated at a point."""

    def __init__(self, x: float, reason: str, label: str = "f"):
        self.x = x
        self.reason = reason
        self.label = label
        super().__init__(f"{label}(x) could not be evaluated at x = {x:.10g}: {reason}")


class PreconditionViolation(RootFindingError, ValueError):
    """Raised when a method's starting conditions are not met."""


class DivergenceError(RootFindingError):
    """Raised when an iteration step is undefined (zero denominator, complex step)."""
