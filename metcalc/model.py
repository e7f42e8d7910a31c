"""
Data model shared by every root-finding method.

A run produces a :class:`RunResult`: a terminal status, the root estimate
and an append-only list of :class:`IterationRecord` rows. Each method has
its own frozen input record so the method is selected by the type of the
inputs rather than by a name lookup.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class Method(str, Enum):
    BISECTION = "bisection"
    SECANT = "secant"
    NEWTON = "newton"
    MULLER = "muller"


class Status(str, Enum):
    CONVERGED = "converged"
    DIVERGED_OR_INVALID = "diverged_or_invalid"
    MAX_ITERATIONS_REACHED = "max_iterations_reached"


class Criterion(str, Enum):
    """Which stopping test fired on convergence."""

    FUNCTION_VALUE = "function_value"
    STEP_SIZE = "step_size"


# --------------------------------------------------------------------------- #
# Per-method initial inputs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BisectionInputs:
    a: float
    b: float

    method = Method.BISECTION

    def points(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class SecantInputs:
    x0: float
    x1: float

    method = Method.SECANT

    def points(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class NewtonInputs:
    x0: float

    method = Method.NEWTON

    def points(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class MullerInputs:
    x0: float
    x1: float
    x2: float

    method = Method.MULLER

    def points(self) -> Dict[str, float]:
        return asdict(self)


# --------------------------------------------------------------------------- #
# Iteration records and results
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class IterationRecord:
    """
    One completed step of a method.

    Attributes
    ----------
    iteration : 1-based step index.
    details : method-specific columns (bracket ends, previous points,
        f(x), f'(x), ...) keyed by their display names.
    estimate : best root estimate after this step.
    f_estimate : f(estimate).
    error : step-size metric used for the convergence test.
    criterion : set only on the step that converged.
    """

    iteration: int
    details: Dict[str, float]
    estimate: float
    f_estimate: float
    error: float
    criterion: Optional[Criterion] = None


@dataclass
class RunResult:
    method: Method
    columns: Tuple[str, ...]
    status: Status = Status.DIVERGED_OR_INVALID
    root: Optional[float] = None
    function_value: Optional[float] = None
    iterations: List[IterationRecord] = field(default_factory=list)
    error_message: Optional[str] = None
    criterion: Optional[Criterion] = None

    @property
    def converged(self) -> bool:
        return self.status is Status.CONVERGED

    def rows(self) -> List[Dict[str, Any]]:
        """One dict per record, keyed by ``columns`` in order."""
        estimate_col, f_col = self.columns[-3], self.columns[-2]
        rows = []
        for record in self.iterations:
            values: Dict[str, Any] = dict(record.details)
            values.update(
                {
                    "iteration": record.iteration,
                    estimate_col: record.estimate,
                    f_col: record.f_estimate,
                    "error": record.error,
                }
            )
            rows.append({col: values.get(col) for col in self.columns})
        return rows

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method.value,
            "status": self.status.value,
            "root": self.root,
            "function_value": self.function_value,
            "criterion": self.criterion.value if self.criterion else None,
            "error_message": self.error_message,
            "columns": list(self.columns),
            "iterations": self.rows(),
        }
