"""
Method-agnostic projections of a :class:`~metcalc.model.RunResult`.

Nothing here recomputes numbers; fields are only read and formatted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

import math

from metcalc.model import RunResult, Status

MISSING = "---"


@dataclass(frozen=True)
class Summary:
    status: Status
    converged: bool
    headline: str
    root: Optional[float]
    function_value: Optional[float]
    iterations: int
    message: Optional[str]


def format_value(value, decimals: int = 6) -> str:
    if value is None:
        return MISSING
    if isinstance(value, float) and math.isnan(value):
        return MISSING
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    try:
        return f"{float(value):.{decimals}f}"
    except (TypeError, ValueError):
        return str(value)


def summarize(result: RunResult) -> Summary:
    """
    Build the summary a renderer shows under the iteration table.

    Converged runs report the iteration count, root and f(root); runs that
    hit the iteration limit report the best estimate; failed runs pass the
    stored error message through unchanged.
    """
    count = len(result.iterations)
    if result.status is Status.CONVERGED:
        headline = f"Converged in {count} iterations"
        message = None
    elif result.status is Status.MAX_ITERATIONS_REACHED:
        headline = "Maximum iterations reached"
        message = result.error_message
    else:
        headline = f"Error: {result.error_message}"
        message = result.error_message

    return Summary(
        status=result.status,
        converged=result.converged,
        headline=headline,
        root=result.root,
        function_value=result.function_value,
        iterations=count,
        message=message,
    )


def iteration_rows(result: RunResult, decimals: int = 6) -> List[Dict[str, str]]:
    """Rows of display strings keyed by ``result.columns``."""
    return [
        {col: format_value(value, decimals) for col, value in row.items()}
        for row in result.rows()
    ]
