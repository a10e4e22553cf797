"""Gauss-Jordan elimination with partial pivoting and a step trace.

The augmented matrix is reduced in place, one pivot row at a time.  Every
row operation that changes the matrix is recorded as an immutable step so
the caller can display or replay the reduction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from rowsolver.trace import DEFAULT_DECIMALS, _fmt_num, format_steps

logger = logging.getLogger(__name__)

# Entries smaller than this (in absolute value) count as zero.
ZERO_TOLERANCE = 1e-10

# Scalars and matrix entries are rounded to this many decimals after every
# pivot row so floating-point drift does not leak into the zero tests.
ROUND_DECIMALS = 5


def is_zero(value: float) -> bool:
    return abs(value) < ZERO_TOLERANCE


def round_half_away(value, decimals: int = ROUND_DECIMALS):
    """Round half away from zero (``np.round`` rounds half to even)."""
    factor = 10.0 ** decimals
    return np.copysign(np.floor(np.abs(value) * factor + 0.5), value) / factor


# ── Steps ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class RowSwap:
    first: int
    second: int
    pivot: int

    def apply(self, data: np.ndarray) -> None:
        data[[self.first, self.second]] = data[[self.second, self.first]]

    def describe(self, notation: str = "words", decimals: int = DEFAULT_DECIMALS) -> str:
        a, b = self.first + 1, self.second + 1
        if notation == "compact":
            return f"L_{a} ↔ L_{b}"
        return f"Swapped row {a} and {b}"


@dataclass(frozen=True)
class RowScale:
    row: int
    scalar: float
    pivot: int

    def apply(self, data: np.ndarray) -> None:
        data[self.row] *= self.scalar

    def describe(self, notation: str = "words", decimals: int = DEFAULT_DECIMALS) -> str:
        r, s = self.row + 1, _fmt_num(self.scalar, decimals)
        if notation == "compact":
            return f"L_{r} → {s}·L_{r}"
        return f"Scaled row {r} by {s}"


@dataclass(frozen=True)
class RowCombine:
    target: int
    source: int
    scalar: float
    pivot: int

    def apply(self, data: np.ndarray) -> None:
        data[self.target] += self.scalar * data[self.source]

    def describe(self, notation: str = "words", decimals: int = DEFAULT_DECIMALS) -> str:
        i, r = self.target + 1, self.source + 1
        s = _fmt_num(self.scalar, decimals)
        if notation == "compact":
            return f"L_{i} + {s}·L_{r} → L_{i}"
        return f"Added {s} times row {r} to row {i}"


EliminationStep = RowSwap | RowScale | RowCombine


# ── Matrix ───────────────────────────────────────────────────────────────

class Matrix:
    """Augmented ``n × (n+1)`` matrix owned by a single solve."""

    def __init__(self, rows):
        data = np.array(rows, dtype=np.float64)
        if data.ndim != 2 or data.shape[0] == 0:
            raise ValueError("Expected a non-empty list of coefficient rows.")
        n, cols = data.shape
        if cols != n + 1:
            raise ValueError(
                f"Expected {n} rows of {n + 1} values (augmented form), "
                f"got rows of {cols}."
            )
        if not np.all(np.isfinite(data)):
            raise ValueError("Coefficient rows must hold finite numbers.")
        self.data = data
        self.rows = n
        self.cols = cols
        self.steps: list[EliminationStep] = []
        # pivot rows completed; the matrix is rounded once after each
        self.pivots = 0

    def _apply(self, step: EliminationStep) -> None:
        step.apply(self.data)
        self.steps.append(step)

    def swap_rows(self, first: int, second: int, pivot: int) -> None:
        self._apply(RowSwap(first, second, pivot))

    def scale_row(self, row: int, scalar: float) -> None:
        self._apply(RowScale(row, scalar, row))

    def add_multiple_of_row(self, target: int, source: int, scalar: float) -> None:
        self._apply(RowCombine(target, source, scalar, source))

    def _find_pivot(self, r: int, lead: int) -> tuple[Optional[int], int]:
        """Return ``(row, lead)`` of the next usable pivot at or below row *r*.

        Moves *lead* right past columns that are zero from *r* down.  Row is
        ``None`` once every column is exhausted.
        """
        while lead < self.cols:
            for i in range(r, self.rows):
                if not is_zero(self.data[i, lead]):
                    return i, lead
            lead += 1
        return None, lead

    def reduce(self) -> list[EliminationStep]:
        """Reduce the matrix to reduced row-echelon form in place.

        Stops early when the pivot columns run out, which means the system
        has no unique solution.  Returns the steps applied so far.
        """
        lead = 0
        for r in range(self.rows):
            if lead >= self.cols:
                break
            pivot_row, lead = self._find_pivot(r, lead)
            if pivot_row is None:
                break

            if pivot_row != r:
                self.swap_rows(pivot_row, r, r)

            if not is_zero(self.data[r, lead] - 1):
                self.scale_row(r, float(round_half_away(1.0 / self.data[r, lead])))

            for i in range(self.rows):
                if i == r:
                    continue
                scalar = -self.data[i, lead]
                if not is_zero(scalar):
                    self.add_multiple_of_row(i, r, float(round_half_away(scalar)))

            self.data = round_half_away(self.data)
            self.pivots += 1
            lead += 1

        return self.steps

    def has_unique_solution(self) -> bool:
        return all(not is_zero(self.data[i, i]) for i in range(self.rows))

    def solution(self) -> Optional[tuple]:
        if not self.has_unique_solution():
            return None
        return tuple(float(v) for v in self.data[:, -1])


# ── Result ───────────────────────────────────────────────────────────────

SOLVED = "solved"
NO_UNIQUE_SOLUTION = "no_unique_solution"


@dataclass(frozen=True)
class SolveResult:
    """Outcome of one elimination.

    ``solution`` is ``None`` when the system has no unique solution; the
    steps applied before that was detected are kept either way.
    """

    steps: tuple
    matrix: np.ndarray = field(repr=False, compare=False)
    solution: Optional[tuple] = None
    pivots: int = 0

    @property
    def status(self) -> str:
        return SOLVED if self.solution is not None else NO_UNIQUE_SOLUTION

    @property
    def solved(self) -> bool:
        return self.solution is not None

    @property
    def lines(self) -> list[str]:
        return self.trace()

    def trace(self, notation: str = "words",
              decimals: int = DEFAULT_DECIMALS) -> list[str]:
        return format_steps(self.steps, notation, decimals)


def eliminate(rows) -> SolveResult:
    """Solve the augmented system given by *rows* with Gauss-Jordan elimination.

    *rows* is a sequence of ``n`` coefficient rows of length ``n + 1`` (or an
    equivalent array).  It is copied; the caller's data is left untouched.
    """
    matrix = Matrix(rows)
    steps = tuple(matrix.reduce())
    solution = matrix.solution()
    matrix.data.setflags(write=False)

    logger.debug("Eliminated %dx%d system in %d steps: %s",
                 matrix.rows, matrix.cols, len(steps),
                 SOLVED if solution is not None else NO_UNIQUE_SOLUTION)
    return SolveResult(steps=steps, matrix=matrix.data, solution=solution,
                       pivots=matrix.pivots)


def _round_up_to(data: np.ndarray, done: int, pivot: int):
    while done < pivot:
        data = round_half_away(data)
        done += 1
    return data, done


def replay_states(rows, steps: Sequence[EliminationStep]):
    """Yield ``(step, matrix)`` after each step of a recorded trace.

    Before a step on pivot row ``p`` the matrix is rounded once for every
    pivot row finished so far, as :func:`eliminate` does.  Pivot rows that
    needed no operation still count.  Yielded matrices are copies.
    """
    data = Matrix(rows).data
    done = 0
    for step in steps:
        data, done = _round_up_to(data, done, step.pivot)
        step.apply(data)
        yield step, data.copy()


def replay(rows, steps: Sequence[EliminationStep],
           pivots: Optional[int] = None) -> np.ndarray:
    """Apply a recorded trace to *rows* and return the resulting matrix.

    *pivots* is the number of pivot rows the reduction finished
    (``SolveResult.pivots``).  When omitted it is inferred: every matrix
    with a non-zero entry finishes at least one pivot row, and rounding an
    already rounded matrix changes nothing.
    """
    data = Matrix(rows).data
    if pivots is None:
        pivots = 0 if np.all(np.abs(data) < ZERO_TOLERANCE) else 1
    done = 0
    for step in steps:
        data, done = _round_up_to(data, done, step.pivot)
        step.apply(data)
    pivots = max(pivots, done + 1) if steps else pivots
    data, done = _round_up_to(data, done, pivots)
    return data
