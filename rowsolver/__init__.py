"""RowSolver — Gauss-Jordan elimination with a step-by-step trace."""

from rowsolver.elimination import SolveResult, eliminate
from rowsolver.engine import solve_system
from rowsolver.parser import (
    InvalidConstant,
    InvalidTerm,
    MalformedEquation,
    ParseError,
    parse_equation,
)

__all__ = [
    "InvalidConstant",
    "InvalidTerm",
    "MalformedEquation",
    "ParseError",
    "SolveResult",
    "eliminate",
    "parse_equation",
    "solve_system",
]
