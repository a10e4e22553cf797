"""Linear equation parser.

Turns a single equation such as ``2x + y - z = 8`` into a coefficient row
``(2.0, 1.0, -1.0, 8.0)``: one slot per variable of the alphabet, followed
by the right-hand constant.
"""

import math
import re
from typing import Sequence

DEFAULT_VARIABLES = "xyz"

# How constant-only terms on the left side (the ``+5`` in ``2x+5=8``) are
# treated.  "move" subtracts them from the right-hand constant; "ignore"
# drops them, which is what the first release of the solver did.
LEFT_CONSTANT_POLICIES = ("move", "ignore")


class ParseError(ValueError):
    """Base class for equations that cannot be turned into a coefficient row."""


class MalformedEquation(ParseError):
    pass


class InvalidConstant(ParseError):
    pass


class InvalidTerm(ParseError):
    pass


def normalize_variables(variables: Sequence[str]) -> str:
    """Validate a variable alphabet and return it as a lowercase string."""
    letters = "".join(variables).lower()
    if not letters:
        raise ValueError("At least one variable letter is required.")
    if not all(ch.isalpha() and ch.isascii() for ch in letters):
        raise ValueError(f"Variables must be single letters a-z, got '{letters}'.")
    if len(set(letters)) != len(letters):
        raise ValueError(f"Variables must be distinct, got '{letters}'.")
    return letters


def _term_pattern(letters: str) -> re.Pattern:
    # A variable term first, then a bare number.  Alternation order matters:
    # "5x" must be read as one term, not as "5" followed by "x".
    return re.compile(
        rf"(?P<sign>[+-]?)(?P<num>\d*\.?\d*)(?P<var>[{letters}])"
        r"|(?P<const>[+-]?\d+\.?\d*)"
    )


def _parse_constant(rhs: str) -> float:
    if not re.fullmatch(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", rhs):
        raise InvalidConstant(
            f"Invalid constant on right side: '{rhs}'. "
            f"Expected a number, e.g. 8 or -2.5."
        )
    value = float(rhs)
    if not math.isfinite(value):
        raise InvalidConstant(
            f"Constant on right side is too large: '{rhs}'."
        )
    return value


def parse_equation(text: str, variables: Sequence[str] = DEFAULT_VARIABLES,
                   left_constants: str = "move") -> tuple:
    """Parse one linear equation into a coefficient row.

    The input is case-insensitive and whitespace is ignored.  The left side
    is a sum of signed terms (``2x``, ``-y``, ``+0.5z``); the right side
    must be a single number.  Terms naming the same variable are summed.

    Returns a tuple of ``len(variables) + 1`` floats.

    Raises
    ------
    MalformedEquation
        The text does not contain exactly one ``=``.
    InvalidConstant
        The right side is not a real number.
    InvalidTerm
        The left side contains something other than terms, e.g. ``2q``
        when ``q`` is not a variable.
    """
    letters = normalize_variables(variables)
    if left_constants not in LEFT_CONSTANT_POLICIES:
        raise ValueError(
            f"Unknown left_constants policy '{left_constants}'. "
            f"Choose one of: {', '.join(LEFT_CONSTANT_POLICIES)}."
        )

    eq = re.sub(r"\s+", "", text).lower()

    parts = eq.split("=")
    if len(parts) != 2:
        raise MalformedEquation("Equation must contain exactly one '=' sign.")
    lhs, rhs = parts

    constant = _parse_constant(rhs)
    coeffs = [0.0] * len(letters)

    pos = 0
    for match in _term_pattern(letters).finditer(lhs):
        if match.start() != pos:
            break
        pos = match.end()

        if match.group("var") is None:
            if left_constants == "move":
                constant -= float(match.group("const"))
            continue

        coeff = -1.0 if match.group("sign") == "-" else 1.0
        num = match.group("num")
        if num:
            try:
                coeff *= float(num)
            except ValueError:
                # A lone "." carries no magnitude; keep the unit coefficient.
                pass
        coeffs[letters.index(match.group("var"))] += coeff

    if pos != len(lhs):
        raise InvalidTerm(
            f"Could not read term starting at '{lhs[pos:]}'. "
            f"Terms look like 2x, -y or +0.5z with variables "
            f"{', '.join(letters)}."
        )
    if not all(math.isfinite(c) for c in coeffs):
        raise InvalidTerm("A coefficient on the left side is too large.")
    if not math.isfinite(constant):
        raise InvalidConstant("A constant on the left side is too large.")

    return tuple(coeffs) + (constant,)
