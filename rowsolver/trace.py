"""Text rendering for elimination traces and matrices."""

import math

NOTATIONS = ("words", "compact")
DEFAULT_DECIMALS = 2


# ── Numeric formatting helpers ──────────────────────────────────────────

def _fmt_num(value: float, max_decimals: int = 10) -> str:
    """Format a float into a clean decimal string.

    - Removes trailing zeros after the decimal point.
    - Uses up to *max_decimals* digits of precision.
    - Returns integers without a decimal point (e.g. ``7`` not ``7.0``).
    """
    if not math.isfinite(value):
        return str(value)
    if abs(value - round(value)) < 1e-12:
        return str(int(round(value)))
    formatted = f"{value:.{max_decimals}f}".rstrip("0").rstrip(".")
    if formatted in ("-0", ""):
        return "0"
    return formatted


def check_notation(notation: str) -> str:
    if notation not in NOTATIONS:
        raise ValueError(
            f"Unknown notation '{notation}'. Choose one of: {', '.join(NOTATIONS)}."
        )
    return notation


# ── Steps ────────────────────────────────────────────────────────────────

def format_steps(steps, notation: str = "words",
                 decimals: int = DEFAULT_DECIMALS) -> list[str]:
    """Render each step as exactly one line, in the order applied."""
    check_notation(notation)
    return [step.describe(notation, decimals) for step in steps]


# ── Matrices ─────────────────────────────────────────────────────────────

def format_row(row, decimals: int = DEFAULT_DECIMALS) -> str:
    """Render ``[2, 1, -1 | 8]``: coefficients, then the constant after a bar."""
    values = [_fmt_num(float(v), decimals) for v in row]
    return "[" + ", ".join(values[:-1]) + " | " + values[-1] + "]"


def format_matrix(matrix, decimals: int = DEFAULT_DECIMALS) -> str:
    """Format an augmented matrix one row per line."""
    return "\n".join(format_row(row, decimals) for row in matrix)
