"""Step-by-step solver for systems of linear equations.

Parses each equation into a coefficient row, reduces the augmented matrix
with Gauss-Jordan elimination, verifies the answer by substitution and
returns everything in trail format: ``given``, ``method``, ``steps``,
``final_answer``, ``verification_steps`` and ``summary``.
"""

import logging
import platform
import time
from datetime import datetime

import numpy as np

from rowsolver import settings as settings_store
from rowsolver.elimination import (
    RowCombine,
    RowScale,
    RowSwap,
    eliminate,
    replay_states,
)
from rowsolver.parser import (
    LEFT_CONSTANT_POLICIES,
    MalformedEquation,
    normalize_variables,
    parse_equation,
)
from rowsolver.trace import _fmt_num, check_notation, format_matrix
from rowsolver.verification import verify_solution

logger = logging.getLogger(__name__)


def _explain(step) -> str:
    """One sentence on why a row operation was applied."""
    if isinstance(step, RowSwap):
        return (
            f"Row {step.second + 1} has a zero in the pivot column, so it trades "
            f"places with row {step.first + 1}, the first row below it with a "
            f"non-zero entry there."
        )
    if isinstance(step, RowScale):
        return (
            f"Multiply row {step.row + 1} by the reciprocal of its pivot so "
            f"the pivot becomes 1."
        )
    if isinstance(step, RowCombine):
        return (
            f"Clear row {step.target + 1}'s entry in the pivot column of "
            f"row {step.source + 1}."
        )
    raise TypeError(f"Unknown elimination step: {step!r}")


def _resolve_options(n_eq: int, variables, notation, decimals,
                     left_constants) -> tuple:
    """Fill unset options from the stored settings and validate them."""
    stored = settings_store.get_settings()
    variables = normalize_variables(variables or stored["variables"])
    notation = check_notation(notation or stored["notation"])
    if decimals is None:
        decimals = stored["decimals"]
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}.")
    left_constants = left_constants or stored["left_constants"]
    if left_constants not in LEFT_CONSTANT_POLICIES:
        raise ValueError(
            f"left_constants must be one of: {', '.join(LEFT_CONSTANT_POLICIES)}."
        )

    if len(variables) < n_eq:
        raise ValueError(
            f"A system of {n_eq} equations needs {n_eq} variables, but only "
            f"'{variables}' are configured."
        )
    return variables[:n_eq], notation, decimals, left_constants


def parse_system(equations, variables: str, left_constants: str = "move") -> list:
    """Parse every equation, reporting the first failure with its position."""
    rows = []
    for k, eq_str in enumerate(equations, 1):
        if not eq_str or not eq_str.strip():
            raise MalformedEquation(f"Please enter equation {k}.")
        try:
            rows.append(parse_equation(eq_str, variables, left_constants))
        except ValueError as e:
            raise type(e)(f"Error in equation {k}: {e}") from e
    return rows


def solve_system(equations, variables=None, notation=None, decimals=None,
                 left_constants=None) -> dict:
    """
    Solve a square system of linear equations step by step.

    *equations* is a list of strings such as ``["2x + y - z = 8",
    "x - y = -3", "-x + 2y + 2z = -11"]``.  A system of ``n`` equations
    uses the first ``n`` configured variable letters.  Options left as
    ``None`` come from the stored settings.

    Raises ``ParseError`` (a ``ValueError``) if any equation cannot be
    parsed; a singular system is reported in the result, not raised.
    """
    t_start = time.perf_counter()

    equations = list(equations)
    n_eq = len(equations)
    if n_eq == 0:
        raise ValueError("Enter at least one equation.")
    var_names, notation, decimals, left_constants = _resolve_options(
        n_eq, variables, notation, decimals, left_constants,
    )

    rows = parse_system(equations, var_names, left_constants)
    logger.debug("Parsed %d equations into %s", n_eq, rows)

    steps = []

    # Step: show the system
    sys_lines = "\n".join(
        f"  ({i + 1})  {eq.strip()}" for i, eq in enumerate(equations)
    )
    steps.append({
        "description": "System of equations",
        "expression": sys_lines,
        "explanation": (
            f"We have {n_eq} equation{'s' if n_eq != 1 else ''} "
            f"with {n_eq} unknown{'s' if n_eq != 1 else ''}: "
            f"{', '.join(var_names)}."
        ),
    })

    steps.append({
        "description": "Build the augmented matrix",
        "expression": format_matrix(rows, decimals),
        "explanation": (
            "Each row holds the coefficients of "
            f"{', '.join(var_names)} followed by the constant on the right side."
        ),
    })

    result = eliminate(rows)
    trace_lines = result.trace(notation, decimals)

    # One step per row operation, showing the matrix right after it
    for line, (step, state) in zip(trace_lines, replay_states(rows, result.steps)):
        steps.append({
            "description": line,
            "expression": format_matrix(state, decimals),
            "explanation": _explain(step),
        })

    if result.solved:
        sol_dict = dict(zip(var_names, result.solution))
        lines = [f"{vn} = {_fmt_num(sol_dict[vn], decimals)}" for vn in var_names]
        steps.append({
            "description": "Solution",
            "expression": "\n".join(lines),
            "explanation": (
                "The coefficient block is now the identity matrix, so the last "
                "column holds the value of each variable."
            ),
        })
        final_answer = "\n".join(lines)
        validation_ok, verification_steps = verify_solution(
            rows, var_names, result.solution,
        )
    else:
        sol_dict = None
        steps.append({
            "description": "No unique solution",
            "expression": format_matrix(result.matrix, decimals),
            "explanation": (
                "A diagonal entry of the reduced matrix is zero, meaning the "
                "system is inconsistent or has infinitely many solutions."
            ),
        })
        final_answer = (
            "No unique solution — the system is singular.\n"
            "The equations may be inconsistent or dependent."
        )
        validation_ok, verification_steps = True, []

    for i, s in enumerate(steps, 1):
        s["step_number"] = i
    for i, s in enumerate(verification_steps, 1):
        s["step_number"] = i

    t_end = time.perf_counter()
    runtime_ms = round((t_end - t_start) * 1000, 2)
    logger.debug("Solved %d equations: %s in %.2f ms", n_eq, result.status, runtime_ms)

    return {
        "equation": ", ".join(eq.strip() for eq in equations),
        "given": {
            "problem": "Solve the system of linear equations",
            "inputs": {
                "equations": [eq.strip() for eq in equations],
                "number_of_equations": str(n_eq),
                "variables": ", ".join(var_names),
                "number_of_variables": str(n_eq),
            },
        },
        "method": {
            "name": "Gauss-Jordan Elimination",
            "description": (
                "Reduce the augmented matrix to reduced row-echelon form with "
                "partial pivoting, then read the solution from the last column."
            ),
            "parameters": {
                "equation_type": (
                    f"System of {n_eq} linear equation{'s' if n_eq != 1 else ''}"
                ),
                "variables": ", ".join(var_names),
                "approach": "Pivot → Scale → Eliminate, column by column",
                "notation": notation,
            },
        },
        "coefficients": [list(row) for row in rows],
        "status": result.status,
        "solution": sol_dict,
        "trace": trace_lines,
        "steps": steps,
        "final_answer": final_answer,
        "verification_steps": verification_steps,
        "summary": {
            "runtime_ms": runtime_ms,
            "total_steps": len(steps),
            "row_operations": len(result.steps),
            "verification_steps": len(verification_steps),
            "validation_status": "pass" if validation_ok else "fail",
            "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            "library": f"NumPy {np.__version__}",
            "python": platform.python_version(),
        },
    }


if __name__ == "__main__":
    test_systems = [
        ["2x + y - z = 8", "x - y = -3", "-x + 2y + 2z = -11"],
        ["x + y = 10", "x - y = 2"],
        ["x + y + z = 3", "2x + 2y + 2z = 6", "x = 1"],
    ]
    for system in test_systems:
        print(f"\n{'='*50}")
        print(f"Solving: {', '.join(system)}")
        print('=' * 50)
        result = solve_system(system)
        for step in result["steps"]:
            print(f"  {step['description']}")
            for line in step["expression"].split('\n'):
                print(f"    {line}")
        print(f"\n  => {result['final_answer']}")
