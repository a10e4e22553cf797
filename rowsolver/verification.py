"""Check a solution by substituting it back into the original equations.

The equations are rebuilt symbolically with SymPy from their coefficient
rows, so the check is independent of the matrix the elimination left
behind.
"""

from sympy import Add, Eq, Float, nsimplify, symbols

from rowsolver.trace import _fmt_num

# Allowed |LHS - RHS| after substitution.  Elimination rounds to five
# decimals along the way, so exact agreement is not expected.
VERIFY_TOLERANCE = 1e-4


def _format_expr(expr) -> str:
    """Format a SymPy expression into a readable string."""
    return str(expr).replace("**", "^").replace("*", "·")


def build_equation(row, var_symbols) -> Eq:
    """Rebuild ``a1*x + a2*y + ... = c`` from a coefficient row."""
    coeffs, constant = row[:-1], row[-1]
    lhs = Add(*[nsimplify(c) * vs for c, vs in zip(coeffs, var_symbols)])
    return Eq(lhs, nsimplify(constant), evaluate=False)


def verify_solution(rows, var_names, solution,
                    tolerance: float = VERIFY_TOLERANCE) -> tuple[bool, list]:
    """Substitute *solution* into every row's equation.

    Returns ``(all_ok, steps)`` where *steps* are trail-format dicts
    (``description``, ``expression``, ``explanation``), one per equation
    plus an opening and a closing step.
    """
    var_symbols = symbols(list(var_names))
    sub_dict = {vs: Float(value) for vs, value in zip(var_symbols, solution)}

    steps = [{
        "description": "Substitute into every equation",
        "expression": ", ".join(
            f"{vn} = {_fmt_num(value, 5)}" for vn, value in zip(var_names, solution)
        ),
        "explanation": "Plug the solution back into each original equation.",
    }]

    all_ok = True
    for i, row in enumerate(rows):
        eq_obj = build_equation(row, var_symbols)
        lhs_val = float(eq_obj.lhs.subs(sub_dict))
        rhs_val = float(eq_obj.rhs)
        ok = abs(lhs_val - rhs_val) < tolerance
        all_ok = all_ok and ok
        steps.append({
            "description": (
                f"Equation ({i + 1}): "
                f"{_format_expr(eq_obj.lhs)} = {_format_expr(eq_obj.rhs)}"
            ),
            "expression": (
                f"LHS = {_fmt_num(lhs_val, 5)},  "
                f"RHS = {_fmt_num(rhs_val, 5)}"
                f"  →  {'✓' if ok else '✗'}"
            ),
            "explanation": (
                f"Both sides ≈ {_fmt_num(lhs_val, 5)}."
                if ok else "Sides differ — the rounded solution is not accurate enough."
            ),
        })

    if all_ok:
        steps.append({
            "description": "All equations verified",
            "expression": "All equations satisfied  ✓",
            "explanation": (
                f"Every equation holds to within {tolerance:g}, the precision "
                f"kept by the elimination."
            ),
        })
    else:
        steps.append({
            "description": "Verification failed",
            "expression": "At least one equation is not satisfied  ✗",
            "explanation": "Check the input equations.",
        })
    return all_ok, steps
