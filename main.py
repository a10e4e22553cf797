"""
RowSolver — Entry point.

Solve a system of linear equations from the command line and print every
row operation, e.g.::

    python main.py "2x + y - z = 8" "x - y = -3" "-x + 2y + 2z = -11"
"""

import argparse
import logging
import sys

from rowsolver import settings as settings_store
from rowsolver.engine import solve_system
from rowsolver.parser import ParseError
from rowsolver.trace import NOTATIONS

EXIT_SOLVED = 0
EXIT_NO_UNIQUE_SOLUTION = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve a square system of linear equations by Gauss-Jordan elimination.",
    )
    parser.add_argument("equations", nargs="*", metavar="EQUATION",
                        help='one equation per argument, e.g. "2x + y - z = 8"')
    parser.add_argument("--notation", choices=NOTATIONS,
                        help="how row operations are written")
    parser.add_argument("--decimals", type=int,
                        help="decimals shown for scalars and the solution")
    parser.add_argument("--variables",
                        help="variable letters, in column order (default: xyz)")
    parser.add_argument("--left-constants", choices=("move", "ignore"),
                        help="move constants on the left side to the right, or drop them")
    parser.add_argument("--verify", action="store_true",
                        help="also print the substitution check")
    parser.add_argument("--save-defaults", action="store_true",
                        help="store the given --notation, --decimals, --variables and "
                             "--left-constants as the new defaults")
    parser.add_argument("--reset-defaults", action="store_true",
                        help="restore the built-in defaults")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="log debug output to stderr")
    return parser


def _friendly_error(exc: Exception) -> str:
    msg = str(exc)
    if isinstance(exc, ParseError):
        return (
            f"{msg}\n\n"
            "Equations look like  2x + y - z = 8  with a single number on the "
            "right side."
        )
    return msg


def print_result(result: dict, verify: bool = False) -> None:
    print("Starting Gaussian Elimination...")
    for line in result["trace"]:
        print(f"  {line}")
    print()
    if result["status"] == "solved":
        print("Solution:")
    for line in result["final_answer"].split("\n"):
        print(f"  {line}")
    if verify and result["verification_steps"]:
        print()
        for step in result["verification_steps"]:
            print(f"  {step['description']}")
            print(f"    {step['expression']}")


def _update_defaults(args) -> dict:
    if args.reset_defaults:
        settings_store.reset_settings()
    stored = settings_store.get_settings()
    if args.save_defaults:
        options = {
            "variables": args.variables,
            "notation": args.notation,
            "decimals": args.decimals,
            "left_constants": args.left_constants,
        }
        stored.update({k: v for k, v in options.items() if v is not None})
        stored = settings_store.save_settings(stored)
    return stored


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.save_defaults or args.reset_defaults:
        try:
            stored = _update_defaults(args)
        except ValueError as e:
            print(_friendly_error(e), file=sys.stderr)
            return EXIT_BAD_INPUT
        print("Defaults: " + ", ".join(f"{k}={v}" for k, v in stored.items()))
        if not args.equations:
            return EXIT_SOLVED
    elif not args.equations:
        parser.error("at least one equation is required")

    try:
        result = solve_system(
            args.equations,
            variables=args.variables,
            notation=args.notation,
            decimals=args.decimals,
            left_constants=args.left_constants,
        )
    except ValueError as e:
        print(_friendly_error(e), file=sys.stderr)
        return EXIT_BAD_INPUT

    print_result(result, verify=args.verify)
    if result["status"] != "solved":
        return EXIT_NO_UNIQUE_SOLUTION
    return EXIT_SOLVED


if __name__ == "__main__":
    sys.exit(main())
