"""ESLint process driver and output decoding."""

from eslint_actions.eslint.output import parse_eslint_output
from eslint_actions.eslint.process import run_linter
from eslint_actions.eslint.types import Fix, Problem, Suggestion

__all__ = [
    "Fix",
    "Problem",
    "Suggestion",
    "parse_eslint_output",
    "run_linter",
]
