"""LSP side of the ESLint code action adapter."""

from eslint_actions.lsp.actions import (
    APPLY_WORKSPACE_EDIT_COMMAND,
    augment_actions,
    build_actions,
    create_edit_action,
)
from eslint_actions.lsp.coordinates import (
    convert_offset,
    fix_range,
    problem_is_fixable,
    suggestion_range,
)
from eslint_actions.lsp.intercept import CODE_ACTION_METHOD, CodeActionInterceptor

__all__ = [
    "APPLY_WORKSPACE_EDIT_COMMAND",
    "CODE_ACTION_METHOD",
    "CodeActionInterceptor",
    "augment_actions",
    "build_actions",
    "convert_offset",
    "create_edit_action",
    "fix_range",
    "problem_is_fixable",
    "suggestion_range",
]
