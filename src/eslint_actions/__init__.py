"""Code actions synthesized from ESLint diagnostics for language server clients."""

from eslint_actions.buffer import Buffer, DocumentBuffer, TextBuffer
from eslint_actions.config import Settings
from eslint_actions.errors import (
    ConfigurationError,
    EslintActionsError,
    LinterProcessError,
    UnsupportedFiletypeError,
)
from eslint_actions.lsp.intercept import CodeActionInterceptor

__version__ = "0.1.0"

__all__ = [
    "Buffer",
    "CodeActionInterceptor",
    "ConfigurationError",
    "DocumentBuffer",
    "EslintActionsError",
    "LinterProcessError",
    "Settings",
    "TextBuffer",
    "UnsupportedFiletypeError",
    "__version__",
]
