"""Exception types raised by eslint-actions."""

from __future__ import annotations


class EslintActionsError(Exception):
    """Base class for all eslint-actions errors."""


class ConfigurationError(EslintActionsError):
    """A required setting is missing or invalid.

    Raised when a caller violates the setup contract, e.g. a request
    dispatcher was not supplied.
    """


class UnsupportedFiletypeError(EslintActionsError):
    """The buffer's filetype is not one the linter handles."""

    def __init__(self, filetype: str) -> None:
        super().__init__(f"Current filetype is not supported: {filetype or '<none>'}")
        self.filetype = filetype


class LinterProcessError(EslintActionsError):
    """The linter process could not be spawned or its streams failed."""
