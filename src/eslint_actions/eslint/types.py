"""Types for ESLint's JSON formatter output."""

from __future__ import annotations

from typing import NamedTuple, TypedDict


class EslintFix(TypedDict):
    range: list[int]
    text: str


class EslintSuggestionFix(TypedDict, total=False):
    range: list[int]
    text: str


class EslintSuggestion(TypedDict, total=False):
    desc: str
    messageId: str
    fix: EslintSuggestionFix


class EslintMessage(TypedDict, total=False):
    ruleId: str | None
    severity: int
    message: str
    line: int
    column: int
    endLine: int
    endColumn: int
    fix: EslintFix
    suggestions: list[EslintSuggestion]


class EslintFileResult(TypedDict, total=False):
    filePath: str
    messages: list[EslintMessage]
    errorCount: int
    warningCount: int
    source: str


class Fix(NamedTuple):
    """An automatic replacement proposed by the linter."""

    start: int  # Absolute offset into the linted text
    end: int  # Absolute offset into the linted text (exclusive)
    text: str


class Suggestion(NamedTuple):
    """An alternative fix offered for manual application."""

    desc: str
    text: str


class Problem(NamedTuple):
    """A single problem reported by the linter.

    Line and column fields are 1-based, as emitted by the linter.
    """

    rule_id: str | None  # None for parse errors
    line: int | None
    column: int | None
    end_line: int | None = None
    end_column: int | None = None
    message: str | None = None
    fix: Fix | None = None
    suggestions: tuple[Suggestion, ...] = ()
