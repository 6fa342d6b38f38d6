"""Decoding of ESLint JSON output into problems."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any

from eslint_actions.eslint.types import EslintMessage, Fix, Problem, Suggestion
from eslint_actions.logging import get_logger

__all__ = [
    "NO_CONFIG_MARKER",
    "parse_eslint_output",
    "parse_problem",
]

NO_CONFIG_MARKER = "No ESLint configuration found"


def _int_or_none(value: Any) -> int | None:
    # bool is an int subclass but never a coordinate
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def _parse_fix(raw: Any) -> Fix | None:
    if not isinstance(raw, dict):
        return None
    offsets = raw.get("range")
    text = raw.get("text")
    if not isinstance(offsets, list) or len(offsets) != 2 or not isinstance(text, str):
        return None
    start, end = (_int_or_none(offset) for offset in offsets)
    if start is None or end is None:
        return None
    return Fix(start=start, end=end, text=text)


def _parse_suggestions(raw: Any) -> tuple[Suggestion, ...]:
    if not isinstance(raw, list):
        return ()
    suggestions: list[Suggestion] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        fix = item.get("fix")
        if not isinstance(fix, dict) or not isinstance(fix.get("text"), str):
            continue
        desc = item.get("desc")
        suggestions.append(
            Suggestion(desc=desc if isinstance(desc, str) else "", text=fix["text"])
        )
    return tuple(suggestions)


def parse_problem(message: EslintMessage) -> Problem:
    """
    Convert one raw ESLint message into a Problem.

    Fields with unexpected types are treated as absent.
    """
    rule_id = message.get("ruleId")
    text = message.get("message")
    return Problem(
        rule_id=rule_id if isinstance(rule_id, str) and rule_id else None,
        line=_int_or_none(message.get("line")),
        column=_int_or_none(message.get("column")),
        end_line=_int_or_none(message.get("endLine")),
        end_column=_int_or_none(message.get("endColumn")),
        message=text if isinstance(text, str) else None,
        fix=_parse_fix(message.get("fix")),
        suggestions=_parse_suggestions(message.get("suggestions")),
    )


def parse_eslint_output(
    output: str,
    *,
    warn: Callable[[str], None] | None = None,
    logger: logging.Logger | None = None,
) -> list[Problem]:
    """
    Decode the JSON formatter output of a single-file lint run.

    Decoding problems are reported as warnings and yield no problems;
    this function never raises on bad input.

    Args:
        output: Complete stdout of the linter.
        warn: Optional sink for user-facing warnings.
        logger: Optional logger. Defaults to the eslint output logger.

    Returns:
        Problems of the first file result, in reported order.
    """
    if logger is None:
        logger = get_logger("eslint.output")

    def _warn(msg: str) -> None:
        logger.warning("%s", msg)
        if warn is not None:
            warn(msg)

    try:
        parsed = json.loads(output)
    except ValueError as e:
        if NO_CONFIG_MARKER in output:
            _warn("failed to get ESLint code actions: no ESLint configuration found")
        else:
            _warn(f"failed to parse eslint json output: {e}")
        return []

    if not isinstance(parsed, list) or not parsed or not isinstance(parsed[0], dict):
        logger.debug("ESLint output has no file result")
        return []

    messages = parsed[0].get("messages")
    if not isinstance(messages, list):
        return []

    problems = [parse_problem(message) for message in messages if isinstance(message, dict)]
    logger.debug("Decoded %d ESLint problems", len(problems))
    return problems
