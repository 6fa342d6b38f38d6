"""Synthesis of code actions from linter problems."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from lsprotocol import types
from lsprotocol.converters import get_converter

from eslint_actions.buffer import Buffer
from eslint_actions.config import OffsetEncoding, Settings
from eslint_actions.eslint.output import parse_eslint_output
from eslint_actions.eslint.process import LinterRunner, run_linter
from eslint_actions.eslint.types import Problem
from eslint_actions.logging import get_logger
from eslint_actions.lsp.coordinates import (
    fix_range,
    problem_is_fixable,
    suggestion_range,
)

__all__ = [
    "APPLY_WORKSPACE_EDIT_COMMAND",
    "augment_actions",
    "build_actions",
    "create_edit_action",
]

APPLY_WORKSPACE_EDIT_COMMAND = "_typescript.applyWorkspaceEdit"

_converter = get_converter()


def _zero_width(line: int) -> types.Range:
    position = types.Position(line=line, character=0)
    return types.Range(start=position, end=position)


def create_edit_action(
    title: str,
    new_text: str,
    range: types.Range,
    text_document: types.OptionalVersionedTextDocumentIdentifier,
) -> types.Command:
    """
    Build a command that applies a single text replacement.

    The argument is the unstructured (camelCase) workspace edit, ready to be
    sent over the wire or handed back to the client's command executor.
    """
    edit = types.WorkspaceEdit(
        document_changes=[
            types.TextDocumentEdit(
                text_document=text_document,
                edits=[types.TextEdit(range=range, new_text=new_text)],
            )
        ]
    )
    return types.Command(
        title=title,
        command=APPLY_WORKSPACE_EDIT_COMMAND,
        arguments=[_converter.unstructure(edit, types.WorkspaceEdit)],
    )


def _disable_actions(
    rule_id: str,
    current_line: int,
    text_document: types.OptionalVersionedTextDocumentIdentifier,
) -> list[types.Command]:
    return [
        create_edit_action(
            f"Disable ESLint rule {rule_id} for this line",
            f"// eslint-disable-next-line {rule_id}\n",
            _zero_width(current_line),
            text_document,
        ),
        create_edit_action(
            f"Disable ESLint rule {rule_id} for the entire file",
            f"/* eslint-disable {rule_id} */\n",
            _zero_width(0),
            text_document,
        ),
    ]


def build_actions(
    problems: Iterable[Problem],
    *,
    current_line: int,
    text_document: types.OptionalVersionedTextDocumentIdentifier,
    lines: list[str],
    enable_disable_comments: bool,
    offset_encoding: OffsetEncoding = "utf-8",
    logger: logging.Logger | None = None,
) -> list[types.Command]:
    """
    Build code actions for the problems that apply to the cursor line.

    For each applicable problem, in order: one action per suggestion, then
    the fix, then the disable-comment pair. Each rule gets at most one
    disable pair per call.

    Args:
        problems: Problems in the order the linter reported them.
        current_line: 0-based cursor line.
        text_document: Identity of the document the edits apply to.
        lines: Buffer lines including their terminators.
        enable_disable_comments: Offer "disable rule" actions.
        offset_encoding: Unit of the fix offsets.
        logger: Optional logger. Defaults to the actions logger.

    Returns:
        New list of commands.
    """
    if logger is None:
        logger = get_logger("lsp.actions")

    actions: list[types.Command] = []
    rules: set[str] = set()

    for problem in problems:
        if not problem_is_fixable(problem, current_line):
            continue

        for suggestion in problem.suggestions:
            actions.append(
                create_edit_action(
                    suggestion.desc,
                    suggestion.text,
                    suggestion_range(problem),
                    text_document,
                )
            )

        if problem.fix is not None:
            edit_range = fix_range(problem, lines, encoding=offset_encoding)
            if edit_range is None:
                logger.warning(
                    "Skipping fix for %s: offsets %d-%d are not on line %d",
                    problem.rule_id,
                    problem.fix.start,
                    problem.fix.end,
                    problem.line,
                )
            else:
                actions.append(
                    create_edit_action(
                        f"Apply suggested fix for ESLint rule {problem.rule_id}",
                        problem.fix.text,
                        edit_range,
                        text_document,
                    )
                )

        if problem.rule_id and enable_disable_comments and problem.rule_id not in rules:
            rules.add(problem.rule_id)
            actions.extend(_disable_actions(problem.rule_id, current_line, text_document))

    return actions


async def augment_actions(
    buffer: Buffer,
    actions: Sequence[Any] | None,
    settings: Settings,
    *,
    linter: LinterRunner = run_linter,
    warn: Callable[[str], None] | None = None,
    logger: logging.Logger | None = None,
) -> list[Any]:
    """
    Lint the buffer and append the synthesized actions to ``actions``.

    Linter output that cannot be decoded only produces a warning; the
    original actions are still returned.

    Args:
        buffer: Buffer to lint.
        actions: Actions already produced for the request, may be None.
        settings: Linter settings.
        linter: Coroutine function running the linter.
        warn: Optional sink for user-facing warnings.
        logger: Optional logger. Defaults to the actions logger.

    Returns:
        New list: the original actions followed by the synthesized ones.

    Raises:
        LinterProcessError: If the linter process fails.
    """
    if logger is None:
        logger = get_logger("lsp.actions")

    current_line = buffer.current_line
    text_document = buffer.text_document_identifier()
    lines = buffer.lines

    output = await linter(settings.eslint_bin, buffer.source, buffer.filename)
    problems = parse_eslint_output(output, warn=warn)

    synthesized = build_actions(
        problems,
        current_line=current_line,
        text_document=text_document,
        lines=lines,
        enable_disable_comments=settings.eslint_enable_disable_comments,
        offset_encoding=settings.offset_encoding,
        logger=logger,
    )
    logger.debug(
        "Synthesized %d actions for %s line %d",
        len(synthesized),
        text_document.uri,
        current_line,
    )
    return [*(actions or []), *synthesized]
