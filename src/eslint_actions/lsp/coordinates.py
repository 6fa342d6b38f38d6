"""Conversion of linter locations into LSP ranges.

The linter reports two kinds of locations: 1-based line/column pairs, and
fixes expressed as absolute offsets into the linted text. LSP ranges are
0-based line/character pairs. Characters are counted in UTF-16 code units,
the protocol default and the unit of the linter's own columns.
"""

from __future__ import annotations

from lsprotocol import types

from eslint_actions.buffer import LINE_TERMINATORS
from eslint_actions.config import OffsetEncoding
from eslint_actions.eslint.types import Problem

__all__ = [
    "build_offset_table",
    "convert_offset",
    "fix_range",
    "line_start_offset",
    "problem_is_fixable",
    "suggestion_range",
]


def _unit_length(text: str, encoding: OffsetEncoding) -> int:
    if encoding == "utf-16":
        return len(text.encode("utf-16-le")) // 2
    return len(text.encode("utf-8"))


def _strip_line_ending(line: str) -> str:
    return line.rstrip(LINE_TERMINATORS)


def problem_is_fixable(problem: Problem, current_line: int) -> bool:
    """
    Check whether a problem applies to the cursor line.

    Args:
        problem: Problem with 1-based coordinates.
        current_line: 0-based cursor line.

    Returns:
        True if actions should be offered for the problem on this line.
    """
    if problem.line is None or problem.column is None:
        return False
    if problem.end_line is not None:
        return problem.line - 1 <= current_line <= problem.end_line - 1
    if problem.fix is not None:
        return problem.line - 1 == current_line
    return False


def suggestion_range(problem: Problem) -> types.Range:
    """
    Build the range of a problem directly from its line and column fields.

    A missing end collapses onto the start position.
    """
    if problem.line is None or problem.column is None:
        raise ValueError(f"problem {problem.rule_id} has no start position")
    start = types.Position(line=problem.line - 1, character=problem.column - 1)
    if problem.end_line is None or problem.end_column is None:
        return types.Range(start=start, end=start)
    return types.Range(
        start=start,
        end=types.Position(line=problem.end_line - 1, character=problem.end_column - 1),
    )


def line_start_offset(lines: list[str], line: int, encoding: OffsetEncoding) -> int:
    """
    Absolute offset of the first character of ``line``.

    Args:
        lines: Buffer lines including their line terminators.
        line: 0-based line index.
        encoding: Unit the offset is counted in.
    """
    return sum(_unit_length(text, encoding) for text in lines[:line])


def build_offset_table(
    line_text: str, line_start: int, encoding: OffsetEncoding
) -> dict[int, int]:
    """
    Map absolute offsets to UTF-16 character columns for one line.

    Every character boundary from column 0 up to and including the end of
    the line gets an entry. Offsets that fall inside a multi-unit character
    have none.

    Args:
        line_text: Line content without its terminator.
        line_start: Absolute offset of the line's first character.
        encoding: Unit the offsets are counted in.

    Returns:
        Dict from absolute offset to 0-based character column.
    """
    table: dict[int, int] = {}
    offset = line_start
    column = 0
    for char in line_text:
        table[offset] = column
        offset += _unit_length(char, encoding)
        column += _unit_length(char, "utf-16")
    table[offset] = column
    return table


def convert_offset(
    lines: list[str],
    line: int,
    start_offset: int,
    end_offset: int,
    encoding: OffsetEncoding = "utf-8",
) -> tuple[int | None, int | None]:
    """
    Convert two absolute offsets on ``line`` into character columns.

    Returns:
        (start column, end column); either is None when the offset does not
        land on a character boundary of the line.
    """
    if line < 0 or line >= len(lines):
        return None, None
    table = build_offset_table(
        _strip_line_ending(lines[line]),
        line_start_offset(lines, line, encoding),
        encoding,
    )
    return table.get(start_offset), table.get(end_offset)


def fix_range(
    problem: Problem, lines: list[str], *, encoding: OffsetEncoding = "utf-8"
) -> types.Range | None:
    """
    Build the range of a problem's fix from its offsets.

    The fix is assumed to lie on the problem's start line.

    Returns:
        The range, or None if either offset cannot be placed on the line.
    """
    if problem.line is None or problem.fix is None:
        raise ValueError(f"problem {problem.rule_id} has no line or fix")
    line = problem.line - 1
    start_char, end_char = convert_offset(
        lines, line, problem.fix.start, problem.fix.end, encoding
    )
    if start_char is None or end_char is None:
        return None
    return types.Range(
        start=types.Position(line=line, character=start_char),
        end=types.Position(line=line, character=end_char),
    )
