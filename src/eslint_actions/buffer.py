"""Buffer protocol and adapters for the host editor's document state.

The interceptor only reads from a buffer: its text, the cursor line, the
filename handed to the linter and the document identity used in edits.
"""

from __future__ import annotations

import dataclasses
import posixpath
import re
from collections.abc import Collection
from typing import Protocol

from lsprotocol import types
from pygls import uris
from pygls.workspace import TextDocument

from eslint_actions.errors import UnsupportedFiletypeError

__all__ = [
    "Buffer",
    "DocumentBuffer",
    "TextBuffer",
    "check_filetype",
    "filetype_from_path",
    "split_lines",
]

# Line terminators as JavaScript defines them
LINE_TERMINATORS = "\r\n\u2028\u2029"
_NOT_TERMINATOR = r"[^\r\n\u2028\u2029]"
_LINE_RE = re.compile(rf"{_NOT_TERMINATOR}*(?:\r\n|[\r\n\u2028\u2029])|{_NOT_TERMINATOR}+")

_EXTENSION_FILETYPES: dict[str, str] = {
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascriptreact",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "typescriptreact",
}


class Buffer(Protocol):
    """Read-only view of an editor buffer."""

    @property
    def filename(self) -> str: ...

    @property
    def filetype(self) -> str: ...

    @property
    def source(self) -> str: ...

    @property
    def lines(self) -> list[str]:
        """Buffer lines as split by ``split_lines``."""
        ...

    @property
    def current_line(self) -> int:
        """0-based line of the cursor."""
        ...

    def text_document_identifier(
        self,
    ) -> types.OptionalVersionedTextDocumentIdentifier: ...


def split_lines(source: str) -> list[str]:
    """
    Split text into lines the way the linter counts them.

    Unlike ``str.splitlines`` only JavaScript line terminators end a line,
    so form feeds and other separators stay inside it. Terminators are kept.
    """
    return _LINE_RE.findall(source)


def filetype_from_path(path: str) -> str:
    """Guess the editor filetype from a file extension ("" if unknown)."""
    _, ext = posixpath.splitext(path.replace("\\", "/"))
    return _EXTENSION_FILETYPES.get(ext.lower(), "")


def check_filetype(buffer: Buffer, filetypes: Collection[str]) -> None:
    """
    Ensure the buffer holds a file the linter can check.

    Raises:
        UnsupportedFiletypeError: If the buffer's filetype is not supported.
    """
    if buffer.filetype not in filetypes:
        raise UnsupportedFiletypeError(buffer.filetype)


@dataclasses.dataclass(frozen=True)
class TextBuffer:
    """Plain in-memory buffer for hosts that do not use pygls documents."""

    source: str
    filename: str
    current_line: int = 0
    filetype: str = ""
    uri: str = ""
    version: int | None = None

    def __post_init__(self) -> None:
        if not self.filetype:
            object.__setattr__(self, "filetype", filetype_from_path(self.filename))
        if not self.uri:
            object.__setattr__(self, "uri", uris.from_fs_path(self.filename) or "")

    @property
    def lines(self) -> list[str]:
        return split_lines(self.source)

    def text_document_identifier(
        self,
    ) -> types.OptionalVersionedTextDocumentIdentifier:
        return types.OptionalVersionedTextDocumentIdentifier(
            uri=self.uri, version=self.version
        )


class DocumentBuffer:
    """Buffer backed by a pygls workspace document and a cursor line."""

    def __init__(self, document: TextDocument, current_line: int) -> None:
        self._document = document
        self._current_line = current_line

    @property
    def filename(self) -> str:
        return self._document.path

    @property
    def filetype(self) -> str:
        language_id = self._document.language_id
        if language_id:
            return language_id
        return filetype_from_path(self._document.path)

    @property
    def source(self) -> str:
        return self._document.source

    @property
    def lines(self) -> list[str]:
        return split_lines(self._document.source)

    @property
    def current_line(self) -> int:
        return self._current_line

    def text_document_identifier(
        self,
    ) -> types.OptionalVersionedTextDocumentIdentifier:
        return types.OptionalVersionedTextDocumentIdentifier(
            uri=self._document.uri, version=self._document.version
        )
