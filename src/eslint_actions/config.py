"""Settings consumed by the code action interceptor."""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Any, Literal, TypeAlias

from eslint_actions.errors import ConfigurationError

__all__ = [
    "BlockingDispatcher",
    "CallbackDispatcher",
    "DEFAULT_FILETYPES",
    "OffsetEncoding",
    "ResponseHandler",
    "Settings",
    "WarningSink",
]

OffsetEncoding: TypeAlias = Literal["utf-8", "utf-16"]

# handler(error, result)
ResponseHandler: TypeAlias = Callable[[Any, Any], None]
# request(buffer, method, params, handler) -> request id(s)
CallbackDispatcher: TypeAlias = Callable[[Any, str, Any, ResponseHandler], Any]
# request_sync(buffer, method, params, timeout) -> result
BlockingDispatcher: TypeAlias = Callable[[Any, str, Any, float | None], Any]
WarningSink: TypeAlias = Callable[[str], None]

DEFAULT_FILETYPES: frozenset[str] = frozenset(
    {
        "javascript",
        "javascriptreact",
        "javascript.jsx",
        "typescript",
        "typescriptreact",
        "typescript.tsx",
    }
)

_OFFSET_ENCODINGS: tuple[str, ...] = ("utf-8", "utf-16")


@dataclasses.dataclass(frozen=True)
class Settings:
    """Configuration for linter driven code actions.

    Attributes:
        eslint_bin: Path or name of the linter executable.
        eslint_enable_disable_comments: Offer "disable rule" actions.
        request: Dispatcher for the callback calling convention.
        request_sync: Dispatcher for the blocking calling convention.
        handlers: Default response handlers by method, used when a callback
            request is made without an explicit handler.
        filetypes: Buffer filetypes the linter is run for.
        offset_encoding: Unit of the linter's fix offsets.
        warn: Optional sink for user-facing warning messages.
    """

    eslint_bin: str = "eslint"
    eslint_enable_disable_comments: bool = True
    request: CallbackDispatcher | None = None
    request_sync: BlockingDispatcher | None = None
    handlers: Mapping[str, ResponseHandler] = dataclasses.field(default_factory=dict)
    filetypes: frozenset[str] = DEFAULT_FILETYPES
    offset_encoding: OffsetEncoding = "utf-8"
    warn: WarningSink | None = None

    def __post_init__(self) -> None:
        if self.offset_encoding not in _OFFSET_ENCODINGS:
            raise ConfigurationError(
                f"offset_encoding must be one of {', '.join(_OFFSET_ENCODINGS)}, "
                f"got {self.offset_encoding!r}"
            )

    @classmethod
    def from_options(
        cls, options: Mapping[str, Any] | None, base: Settings | None = None
    ) -> Settings:
        """
        Build settings from a plain options mapping.

        Unknown keys are ignored so that clients may share one options
        object between several tools.

        Args:
            options: Mapping with snake_case option names, may be None.
            base: Settings to start from. Defaults to ``Settings()``.

        Returns:
            New Settings instance.
        """
        settings = base if base is not None else cls()
        if not options:
            return settings

        changes: dict[str, Any] = {}
        if "eslint_bin" in options:
            eslint_bin = options["eslint_bin"]
            if not isinstance(eslint_bin, str) or not eslint_bin:
                raise ConfigurationError("eslint_bin must be a non-empty string")
            changes["eslint_bin"] = eslint_bin
        if "eslint_enable_disable_comments" in options:
            enable = options["eslint_enable_disable_comments"]
            if not isinstance(enable, bool):
                raise ConfigurationError("eslint_enable_disable_comments must be a boolean")
            changes["eslint_enable_disable_comments"] = enable
        if "offset_encoding" in options:
            changes["offset_encoding"] = options["offset_encoding"]
        if "filetypes" in options:
            filetypes = options["filetypes"]
            if not isinstance(filetypes, Iterable) or isinstance(filetypes, str):
                raise ConfigurationError("filetypes must be a list of strings")
            filetypes = list(filetypes)
            if not all(isinstance(ft, str) for ft in filetypes):
                raise ConfigurationError("filetypes must be a list of strings")
            changes["filetypes"] = frozenset(filetypes)

        return dataclasses.replace(settings, **changes)
