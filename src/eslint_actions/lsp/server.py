"""ESLint code action server using pygls 2.0.

Offers the linter's fixes, suggestions and disable comments as code actions
for JavaScript and TypeScript documents.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from lsprotocol import types
from lsprotocol.converters import get_converter
from pygls.lsp.server import LanguageServer

from eslint_actions import __version__
from eslint_actions.buffer import DocumentBuffer
from eslint_actions.config import Settings
from eslint_actions.eslint.process import LinterRunner, run_linter
from eslint_actions.logging import get_logger
from eslint_actions.lsp.actions import APPLY_WORKSPACE_EDIT_COMMAND
from eslint_actions.lsp.error_handling import wrap_async_handler, wrap_handler
from eslint_actions.lsp.intercept import CodeActionInterceptor

_converter = get_converter()


def _command_arguments(args: tuple[Any, ...]) -> list[Any]:
    """Normalize command arguments to a flat list of edit payloads."""
    if len(args) == 1 and isinstance(args[0], list):
        return list(args[0])
    return list(args)


def create_server(
    *,
    settings: Settings | None = None,
    linter: LinterRunner = run_linter,
    logger: logging.Logger | None = None,
) -> LanguageServer:
    """
    Create and configure the LSP server.

    Args:
        settings: Initial settings. Client ``initializationOptions`` are
            applied on top of them.
        linter: Coroutine function running the linter.
        logger: Optional logger instance. If None, uses default
            eslint_actions.lsp logger.

    Returns:
        Configured LanguageServer instance with code action support.
    """
    if logger is None:
        logger = get_logger("lsp")

    server = LanguageServer("eslint-actions", f"v{__version__}")
    interceptor = CodeActionInterceptor(
        settings if settings is not None else Settings(),
        linter=linter,
    )

    @server.feature(types.INITIALIZE)
    @wrap_handler(
        logger=logger,
        feature_name="initialize",
        default_factory=lambda: None,
    )
    def initialize(params: types.InitializeParams) -> None:
        """Apply client initialization options to the settings."""
        options = params.initialization_options
        if not isinstance(options, Mapping):
            return
        interceptor.settings = Settings.from_options(options, base=interceptor.settings)
        logger.debug("Settings from initializationOptions: %s", interceptor.settings)

    @server.feature(
        types.TEXT_DOCUMENT_CODE_ACTION,
        types.CodeActionOptions(code_action_kinds=[types.CodeActionKind.QuickFix]),
    )
    @wrap_async_handler(
        logger=logger,
        feature_name="textDocument/codeAction",
        default_factory=lambda: None,
    )
    async def code_action(
        params: types.CodeActionParams,
    ) -> list[types.Command | types.CodeAction] | None:
        """
        Handle textDocument/codeAction requests.

        Lints the document and returns the actions for the first line of the
        requested range.
        """
        uri = params.text_document.uri
        document = server.workspace.get_text_document(uri)
        buffer = DocumentBuffer(document, current_line=params.range.start.line)

        if buffer.filetype not in interceptor.settings.filetypes:
            logger.debug("Skipping code actions for %s: filetype %r", uri, buffer.filetype)
            return None

        logger.debug("Code action request for %s at line %d", uri, buffer.current_line)
        actions = await interceptor.augment(buffer, [])

        logger.debug("Returning %d code actions", len(actions))
        return actions or None

    @server.command(APPLY_WORKSPACE_EDIT_COMMAND)
    @wrap_handler(
        logger=logger,
        feature_name=APPLY_WORKSPACE_EDIT_COMMAND,
        default_factory=lambda: None,
    )
    def apply_workspace_edit(*args: Any) -> None:
        """Forward the command's workspace edit to the client."""
        for argument in _command_arguments(args):
            edit = _converter.structure(argument, types.WorkspaceEdit)
            server.workspace_apply_edit(types.ApplyWorkspaceEditParams(edit=edit))

    return server
