"""Request interception for code action requests.

Wraps the host's two request dispatchers so that code action responses are
extended with linter-based actions, while every other request passes through
untouched.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from collections.abc import Callable, Coroutine, Sequence
from typing import Any, TypeVar

from lsprotocol import types

from eslint_actions.buffer import Buffer, check_filetype
from eslint_actions.config import ResponseHandler, Settings
from eslint_actions.errors import ConfigurationError
from eslint_actions.eslint.process import LinterRunner, run_linter
from eslint_actions.logging import get_logger
from eslint_actions.lsp.actions import augment_actions

__all__ = [
    "CODE_ACTION_METHOD",
    "DEFAULT_TIMEOUT",
    "REMOVED_MESSAGE",
    "CodeActionInterceptor",
]

T = TypeVar("T")

CODE_ACTION_METHOD = types.TEXT_DOCUMENT_CODE_ACTION
DEFAULT_TIMEOUT = 0.1  # seconds
REMOVED_MESSAGE = "code_action_handler has been removed (see readme)"


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class CodeActionInterceptor:
    """Augments code action responses with linter fixes.

    Args:
        settings: Linter settings and the wrapped dispatchers.
        loop: Event loop the augmentation runs on. When omitted, callback
            requests use the loop running in the calling thread and blocking
            requests run on a private loop.
        linter: Coroutine function running the linter.
        logger: Optional logger. Defaults to the intercept logger.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        linter: LinterRunner = run_linter,
        logger: logging.Logger | None = None,
    ) -> None:
        self.settings = settings
        self._loop = loop
        self._linter = linter
        self._logger = logger if logger is not None else get_logger("lsp.intercept")
        # In-flight augmentations; the loop only keeps weak references
        self._pending: set[asyncio.Future[None] | concurrent.futures.Future[None]] = set()

    def _warn(self, msg: str) -> None:
        self._logger.warning("%s", msg)
        if self.settings.warn is not None:
            self.settings.warn(msg)

    async def augment(self, buffer: Buffer, actions: Sequence[Any] | None) -> list[Any]:
        """Run the linter on ``buffer`` and append its actions to ``actions``."""
        return await augment_actions(
            buffer,
            actions,
            self.settings,
            linter=self._linter,
            warn=self.settings.warn,
            logger=self._logger,
        )

    def request_with_callback(
        self,
        buffer: Buffer,
        method: str,
        params: Any,
        handler: ResponseHandler | None = None,
    ) -> Any:
        """
        Send a request through the callback dispatcher.

        For code action requests the handler is called once, after the linter
        has finished, with the original results followed by the synthesized
        actions.

        Args:
            buffer: Buffer the request is made for.
            method: LSP method name.
            params: Request parameters, forwarded unchanged.
            handler: Response handler called as ``handler(error, result)``.
                Defaults to ``settings.handlers[method]``.

        Returns:
            Whatever the dispatcher returns.

        Raises:
            ConfigurationError: If no callback dispatcher was configured, or no
                handler is available for a code action request.
            UnsupportedFiletypeError: If the buffer cannot be linted.
        """
        request = self.settings.request
        if request is None:
            raise ConfigurationError("request handler not passed into setup function")

        if handler is None:
            handler = self.settings.handlers.get(method)
        if method != CODE_ACTION_METHOD:
            return request(buffer, method, params, handler)  # type: ignore[arg-type]

        if handler is None:
            raise ConfigurationError(f"no response handler for {method}")
        check_filetype(buffer, self.settings.filetypes)
        respond = handler

        def inject_handler(error: Any, result: Any) -> None:
            self._schedule(self._augment_and_respond(buffer, error, result, respond))

        return request(buffer, method, params, inject_handler)

    async def _augment_and_respond(
        self,
        buffer: Buffer,
        error: Any,
        result: Any,
        handler: ResponseHandler,
    ) -> None:
        injected = await self.augment(buffer, result)
        handler(error, injected)

    def _schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        running = _running_loop()
        loop = self._loop if self._loop is not None else running
        if loop is None:
            raise RuntimeError("code action responses must be handled on an event loop")

        future: asyncio.Future[None] | concurrent.futures.Future[None]
        if loop is running:
            future = loop.create_task(coro)
        else:
            future = asyncio.run_coroutine_threadsafe(coro, loop)
        self._pending.add(future)
        future.add_done_callback(self._log_failure)

    def _log_failure(
        self, future: asyncio.Future[None] | concurrent.futures.Future[None]
    ) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self._logger.error("Code action augmentation failed", exc_info=exc)

    def request_blocking(
        self,
        buffer: Buffer,
        method: str,
        params: Any,
        timeout: float | None = None,
    ) -> Any:
        """
        Send a request through the blocking dispatcher.

        For code action requests, waits up to ``timeout`` seconds for the
        linter after the dispatcher returns. If the linter does not finish in
        time it is stopped and the dispatcher's result is returned as is.

        Args:
            buffer: Buffer the request is made for.
            method: LSP method name.
            params: Request parameters, forwarded unchanged.
            timeout: Seconds to wait, forwarded to the dispatcher. Defaults
                to ``DEFAULT_TIMEOUT`` for the linter wait.

        Returns:
            The dispatcher's result, extended with linter actions for code
            action requests.

        Raises:
            ConfigurationError: If no blocking dispatcher was configured.
            UnsupportedFiletypeError: If the buffer cannot be linted.
            LinterProcessError: If the linter process fails.
        """
        request_sync = self.settings.request_sync
        if request_sync is None:
            raise ConfigurationError(
                "request_sync handler not passed into setup function"
            )

        if method != CODE_ACTION_METHOD:
            return request_sync(buffer, method, params, timeout)

        check_filetype(buffer, self.settings.filetypes)
        actions = request_sync(buffer, method, params, timeout)

        wait = DEFAULT_TIMEOUT if timeout is None else timeout
        try:
            return self._wait_for(lambda: self.augment(buffer, actions), wait)
        except (asyncio.TimeoutError, concurrent.futures.TimeoutError):
            self._logger.debug(
                "Linter did not finish within %.3fs; returning original actions", wait
            )
            return actions

    def _wait_for(
        self, make_coro: Callable[[], Coroutine[Any, Any, T]], timeout: float
    ) -> T:
        if _running_loop() is not None:
            raise RuntimeError(
                "request_blocking cannot wait on the event loop it runs on; "
                "use request_with_callback instead"
            )

        loop = self._loop
        if loop is not None and loop.is_running():
            future = asyncio.run_coroutine_threadsafe(make_coro(), loop)
            try:
                return future.result(timeout)
            except concurrent.futures.TimeoutError:
                future.cancel()
                raise

        async def _bounded() -> T:
            return await asyncio.wait_for(make_coro(), timeout)

        return asyncio.run(_bounded())

    def default(self) -> None:
        """Deprecated entry point, kept as a no-op that warns."""
        self._warn(REMOVED_MESSAGE)

    def custom(self) -> None:
        """Deprecated entry point, kept as a no-op that warns."""
        self._warn(REMOVED_MESSAGE)
