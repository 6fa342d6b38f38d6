"""Tests for error handling utilities."""

from __future__ import annotations

import asyncio
import logging

import pytest

from eslint_actions.errors import LinterProcessError
from eslint_actions.lsp.error_handling import wrap_async_handler, wrap_handler


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("eslint_actions.test")


class TestWrapHandler:
    """Tests for wrap_handler decorator."""

    def test_returns_result_on_success(self, logger: logging.Logger) -> None:
        """Handler returns normal result when no exception occurs."""

        @wrap_handler(logger=logger, feature_name="initialize", default_factory=lambda: "d")
        def handler() -> str:
            return "success"

        assert handler() == "success"

    def test_unexpected_error_logged_with_traceback(
        self, logger: logging.Logger, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Unexpected exceptions are logged at error level with traceback."""

        @wrap_handler(logger=logger, feature_name="initialize", default_factory=lambda: "d")
        def handler() -> str:
            raise ValueError("specific error message")

        with caplog.at_level(logging.ERROR):
            assert handler() == "d"

        assert "Error in initialize handler" in caplog.text
        assert "specific error message" in caplog.text
        assert caplog.records[0].exc_info is not None

    def test_known_error_logged_as_warning(
        self, logger: logging.Logger, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Package errors are logged as warnings without traceback."""

        @wrap_handler(logger=logger, feature_name="initialize", default_factory=lambda: None)
        def handler() -> None:
            raise LinterProcessError("failed to spawn eslint")

        with caplog.at_level(logging.WARNING):
            handler()

        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].exc_info is None
        assert "initialize failed: failed to spawn eslint" in caplog.text

    def test_preserves_function_metadata(self, logger: logging.Logger) -> None:
        """Decorator preserves function name and docstring."""

        @wrap_handler(logger=logger, feature_name="x", default_factory=lambda: None)
        def my_handler() -> None:
            """My docstring."""

        assert my_handler.__name__ == "my_handler"
        assert my_handler.__doc__ == "My docstring."


class TestWrapAsyncHandler:
    """Tests for wrap_async_handler decorator."""

    async def test_returns_result_on_success(self, logger: logging.Logger) -> None:
        """Async handler returns normal result when no exception occurs."""

        @wrap_async_handler(
            logger=logger,
            feature_name="textDocument/codeAction",
            default_factory=lambda: None,
        )
        async def handler() -> list[str]:
            return ["action"]

        assert await handler() == ["action"]

    async def test_returns_default_on_linter_failure(self, logger: logging.Logger) -> None:
        """A failing linter yields the default result."""

        @wrap_async_handler(
            logger=logger,
            feature_name="textDocument/codeAction",
            default_factory=lambda: None,
        )
        async def handler() -> list[str]:
            raise LinterProcessError("stdout error")

        assert await handler() is None

    async def test_reraises_cancelled_error(self, logger: logging.Logger) -> None:
        """CancelledError is re-raised to allow proper cancellation."""

        @wrap_async_handler(
            logger=logger,
            feature_name="textDocument/codeAction",
            default_factory=lambda: None,
        )
        async def handler() -> None:
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await handler()
