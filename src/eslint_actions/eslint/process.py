"""Linter process pipeline.

Runs the linter once per request in stdin mode and collects its complete
standard output. The output pipe is drained concurrently with writing the
buffer text, so a linter that starts printing before it has read all of its
input cannot deadlock the pipeline.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeAlias

from eslint_actions.errors import LinterProcessError
from eslint_actions.logging import get_logger

__all__ = [
    "CHUNK_SIZE",
    "LinterRunner",
    "linter_args",
    "run_linter",
]

CHUNK_SIZE = 64 * 1024

# linter(linter_bin, source, filename) -> complete stdout
LinterRunner: TypeAlias = Callable[[str, str, str], Awaitable[str]]


def linter_args(filename: str) -> list[str]:
    """Arguments asking for JSON output of a single file read from stdin."""
    return ["-f", "json", "--stdin", "--stdin-filename", filename]


async def _drain(stream: asyncio.StreamReader, name: str) -> bytes:
    chunks: list[bytes] = []
    try:
        while True:
            chunk = await stream.read(CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
    except (OSError, ValueError) as e:
        raise LinterProcessError(f"{name} error: {e}") from e
    return b"".join(chunks)


async def _feed(stream: asyncio.StreamWriter, data: bytes, logger: logging.Logger) -> None:
    try:
        stream.write(data)
        await stream.drain()
    except (BrokenPipeError, ConnectionResetError):
        # The linter may exit without consuming stdin (e.g. bad arguments)
        logger.debug("Linter closed stdin before all input was written")
    finally:
        stream.close()
        try:
            await stream.wait_closed()
        except (BrokenPipeError, ConnectionResetError):
            pass


def _kill(process: asyncio.subprocess.Process, logger: logging.Logger) -> None:
    if process.returncode is not None:
        return
    try:
        process.kill()
        logger.debug("Killed linter process %s", process.pid)
    except ProcessLookupError:
        pass


async def run_linter(
    linter_bin: str,
    source: str,
    filename: str,
    *,
    logger: logging.Logger | None = None,
) -> str:
    """
    Lint ``source`` as if it were ``filename`` and return the linter's stdout.

    The result is only produced once stdout reaches end-of-stream, so callers
    never see partial output. Cancelling the awaiting task kills the process.

    Args:
        linter_bin: Executable to run.
        source: Full buffer text, written to the process's stdin.
        filename: Name reported to the linter via ``--stdin-filename``.
        logger: Optional logger. Defaults to the eslint process logger.

    Returns:
        Complete standard output, decoded as UTF-8.

    Raises:
        LinterProcessError: If the process cannot be spawned or a stream fails.
    """
    if logger is None:
        logger = get_logger("eslint.process")

    args = linter_args(filename)
    logger.debug("Spawning %s %s", linter_bin, " ".join(args))
    start_time = time.monotonic()

    try:
        process = await asyncio.create_subprocess_exec(
            linter_bin,
            *args,
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise LinterProcessError(f"failed to spawn {linter_bin}: {e}") from e

    assert process.stdin is not None
    assert process.stdout is not None
    assert process.stderr is not None

    stdout_task = asyncio.create_task(_drain(process.stdout, "stdout"))
    stderr_task = asyncio.create_task(_drain(process.stderr, "stderr"))
    try:
        await _feed(process.stdin, source.encode("utf-8"), logger)
        stdout_bytes, stderr_bytes = await asyncio.gather(stdout_task, stderr_task)
        returncode = await process.wait()
    finally:
        for task in (stdout_task, stderr_task):
            if not task.done():
                task.cancel()
        _kill(process, logger)

    duration_ms = (time.monotonic() - start_time) * 1000
    logger.debug(
        "Linter exited with code %s after %.2fms (%d bytes of output)",
        returncode,
        duration_ms,
        len(stdout_bytes),
    )
    if stderr_bytes:
        logger.debug(
            "Linter stderr: %s", stderr_bytes.decode("utf-8", errors="replace").strip()
        )

    return stdout_bytes.decode("utf-8", errors="replace")
