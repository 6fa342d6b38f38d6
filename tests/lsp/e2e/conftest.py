"""Fixtures for E2E tests."""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from tests.helpers.fake_eslint import write_canned_eslint
from tests.lsp.e2e.lsp_client import LspTestClient
from tests.lsp.e2e.server_entry import ENV_VAR

REPO_ROOT = Path(__file__).resolve().parents[3]

E2E_SOURCE = ("x" * 11 + "\n") * 10 + "var abcd = 1;\n"
E2E_MESSAGES = [
    {
        "ruleId": "no-unused-vars",
        "line": 11,
        "column": 1,
        "endLine": 11,
        "endColumn": 5,
        "fix": {"range": [120, 124], "text": ""},
    }
]


@pytest.fixture
async def lsp_server_process(
    tmp_path: Path,
) -> AsyncGenerator[asyncio.subprocess.Process, None]:
    """Start the test LSP server as a subprocess with a fake linter."""
    if sys.platform == "win32":
        pytest.skip("fake linter relies on a shebang executable")

    eslint = write_canned_eslint(tmp_path, json.dumps([{"messages": E2E_MESSAGES}]))
    env = {**os.environ, ENV_VAR: str(eslint)}

    process = await asyncio.create_subprocess_exec(
        sys.executable,
        "-m",
        "tests.lsp.e2e.server_entry",
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=REPO_ROOT,
        env=env,
    )

    yield process

    if process.returncode is None:
        process.terminate()
        try:
            await asyncio.wait_for(process.wait(), timeout=5.0)
        except asyncio.TimeoutError:
            process.kill()


@pytest.fixture
async def lsp_client(
    lsp_server_process: asyncio.subprocess.Process,
) -> AsyncGenerator[LspTestClient, None]:
    """Create an LSP client connected to the test server."""
    assert lsp_server_process.stdin is not None
    assert lsp_server_process.stdout is not None

    client = LspTestClient(
        reader=lsp_server_process.stdout,
        writer=lsp_server_process.stdin,
    )
    yield client
