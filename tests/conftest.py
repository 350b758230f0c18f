"""Pytest configuration and fixtures for cclint tests."""

from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

from cclint.config import clear_config_cache  # noqa: E402

VALID_AGENT = """---
name: code-reviewer
description: Reviews code for quality and security issues
tools: Read, Grep, Glob
model: sonnet
color: blue
---

You are a careful code reviewer.
"""

VALID_COMMAND = """---
description: Run the test suite
allowed-tools: Bash(pytest:*), Read
argument-hint: "[test path]"
---

Run !`pytest $ARGUMENTS` and summarise the failures.
"""

VALID_SETTINGS = """{
  "hooks": {
    "PostToolUse": [
      {
        "matcher": "Write|Edit",
        "hooks": [{"type": "command", "command": "ruff format"}]
      }
    ]
  }
}
"""


@pytest.fixture(autouse=True)
def _fresh_config_cache() -> Generator[None, None, None]:
    """Each test sees configuration files as they are on disk now."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a file below tmp_path, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A minimal Claude Code project, with cwd set to its root."""
    claude_dir = tmp_path / ".claude"
    (claude_dir / "agents").mkdir(parents=True)
    (claude_dir / "commands").mkdir(parents=True)
    (claude_dir / "agents" / "code-reviewer.md").write_text(VALID_AGENT, encoding="utf-8")
    (claude_dir / "commands" / "test.md").write_text(VALID_COMMAND, encoding="utf-8")
    (claude_dir / "settings.json").write_text(VALID_SETTINGS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return tmp_path
