"""Project root discovery and project metadata detection."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cclint.config import CclintConfig, load_config

logger = logging.getLogger(__name__)

ROOT_MARKERS: tuple[str, ...] = (".git", "package.json", "pyproject.toml", ".claude")

# First match wins
LOCK_FILES: tuple[tuple[str, str], ...] = (
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
    ("uv.lock", "uv"),
    ("poetry.lock", "poetry"),
    ("Pipfile.lock", "pipenv"),
)


@dataclass
class ProjectInfo:
    """What cclint knows about the project being linted.

    Attributes:
        root: Absolute project root.
        has_git: Whether a .git entry exists.
        has_claude_dir: Whether a .claude directory exists.
        has_package_json: Whether a readable package.json exists.
        has_pyproject: Whether a readable pyproject.toml exists.
        package_manager: Detected from lock files, if any.
        project_name: From package.json "name" or pyproject [project].name.
        cclint_config: The project's cclint configuration, if any.
    """

    root: Path
    has_git: bool = False
    has_claude_dir: bool = False
    has_package_json: bool = False
    has_pyproject: bool = False
    package_manager: str | None = None
    project_name: str | None = None
    cclint_config: CclintConfig | None = None


def find_project_root(start_dir: Path | None = None) -> Path:
    """Find the project root by climbing to the nearest directory with a marker.

    Args:
        start_dir: Directory to start from. Defaults to cwd.

    Returns:
        The first ancestor (or start_dir itself) containing one of
        ROOT_MARKERS. Falls back to start_dir when none is found.
    """
    start = (start_dir or Path.cwd()).resolve()
    current = start

    while True:
        for marker in ROOT_MARKERS:
            try:
                if (current / marker).exists():
                    return current
            except PermissionError:
                continue

        parent = current.parent
        if parent == current:
            return start
        current = parent


def _read_package_json(root: Path) -> dict[str, Any] | None:
    try:
        data = json.loads((root / "package.json").read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def _read_pyproject(root: Path) -> dict[str, Any] | None:
    try:
        with open(root / "pyproject.toml", "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return None


def detect_package_manager(root: Path) -> str | None:
    """Detect the package manager from lock files in root."""
    for filename, manager in LOCK_FILES:
        if (root / filename).exists():
            return manager
    return None


def detect_project_info(
    project_root: Path, *, load_cclint_config: bool = True, allow_scripts: bool = True
) -> ProjectInfo:
    """Collect project metadata for a resolved project root.

    Args:
        project_root: The (already validated) project root.
        load_cclint_config: Whether to load the project's cclint configuration.
        allow_scripts: Whether Python configuration files may be executed.

    Returns:
        The detected ProjectInfo.
    """
    info = ProjectInfo(
        root=project_root,
        has_git=(project_root / ".git").exists(),
        has_claude_dir=(project_root / ".claude").is_dir(),
        package_manager=detect_package_manager(project_root),
    )

    package_json = _read_package_json(project_root)
    if package_json is not None:
        info.has_package_json = True
        if isinstance(package_json.get("name"), str):
            info.project_name = package_json["name"]

    pyproject = _read_pyproject(project_root)
    if pyproject is not None:
        info.has_pyproject = True
        project_table = pyproject.get("project")
        if info.project_name is None and isinstance(project_table, dict):
            name = project_table.get("name")
            if isinstance(name, str):
                info.project_name = name

    if load_cclint_config:
        info.cclint_config = load_config(project_root, allow_scripts=allow_scripts)
        if info.cclint_config is not None:
            logger.debug("Loaded cclint config from %s", info.cclint_config.source)

    return info
