"""File discovery for linters.

Walks candidate directories for matching files, honouring the configured
include/exclude patterns. Symbolic links are skipped unless following is
enabled; followed links must resolve inside the project root.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from cclint.security import is_path_safe, is_within

if TYPE_CHECKING:
    from cclint.config import CclintConfig

logger = logging.getLogger(__name__)


def _pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """Convert an exclude pattern (``*`` any run, ``?`` one char) to a regex."""
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


def should_skip_file(path: Path | str, exclude_patterns: Sequence[str] | None) -> bool:
    """Check a file against exclude patterns.

    Patterns are matched anywhere in the path relative to the current working
    directory.

    Args:
        path: File to check.
        exclude_patterns: Patterns from ``rules.exclude_patterns``.

    Returns:
        True if any pattern matches.
    """
    if not exclude_patterns:
        return False
    relative = os.path.relpath(os.path.abspath(path), os.getcwd())
    return any(_pattern_to_regex(p).search(relative) for p in exclude_patterns)


def _resolve_link(entry: os.DirEntry[str], real_root: Path) -> Path | None:
    """Return the real target of a symlink entry, or None if it must be skipped."""
    try:
        target = Path(os.path.realpath(entry.path, strict=True))
    except (OSError, RuntimeError) as e:
        logger.debug("Skipping unresolvable symlink %s: %s", entry.path, e)
        return None
    if not is_within(target, real_root):
        logger.debug("Skipping symlink outside project root: %s -> %s", entry.path, target)
        return None
    return target


def _walk(
    directory: Path,
    real_root: Path,
    follow_symlinks: bool,
    suffix: str,
    visited: set[Path],
) -> Iterator[Path]:
    """Yield matching files under directory, depth first."""
    try:
        entries = sorted(os.scandir(directory), key=lambda e: e.name)
    except OSError as e:
        logger.debug("Cannot read directory %s: %s", directory, e)
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            if entry.is_symlink():
                if not follow_symlinks:
                    continue
                target = _resolve_link(entry, real_root)
                if target is None:
                    continue
                if target.is_dir():
                    if target in visited:
                        continue
                    visited.add(target)
                    yield from _walk(path, real_root, follow_symlinks, suffix, visited)
                elif target.is_file() and entry.name.endswith(suffix):
                    yield path
            elif entry.is_dir(follow_symlinks=False):
                real_dir = Path(os.path.realpath(entry.path))
                if real_dir in visited:
                    continue
                visited.add(real_dir)
                yield from _walk(path, real_root, follow_symlinks, suffix, visited)
            elif entry.is_file(follow_symlinks=False) and entry.name.endswith(suffix):
                yield path
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)


def existing_file(
    path: Path, project_root: Path, *, follow_symlinks: bool = False
) -> Path | None:
    """Return path if it is a regular file that may be linted, else None.

    A symlinked file is accepted only when following is enabled and its
    target stays inside the project root.
    """
    try:
        if path.is_symlink():
            if not follow_symlinks:
                return None
            target = Path(os.path.realpath(path, strict=True))
            if not is_within(target, Path(os.path.realpath(project_root))):
                return None
        return path if path.is_file() else None
    except (OSError, RuntimeError):
        return None


def _include_dirs(project_root: Path, patterns: Iterable[str]) -> list[Path]:
    dirs: list[Path] = []
    for pattern in patterns:
        if not is_path_safe(pattern, project_root):
            logger.warning("Ignoring include pattern outside project root: %s", pattern)
            continue
        if os.path.isabs(pattern):
            # Path.glob only takes relative patterns
            pattern = os.path.relpath(pattern, project_root)
            if pattern == ".." or pattern.startswith(".." + os.sep):
                logger.warning("Ignoring include pattern outside project root: %s", pattern)
                continue
        if any(c in pattern for c in "*?["):
            try:
                matches = sorted(p for p in project_root.glob(pattern) if p.is_dir())
            except (NotImplementedError, ValueError, OSError) as e:
                logger.warning("Ignoring invalid include pattern %s: %s", pattern, e)
                continue
            dirs.extend(matches)
        else:
            dirs.append(project_root / pattern)
    return dirs


def discover(
    project_root: Path,
    candidate_dirs: Sequence[Path],
    config: CclintConfig | None = None,
    *,
    follow_symlinks: bool = False,
    suffix: str = ".md",
) -> list[Path]:
    """Find files to lint.

    Args:
        project_root: Validated project root.
        candidate_dirs: Directories to search. Missing ones are skipped.
        config: Project config supplying include/exclude patterns.
        follow_symlinks: Follow symbolic links that stay inside the root.
        suffix: File name suffix to match.

    Returns:
        Sorted files, deduplicated by real path.
    """
    real_root = Path(os.path.realpath(project_root))
    rules = config.rules if config is not None else None
    search_dirs = list(candidate_dirs)
    if rules is not None:
        search_dirs.extend(_include_dirs(project_root, rules.include_patterns))

    visited: set[Path] = set()
    seen_real: set[Path] = set()
    found: list[Path] = []

    for directory in search_dirs:
        if directory.is_symlink() and not follow_symlinks:
            continue
        real_dir = Path(os.path.realpath(directory))
        if not real_dir.is_dir() or not is_within(real_dir, real_root):
            continue
        if real_dir in visited:
            continue
        visited.add(real_dir)

        for path in _walk(directory, real_root, follow_symlinks, suffix, visited):
            real = Path(os.path.realpath(path))
            if real in seen_real:
                continue
            if rules is not None and should_skip_file(path, rules.exclude_patterns):
                continue
            seen_real.add(real)
            found.append(path)

    return sorted(found)
