"""Path security helpers for cclint.

Every user-supplied filesystem path (project roots, include patterns, config
files) goes through this module before it is used. The checks guard against
path traversal, null bytes and symlinks that escape the allowed directory.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path


class PathSecurityError(ValueError):
    """Raised when a path is invalid or resolves outside the allowed directory."""

    def __init__(self, message: str, path: str | os.PathLike[str] | None = None) -> None:
        self.path = str(path) if path is not None else ""
        super().__init__(message)


def _normalize(input_path: str, base: Path) -> Path:
    """Resolve input_path against base without touching the filesystem."""
    candidate = Path(input_path)
    if not candidate.is_absolute():
        candidate = base / candidate
    return Path(os.path.normpath(candidate))


def is_within(path: Path, root: Path) -> bool:
    """Check whether path equals root or lies beneath it.

    Both paths are compared as given; callers decide whether they are real
    paths or nominal ones.
    """
    return path == root or path.is_relative_to(root)


def _escapes(path: Path, base: Path) -> bool:
    relative = os.path.relpath(path, base)
    return relative == ".." or relative.startswith(".." + os.sep) or os.path.isabs(relative)


def resolve_secure(
    input_path: str | os.PathLike[str],
    base_path: str | os.PathLike[str] | None = None,
    *,
    must_be_dir: bool = True,
) -> Path:
    """Validate a user-supplied path and return its real, absolute form.

    Relative paths are resolved against base_path (defaults to the current
    working directory). Absolute paths are used as given but must still lie
    inside base_path.

    Args:
        input_path: The path to validate.
        base_path: Directory the path must stay within.
        must_be_dir: If True, the target must be a directory.

    Returns:
        The real path of the target (symlinks resolved).

    Raises:
        PathSecurityError: If the path is empty, contains a null byte, escapes
            base_path (nominally or through a symlink), does not exist, is not
            accessible, or is not a directory when one is required.
    """
    if isinstance(input_path, os.PathLike):
        input_path = os.fspath(input_path)
    if not input_path or not isinstance(input_path, str):
        raise PathSecurityError("Path must be a non-empty string", input_path or "")
    if "\0" in input_path:
        raise PathSecurityError("Path contains a null byte", input_path)

    clean = input_path.strip()
    if not clean:
        raise PathSecurityError("Path cannot be empty or whitespace only", input_path)

    base = Path(os.path.abspath(base_path if base_path is not None else os.getcwd()))
    resolved = _normalize(clean, base)

    if _escapes(resolved, base):
        raise PathSecurityError(
            f"Path traversal attempt detected. Path '{input_path}' resolves outside "
            f"allowed directory '{base}'",
            input_path,
        )

    try:
        st = resolved.stat()
        real_path = Path(os.path.realpath(resolved))
        real_base = Path(os.path.realpath(base))
    except FileNotFoundError as e:
        raise PathSecurityError(f"Path does not exist: {resolved}", input_path) from e
    except PermissionError as e:
        raise PathSecurityError(f"Permission denied accessing path: {resolved}", input_path) from e
    except OSError as e:
        raise PathSecurityError(f"Failed to access path: {resolved} ({e})", input_path) from e

    if must_be_dir and not stat.S_ISDIR(st.st_mode):
        raise PathSecurityError(f"Path must be a directory: {resolved}", input_path)

    if _escapes(real_path, real_base):
        raise PathSecurityError(
            f"Symbolic link traversal detected. Path '{input_path}' links outside "
            "allowed directory",
            input_path,
        )

    return real_path


def is_path_safe(
    input_path: str | os.PathLike[str],
    base_path: str | os.PathLike[str] | None = None,
) -> bool:
    """Quick, filesystem-free check that a path stays inside base_path.

    Performs the same traversal arithmetic as resolve_secure but never touches
    the filesystem, so it cannot detect symlinks that point outside the base.
    Use it for early validation of CLI flags; use resolve_secure before
    actually reading anything.

    Args:
        input_path: The path to check.
        base_path: Directory the path must stay within. Defaults to cwd.

    Returns:
        True if the path looks safe, False otherwise.
    """
    if isinstance(input_path, os.PathLike):
        input_path = os.fspath(input_path)
    if not input_path or not isinstance(input_path, str):
        return False
    if "\0" in input_path:
        return False

    clean = input_path.strip()
    if not clean:
        return False

    base = Path(os.path.abspath(base_path if base_path is not None else os.getcwd()))
    return not _escapes(_normalize(clean, base), base)
