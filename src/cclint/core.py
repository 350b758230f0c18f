"""Core linting entry points shared by the CLI and the SDK.

These functions take structured options, return structured results and never
print. Every user-supplied root or file goes through the path security gate
first.
"""

from __future__ import annotations

import concurrent.futures
import fnmatch
import logging
import os
import time
from collections.abc import Sequence
from pathlib import Path

from cclint.config import CclintConfig, load_config
from cclint.linters import LINTERS, BaseLinter, LintOptions, LintResult
from cclint.linters.agents import AgentsLinter
from cclint.linters.claude_md import DOC_FILES, ClaudeMdLinter
from cclint.linters.commands import CommandsLinter
from cclint.linters.settings import SettingsLinter
from cclint.project import ProjectInfo, detect_project_info, find_project_root
from cclint.security import PathSecurityError, resolve_secure
from cclint.summary import LintSummary, calculate_summary

logger = logging.getLogger(__name__)


def _matches(file: str, pattern: str) -> bool:
    return pattern in file or fnmatch.fnmatch(file, pattern)


def filter_results(
    results: Sequence[LintResult],
    include_files: Sequence[str] = (),
    exclude_files: Sequence[str] = (),
) -> list[LintResult]:
    """Keep results matching include_files and drop those matching exclude_files.

    A pattern matches when it is a substring of the file path or an fnmatch
    glob of it.
    """
    kept = list(results)
    if include_files:
        kept = [r for r in kept if any(_matches(r.file, p) for p in include_files)]
    if exclude_files:
        kept = [r for r in kept if not any(_matches(r.file, p) for p in exclude_files)]
    return kept


def _linter_failure(linter: BaseLinter, error: Exception, file: str | None = None) -> LintResult:
    result = LintResult(file=file or f"{linter.name}-error")
    result.add_error(f"{linter.name} linter failed: {error}")
    return result


def _run_linter(
    linter: BaseLinter, root: Path, options: LintOptions, info: ProjectInfo
) -> list[LintResult]:
    try:
        return linter.lint(root, options, info)
    except Exception as e:
        logger.debug("Linter %s failed: %s", linter.name, e, exc_info=True)
        return [_linter_failure(linter, e)]


def _project(
    project_root: str | os.PathLike[str] | None,
    config: CclintConfig | None,
    base_path: str | os.PathLike[str] | None = None,
    *,
    allow_scripts: bool = True,
) -> ProjectInfo:
    if project_root is None:
        root = find_project_root()
    else:
        root = resolve_secure(project_root, base_path)
    info = detect_project_info(
        root, load_cclint_config=config is None, allow_scripts=allow_scripts
    )
    if config is not None:
        info.cclint_config = config
    return info


def run_lint(
    project_root: str | os.PathLike[str],
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
    *,
    base_path: str | os.PathLike[str] | None = None,
) -> LintSummary:
    """Lint an entire project with every linter.

    Args:
        project_root: Project root directory, relative to base_path.
        options: Lint options. Defaults to LintOptions().
        config: Configuration to use instead of the project's own.
        base_path: Directory the root must lie within. Defaults to cwd.

    Returns:
        The summary of all results.

    Raises:
        PathSecurityError: If project_root is unsafe or not a directory.
    """
    start_time = time.monotonic()
    options = options or LintOptions()
    info = _project(project_root, config, base_path, allow_scripts=options.allow_scripts)
    linters = [cls() for cls in LINTERS.values()]

    results: list[LintResult] = []
    if options.parallel:
        with concurrent.futures.ThreadPoolExecutor(max_workers=len(linters)) as executor:
            for linter_results in executor.map(
                lambda linter: _run_linter(linter, info.root, options, info), linters
            ):
                results.extend(linter_results)
    else:
        for linter in linters:
            results.extend(_run_linter(linter, info.root, options, info))

    results = filter_results(results, options.include_files, options.exclude_files)
    return calculate_summary(results, start_time)


def _classify(path: Path) -> str | None:
    if path.name in DOC_FILES:
        return "claude-md"
    if path.name == "settings.json":
        return "settings"
    if path.suffix != ".md":
        return None
    if "commands" in path.parts:
        return "commands"
    if "agents" in path.parts:
        return "agents"
    return None


def lint_files(
    files: Sequence[str | os.PathLike[str]],
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
) -> LintSummary:
    """Lint an explicit list of files.

    Each file is routed to the linter for its kind: documentation files by
    name, settings.json, and markdown files under an ``agents`` or
    ``commands`` directory. Files failing the path security gate or of no
    known kind are skipped.

    Raises:
        ValueError: If files is non-empty but none of them can be linted.
    """
    start_time = time.monotonic()
    options = options or LintOptions()
    if not files:
        return calculate_summary([], start_time)

    safe: list[Path] = []
    for file in files:
        try:
            safe.append(resolve_secure(file, must_be_dir=False))
        except PathSecurityError as e:
            logger.warning("Skipping %s: %s", file, e)

    groups: dict[str, list[Path]] = {}
    for path in safe:
        kind = _classify(path)
        if kind is None:
            logger.debug("No linter for %s", path)
            continue
        groups.setdefault(kind, []).append(path)

    if not groups:
        raise ValueError("No valid files provided for linting")

    if config is None:
        info = detect_project_info(
            find_project_root(safe[0].parent), allow_scripts=options.allow_scripts
        )
        config = info.cclint_config

    linters: dict[str, AgentsLinter | CommandsLinter | SettingsLinter | ClaudeMdLinter] = {
        "agents": AgentsLinter(),
        "commands": CommandsLinter(),
        "settings": SettingsLinter(),
        "claude-md": ClaudeMdLinter(),
    }
    results: list[LintResult] = []
    for kind, linter in linters.items():
        paths = sorted(groups.get(kind, []))
        if not paths:
            continue
        try:
            results.extend(linter.lint_paths(paths, options, config))
        except Exception as e:
            logger.debug("Linter %s failed: %s", linter.name, e, exc_info=True)
            results.extend(_linter_failure(linter, e, str(p)) for p in paths)

    return calculate_summary(results, start_time)


def _lint_with(
    linter: BaseLinter,
    project_root: str | os.PathLike[str] | None,
    options: LintOptions | None,
    config: CclintConfig | None,
) -> list[LintResult]:
    options = options or LintOptions()
    info = _project(project_root, config, allow_scripts=options.allow_scripts)
    return linter.lint(info.root, options, info)


def lint_agents(
    project_root: str | os.PathLike[str] | None = None,
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
) -> list[LintResult]:
    """Lint only agent definition files."""
    return _lint_with(AgentsLinter(), project_root, options, config)


def lint_commands(
    project_root: str | os.PathLike[str] | None = None,
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
) -> list[LintResult]:
    """Lint only slash command files."""
    return _lint_with(CommandsLinter(), project_root, options, config)


def lint_settings(
    project_root: str | os.PathLike[str] | None = None,
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
) -> list[LintResult]:
    """Lint only the settings file."""
    return _lint_with(SettingsLinter(), project_root, options, config)


def lint_docs(
    project_root: str | os.PathLike[str] | None = None,
    options: LintOptions | None = None,
    config: CclintConfig | None = None,
) -> list[LintResult]:
    """Lint only the project documentation file."""
    return _lint_with(ClaudeMdLinter(), project_root, options, config)


def detect_project(
    project_root: str | os.PathLike[str] | None = None, *, allow_scripts: bool = True
) -> ProjectInfo:
    """Detect project metadata. Without a root, climbs from cwd to the nearest marker."""
    return _project(project_root, None, allow_scripts=allow_scripts)


def load_project_config(
    project_root: str | os.PathLike[str] | None = None, *, allow_scripts: bool = True
) -> CclintConfig | None:
    """Load the cclint configuration of a project (cwd by default)."""
    root = resolve_secure(project_root) if project_root is not None else Path.cwd()
    return load_config(root, allow_scripts=allow_scripts)
