"""Bounded parallel execution of per-file lint work.

Workers share a cursor over the file list and claim the next index until the
list is exhausted, so at most ``concurrency`` files are processed at a time.
Parallel output is sorted by file path, which makes it identical to a
sequential run over a sorted file list.
"""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cclint.config import CclintConfig
    from cclint.linters.base import LintResult

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10

Processor = Callable[[Path, "CclintConfig | None"], "LintResult | None"]


def _failed_result(path: Path, error: Exception) -> LintResult:
    from cclint.linters.base import LintResult

    result = LintResult(file=str(path))
    result.add_error(f"Processing failed: {error}")
    return result


def _process_one(path: Path, processor: Processor, config: CclintConfig | None) -> LintResult | None:
    try:
        return processor(path, config)
    except Exception as e:
        logger.debug("Processor failed on %s: %s", path, e)
        return _failed_result(path, e)


def run_all(
    files: Sequence[Path],
    processor: Processor,
    config: CclintConfig | None = None,
    *,
    parallel: bool = True,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[LintResult]:
    """Run processor over every file.

    Args:
        files: Files to process.
        processor: Called as ``processor(path, config)``; returns a result or
            None for files that should be skipped.
        config: Passed through to the processor.
        parallel: Use a thread pool when there is more than one file.
        concurrency: Maximum number of files processed at once.

    Returns:
        Results for every file the processor did not skip. Sequential runs keep
        input order; parallel runs are sorted by file.
    """
    if not parallel or len(files) <= 1:
        results: list[LintResult] = []
        for path in files:
            result = _process_one(path, processor, config)
            if result is not None:
                results.append(result)
        return results

    return _run_parallel(files, processor, config, concurrency)


def _run_parallel(
    files: Sequence[Path],
    processor: Processor,
    config: CclintConfig | None,
    concurrency: int,
) -> list[LintResult]:
    """Process files with a fixed pool of workers sharing one cursor."""
    results: list[LintResult] = []
    lock = threading.Lock()
    cursor = 0

    def worker() -> None:
        nonlocal cursor
        while True:
            with lock:
                if cursor >= len(files):
                    return
                index = cursor
                cursor += 1

            result = _process_one(files[index], processor, config)
            if result is not None:
                with lock:
                    results.append(result)

    max_workers = max(1, min(concurrency, len(files)))
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(worker) for _ in range(max_workers)]
        for future in concurrent.futures.as_completed(futures):
            future.result()

    return sorted(results, key=lambda r: r.file)
