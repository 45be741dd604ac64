"""Project scanner — walks a source tree and folds per-file results into one report."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Callable, Iterator
from pathlib import Path

from frontaudit.engine.models import AggregateResult, CheckResult
from frontaudit.rules.models import Category

logger = logging.getLogger(__name__)

EvaluatorFn = Callable[[str, str], CheckResult]

# Generated, vendored and tooling directories are never descended into
SKIP_DIRS = frozenset(
    {
        "node_modules",
        ".git",
        "build",
        "dist",
        ".next",
        "coverage",
        ".cache",
        ".turbo",
        ".nuxt",
        ".output",
        "out",
        ".history",
        ".vscode",
    }
)

SOURCE_EXTENSIONS = frozenset({".ts", ".tsx", ".js", ".jsx"})

_TEST_FILE = re.compile(r"\.(?:test|spec)\.[^.]+$")

MAX_RESULTS = 50


def is_test_file(name: str) -> bool:
    return _TEST_FILE.search(name) is not None


def iter_source_files(root: str | Path, include_tests: bool = False) -> Iterator[Path]:
    """Walk a directory in sorted order, yielding scannable source files."""
    for dirpath, dirs, files in os.walk(root):
        # Prune skipped directories in-place
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)

        for name in sorted(files):
            path = Path(dirpath) / name
            if path.suffix not in SOURCE_EXTENSIONS:
                continue
            if not include_tests and is_test_file(name):
                continue
            yield path


def scan_project(
    root: str | Path,
    evaluator_fn: EvaluatorFn,
    *,
    category: Category,
    include_tests: bool = False,
    max_results: int = MAX_RESULTS,
) -> AggregateResult:
    """Evaluate every source file under ``root`` and build a bounded report.

    Files without issues are counted but not reported. A file that cannot be
    read or evaluated is logged and skipped; the scan always continues.
    ``max_results`` may lower the cap on reported files but never raise it.
    """
    if not 1 <= max_results <= MAX_RESULTS:
        raise ValueError(f"max_results must be between 1 and {MAX_RESULTS}")
    root = Path(root).resolve()
    start = time.time()

    result = AggregateResult(root=str(root), category=category.value)
    with_issues: list[CheckResult] = []

    for file_path in iter_source_files(root, include_tests=include_tests):
        result.total_files_scanned += 1
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", file_path, e)
            result.files_skipped += 1
            continue

        try:
            check = evaluator_fn(text, str(file_path))
        except Exception:
            logger.warning("Failed to analyze %s", file_path, exc_info=True)
            result.files_skipped += 1
            continue

        if not check.issues:
            continue

        with_issues.append(check)
        result.total_violations += check.total_violations
        for severity, count in check.severity_counts().items():
            result.severity_counts[severity] += count

    result.files_with_issues = len(with_issues)
    result.results = with_issues[:max_results]
    result.summary = _summarize(result, category, truncated=len(with_issues) > max_results)
    result.duration = time.time() - start
    return result


def _summarize(result: AggregateResult, category: Category, truncated: bool) -> str:
    counts = result.severity_counts
    text = (
        f"Found {result.total_violations} {category.value} violation(s) across "
        f"{result.files_with_issues} file(s) "
        f"({result.total_files_scanned} scanned). "
        f"Critical: {counts['critical']}, High: {counts['high']}, "
        f"Medium: {counts['medium']}, Low: {counts['low']}"
    )
    if result.files_skipped:
        text += f". Skipped {result.files_skipped} unreadable file(s)"
    if truncated:
        text += f". Showing the first {len(result.results)} files"
    return text
