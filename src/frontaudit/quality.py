"""Code quality metrics — heuristic 0-100 scores computed from source text.

Each metric starts at 100 and loses points for textual smells; higher is
always better, complexity included.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from frontaudit.engine.scanner import MAX_RESULTS, iter_source_files

logger = logging.getLogger(__name__)

_FUNCTION = re.compile(r"function\s+\w+|const\s+\w+\s*=\s*\([^)]*\)\s*=>")
_COMMENT_MARKER = re.compile(r"//|/\*|\*/")
_MAGIC_NUMBER = re.compile(r"[^a-zA-Z_]\d{2,}[^a-zA-Z_]")

# Branch points counted toward cyclomatic complexity
_BRANCHES = tuple(
    re.compile(p)
    for p in (
        r"\bif\s*\(",
        r"\belse\s+if\s*\(",
        r"\bwhile\s*\(",
        r"\bfor\s*\(",
        r"\bcase\s+",
        r"\bcatch\s*\(",
        r"&&",
        r"\|\|",
        r"\?",
    )
)

_SIDE_EFFECTS = re.compile(r"useState|useEffect|useReducer|localStorage|fetch|axios")
_CONSTRUCTED_DEPENDENCY = re.compile(r"new\s+\w+\(")
_EXPORT = re.compile(r"export\s+(?:const|function|class)")
_COMPONENT_TAG = re.compile(r"<[A-Z]")
_DECLARED_NAME = re.compile(r"\b(?:const|let|var)\s+([a-zA-Z_$][a-zA-Z0-9_$]*)")
_SHORT_NAMES_ALLOWED = frozenset({"i", "j", "k", "id"})


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def _line_count(text: str) -> int:
    return text.count("\n") + 1


def maintainability(text: str) -> int:
    score = 100
    lines = _line_count(text)
    if lines > 300:
        score -= 20
    elif lines > 200:
        score -= 10

    functions = len(_FUNCTION.findall(text))
    if functions and len(text) / functions > 500:
        score -= 15

    if len(_COMMENT_MARKER.findall(text)) / lines < 0.05:
        score -= 10

    if len(_MAGIC_NUMBER.findall(text)) > 5:
        score -= 10

    return _clamp(score)


def complexity(text: str) -> int:
    branches = sum(len(p.findall(text)) for p in _BRANCHES)
    return 100 - min(100, branches * 2)


def testability(text: str) -> int:
    score = 100
    if _SIDE_EFFECTS.search(text):
        score -= 20
    if _CONSTRUCTED_DEPENDENCY.search(text):
        score -= 15
    if not _EXPORT.search(text):
        score -= 20
    # Logic and markup in one module can be exercised together
    if _FUNCTION.search(text) and _COMPONENT_TAG.search(text):
        score += 10
    return _clamp(score)


def max_nesting(text: str) -> int:
    depth = deepest = 0
    for char in text:
        if char == "{":
            depth += 1
            deepest = max(deepest, depth)
        elif char == "}":
            depth -= 1
    return deepest


def has_odd_indentation(text: str) -> bool:
    for line in text.split("\n"):
        indent = len(line) - len(line.lstrip())
        if indent % 2:
            return True
    return False


def readability(text: str) -> int:
    score = 100
    short_names = [
        name
        for name in _DECLARED_NAME.findall(text)
        if len(name) < 3 and name not in _SHORT_NAMES_ALLOWED
    ]
    if len(short_names) > 5:
        score -= 15

    if sum(1 for line in text.split("\n") if len(line) > 120) > 10:
        score -= 10

    nesting = max_nesting(text)
    if nesting > 4:
        score -= 20
    elif nesting > 3:
        score -= 10

    if has_odd_indentation(text):
        score -= 15

    return _clamp(score)


@dataclass(frozen=True)
class QualityMetrics:
    """Four heuristic scores for one file, each in [0, 100]."""

    maintainability: int
    complexity: int
    testability: int
    readability: int

    @property
    def overall(self) -> int:
        return round(
            (self.maintainability + self.complexity + self.testability + self.readability)
            / 4
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "maintainability": self.maintainability,
            "complexity": self.complexity,
            "testability": self.testability,
            "readability": self.readability,
            "overall": self.overall,
        }


def assess_quality(text: str) -> QualityMetrics:
    return QualityMetrics(
        maintainability=maintainability(text),
        complexity=complexity(text),
        testability=testability(text),
        readability=readability(text),
    )


@dataclass
class QualityReport:
    """Quality metrics across a source tree, lowest-scoring files first."""

    root: str
    total_files_scanned: int = 0
    files_skipped: int = 0
    averages: dict[str, int] = field(default_factory=dict)
    results: list[dict[str, Any]] = field(default_factory=list)
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "category": "quality",
            "totalFilesScanned": self.total_files_scanned,
            "filesSkipped": self.files_skipped,
            "averages": dict(self.averages),
            "results": list(self.results),
            "duration": round(self.duration, 3),
        }


def assess_project(
    root: str | Path,
    *,
    include_tests: bool = False,
    max_results: int = MAX_RESULTS,
) -> QualityReport:
    """Score every source file under ``root``.

    Averages cover every readable file; ``results`` keeps only the
    ``max_results`` lowest overall scores.
    """
    root = Path(root).resolve()
    start = time.time()
    report = QualityReport(root=str(root))
    scored: list[dict[str, Any]] = []

    for file_path in iter_source_files(root, include_tests=include_tests):
        report.total_files_scanned += 1
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", file_path, e)
            report.files_skipped += 1
            continue
        scored.append({"file": str(file_path), **assess_quality(text).to_dict()})

    if scored:
        report.averages = {
            key: round(sum(s[key] for s in scored) / len(scored))
            for key in ("maintainability", "complexity", "testability", "readability", "overall")
        }
    scored.sort(key=lambda s: (s["overall"], s["file"]))
    report.results = scored[:max_results]
    report.duration = time.time() - start
    return report
