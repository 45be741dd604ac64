"""Engine data models — violations, issues and check results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from frontaudit.rules.models import Rule, Severity


def empty_severity_counts() -> dict[str, int]:
    return {s.value: 0 for s in Severity}


@dataclass(frozen=True)
class Violation:
    """One concrete match of a rule against a text, located by line."""

    line: int
    column: int
    message: str
    rule_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "ruleId": self.rule_id,
        }


@dataclass
class RuleResult:
    """A rule paired with the violations it produced for one text."""

    rule: Rule
    violations: list[Violation] = field(default_factory=list)

    @property
    def triggered(self) -> bool:
        return bool(self.violations)


@dataclass(frozen=True)
class Issue:
    """A violation rendered for reporting."""

    type: str
    category: str
    message: str
    fix: str
    rule_id: str
    severity: Severity
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "category": self.category,
            "severity": self.severity.value,
            "ruleId": self.rule_id,
            "message": self.message,
            "fix": self.fix,
        }
        if self.line is not None:
            data["line"] = self.line
        if self.column is not None:
            data["column"] = self.column
        return data


@dataclass
class CheckResult:
    """File-level result of one check category."""

    file: str
    category: str
    framework: str = ""
    issues: list[Issue] = field(default_factory=list)
    summary: str = ""
    score: int | None = None

    @property
    def total_violations(self) -> int:
        return len(self.issues)

    def severity_counts(self) -> dict[str, int]:
        counts = empty_severity_counts()
        for issue in self.issues:
            counts[issue.severity.value] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "file": self.file,
            "category": self.category,
            "framework": self.framework,
            "issues": [i.to_dict() for i in self.issues],
            "totalViolations": self.total_violations,
            "summary": self.summary,
        }
        if self.score is not None:
            data["score"] = self.score
        return data


@dataclass
class AggregateResult:
    """Project-wide, size-bounded roll-up of per-file results."""

    root: str
    category: str
    total_files_scanned: int = 0
    files_with_issues: int = 0
    files_skipped: int = 0
    total_violations: int = 0
    severity_counts: dict[str, int] = field(default_factory=empty_severity_counts)
    results: list[CheckResult] = field(default_factory=list)
    summary: str = ""
    duration: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "root": self.root,
            "category": self.category,
            "totalFilesScanned": self.total_files_scanned,
            "filesWithIssues": self.files_with_issues,
            "filesSkipped": self.files_skipped,
            "totalViolations": self.total_violations,
            "severityCounts": dict(self.severity_counts),
            "results": [r.to_dict() for r in self.results],
            "summary": self.summary,
            "duration": round(self.duration, 3),
        }
