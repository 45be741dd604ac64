"""Result aggregator — turns raw rule violations into a scored check result."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from frontaudit.engine.models import (
    CheckResult,
    Issue,
    RuleResult,
    empty_severity_counts,
)
from frontaudit.rules.models import Category, Severity

# Score penalty per violation; low severity never costs points
SEVERITY_PENALTIES = {
    Severity.CRITICAL: 20,
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 0,
}

# Categories whose file results carry a 0-100 score
SCORED_CATEGORIES = frozenset({Category.SECURITY, Category.BEST_PRACTICES})

_CATEGORY_LABELS = {
    Category.SECURITY: "security",
    Category.ACCESSIBILITY: "accessibility",
    Category.BEST_PRACTICES: "best-practice",
    Category.PERFORMANCE: "performance",
    Category.SEO: "SEO",
}


def compute_score(counts: Mapping[str, int]) -> int:
    """Weighted-penalty score in [0, 100] from per-severity violation counts."""
    penalty = sum(
        SEVERITY_PENALTIES[severity] * counts.get(severity.value, 0)
        for severity in Severity
    )
    return max(0, min(100, 100 - penalty))


def to_issues(result: RuleResult) -> list[Issue]:
    rule = result.rule
    return [
        Issue(
            type=rule.severity.issue_type,
            category=rule.category.value,
            message=f"[{rule.id}] {rule.title}: {v.message}",
            fix=rule.recommendation,
            rule_id=rule.id,
            severity=rule.severity,
            line=v.line,
            column=v.column,
        )
        for v in result.violations
    ]


def aggregate(
    rule_results: Iterable[RuleResult],
    category: Category,
    *,
    file_path: str = "",
    framework: str = "",
    total_rules: int | None = None,
) -> CheckResult:
    """Build a file-level CheckResult for one check category.

    ``total_rules`` is the number of enabled rules that were run; it defaults
    to the number of rule results supplied.
    """
    rule_results = list(rule_results)
    if total_rules is None:
        total_rules = len(rule_results)

    issues: list[Issue] = []
    for result in rule_results:
        issues.extend(to_issues(result))

    counts = empty_severity_counts()
    for issue in issues:
        counts[issue.severity.value] += 1

    score = compute_score(counts) if category in SCORED_CATEGORIES else None
    triggered = sum(1 for r in rule_results if r.triggered)

    return CheckResult(
        file=file_path,
        category=category.value,
        framework=framework,
        issues=issues,
        summary=summarize(category, counts, score, triggered, total_rules),
        score=score,
    )


def summarize(
    category: Category,
    counts: Mapping[str, int],
    score: int | None,
    triggered_rules: int,
    total_rules: int,
) -> str:
    label = _CATEGORY_LABELS[category]
    score_text = f" (Score: {score}/100)" if score is not None else ""

    if sum(counts.values()) == 0:
        return f"✓ No {label} issues found ({total_rules} rules checked){score_text}"

    tallies = ", ".join(f"{counts.get(s.value, 0)} {s.value}" for s in Severity)
    return (
        f"⚠ {label[0].upper()}{label[1:]} issues found: {tallies} "
        f"({triggered_rules}/{total_rules} rules triggered){score_text}"
    )


def merge_results(results: Iterable[CheckResult], file_path: str) -> CheckResult:
    """Combine per-category results for one file into a single result."""
    results = list(results)
    issues: list[Issue] = []
    for result in results:
        issues.extend(result.issues)

    scores = [r.score for r in results if r.score is not None]
    score = min(scores) if scores else None
    framework = next((r.framework for r in results if r.framework), "")

    parts = [f"{r.category}: {r.summary}" for r in results]
    return CheckResult(
        file=file_path,
        category="all",
        framework=framework,
        issues=issues,
        summary="\n".join(parts),
        score=score,
    )
