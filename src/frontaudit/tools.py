"""Tool handlers — the operations exposed to an external dispatch layer.

Every handler is a plain sync function returning a JSON-serializable dict, so
it can be driven by the CLI, the HTTP API or any other transport.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from frontaudit.analyzers import RuleAnalyzer, analyzer_for
from frontaudit.config import AuditConfig
from frontaudit.engine.aggregator import merge_results
from frontaudit.errors import FrontAuditError, UnknownRuleError
from frontaudit.migration import check_directory, check_migration, pages_dir
from frontaudit.profile import ProfileResolver
from frontaudit.quality import assess_project, assess_quality
from frontaudit.rules.models import CHECK_CATEGORIES, Category, Framework

logger = logging.getLogger(__name__)

RULE_ACTIONS = ("list", "get-config", "enable", "disable")


@dataclass
class ToolContext:
    """Shared state for one top-level invocation: config, profile, analyzers."""

    config: AuditConfig = field(default_factory=AuditConfig.load)
    resolver: ProfileResolver = field(default_factory=ProfileResolver)
    project_root: Path | None = None
    _analyzers: dict[Category, RuleAnalyzer] = field(default_factory=dict)

    @property
    def root(self) -> Path:
        return Path(self.project_root or self.config.workspace).resolve()

    def analyzer(self, category: Category | str) -> RuleAnalyzer:
        category = Category(category)
        if category not in self._analyzers:
            self._analyzers[category] = analyzer_for(
                category,
                project_root=self.root,
                resolver=self.resolver,
                config=self.config,
            )
        return self._analyzers[category]

    def resolve_path(self, file_path: str | Path) -> Path:
        path = Path(file_path).expanduser()
        if not path.is_absolute():
            path = self.root / path
        return path


def handle_check(
    category: Category | str,
    file_path: str | None = None,
    *,
    context: ToolContext,
    include_tests: bool | None = None,
) -> dict[str, Any]:
    """Check one file, a directory, or (no path) the whole workspace."""
    analyzer = context.analyzer(category)
    if not file_path:
        return analyzer.analyze_project(include_tests=include_tests).to_dict()

    path = context.resolve_path(file_path)
    if path.is_dir():
        return analyzer.analyze_project(path, include_tests=include_tests).to_dict()

    text = path.read_text(encoding="utf-8")
    return analyzer.analyze(text, path).to_dict()


def handle_check_security(
    file_path: str | None = None, *, context: ToolContext
) -> dict[str, Any]:
    return handle_check(Category.SECURITY, file_path, context=context)


def handle_check_accessibility(
    file_path: str | None = None, *, context: ToolContext
) -> dict[str, Any]:
    return handle_check(Category.ACCESSIBILITY, file_path, context=context)


def handle_check_best_practices(
    file_path: str | None = None, *, context: ToolContext
) -> dict[str, Any]:
    return handle_check(Category.BEST_PRACTICES, file_path, context=context)


def handle_analyze(
    file_path: str | None = None,
    *,
    context: ToolContext,
    include_tests: bool | None = None,
) -> dict[str, Any]:
    """Run every check category.

    A single file yields one merged result; a directory or the workspace
    yields one aggregate per category.
    """
    path = context.resolve_path(file_path) if file_path else None
    if path is not None and not path.exists():
        raise FileNotFoundError(f"No such file or directory: '{path}'")
    if path is not None and path.is_file():
        text = path.read_text(encoding="utf-8")
        merged = merge_results(
            (context.analyzer(c).analyze(text, path) for c in CHECK_CATEGORIES),
            str(path),
        )
        return merged.to_dict()

    return {
        c.value: context.analyzer(c)
        .analyze_project(path, include_tests=include_tests)
        .to_dict()
        for c in CHECK_CATEGORIES
    }


def handle_review_quality(
    file_path: str | None = None,
    *,
    context: ToolContext,
    include_tests: bool | None = None,
) -> dict[str, Any]:
    """Quality metrics for one file, a directory, or the whole workspace."""
    if include_tests is None:
        include_tests = context.config.include_tests
    path = context.resolve_path(file_path) if file_path else context.root
    if path.is_dir():
        return assess_project(
            path, include_tests=include_tests, max_results=context.config.max_results
        ).to_dict()

    text = path.read_text(encoding="utf-8")
    return {"file": str(path), "category": "quality", **assess_quality(text).to_dict()}


def handle_check_migration(
    file_path: str | None = None, *, context: ToolContext
) -> dict[str, Any]:
    """App Router migration readiness for a file, a directory, or the pages dir."""
    if file_path:
        path = context.resolve_path(file_path)
        if path.is_dir():
            return check_directory(path)
        return check_migration(path.read_text(encoding="utf-8"), path).to_dict()

    profile = context.resolver.resolve(context.root)
    directory = pages_dir(context.root)
    if not profile.has_pages_router or directory is None:
        raise FrontAuditError(
            "No pages directory found. This project may already use the App Router "
            "or may not be a Next.js project."
        )
    return check_directory(directory)


def handle_manage_rules(
    category: Category | str,
    action: str,
    rule_id: str | None = None,
    *,
    context: ToolContext,
    framework: Framework | None = None,
) -> dict[str, Any]:
    """List, inspect, enable or disable the rules of a check category."""
    analyzer = context.analyzer(category)

    if action == "list":
        ruleset = analyzer.ruleset(framework)
        return {
            "category": ruleset.category.value,
            "ruleset": ruleset.name,
            "framework": ruleset.framework.value,
            "totalRules": len(ruleset.rules),
            "enabledRules": len(ruleset.enabled_rules),
            "rules": [r.summary() for r in ruleset.rules],
        }

    if action == "get-config":
        return analyzer.ruleset(framework).to_dict()

    if action in ("enable", "disable"):
        if not rule_id:
            return _failure(f"ruleId is required for the {action} action")
        enabled = action == "enable"
        try:
            rule = analyzer.set_rule_enabled(rule_id, enabled, framework)
        except UnknownRuleError as e:
            return _failure(str(e))
        return {
            "success": True,
            "message": f'Rule "{rule_id}" has been {action}d',
            "rule": rule.summary(),
        }

    return _failure(
        f"Invalid action {action!r}. Must be one of: {', '.join(RULE_ACTIONS)}"
    )


def handle_project_info(*, context: ToolContext) -> dict[str, Any]:
    profile = context.resolver.resolve(context.root)
    return {
        "root": str(context.root),
        "description": profile.describe(),
        **profile.to_dict(),
    }


def run_tool(fn: Callable[..., dict[str, Any]], /, **kwargs: Any) -> dict[str, Any]:
    """Invoke a handler, turning expected failures into an error payload."""
    try:
        return fn(**kwargs)
    except (FrontAuditError, OSError, ValueError) as e:
        logger.warning("Tool %s failed: %s", fn.__name__, e)
        return {"isError": True, "error": str(e)}


def _failure(message: str) -> dict[str, Any]:
    return {"success": False, "error": message}
