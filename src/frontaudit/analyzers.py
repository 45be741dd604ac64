"""Category analyzers — bind a rule set, the evaluator and the aggregator."""

from __future__ import annotations

import logging
from pathlib import Path

from frontaudit.config import AuditConfig
from frontaudit.engine.aggregator import aggregate
from frontaudit.engine.evaluator import evaluate_rules
from frontaudit.engine.models import AggregateResult, CheckResult
from frontaudit.engine.scanner import scan_project
from frontaudit.errors import UnknownRuleError
from frontaudit.profile import FrameworkProfile, ProfileResolver, resolve_framework_for_file
from frontaudit.rules.loader import effective_framework, load_ruleset, ruleset_name
from frontaudit.rules.models import Category, Framework, Rule, RuleSet
from frontaudit.rules.store import set_rule_enabled

logger = logging.getLogger(__name__)


class RuleAnalyzer:
    """Runs one check category's rules against files or a whole project.

    Rule sets are loaded lazily, once per framework selection, and cached on
    the analyzer. The framework profile comes from the injected resolver.
    """

    category: Category

    def __init__(
        self,
        *,
        project_root: str | Path | None = None,
        resolver: ProfileResolver | None = None,
        config: AuditConfig | None = None,
    ) -> None:
        self.config = config or AuditConfig.load()
        self.project_root = Path(project_root or self.config.workspace).resolve()
        self.resolver = resolver or ProfileResolver()
        self._rulesets: dict[tuple[str, Framework], RuleSet] = {}

    @property
    def profile(self) -> FrameworkProfile:
        return self.resolver.resolve(self.project_root)

    def ruleset(self, framework: Framework | None = None) -> RuleSet:
        """Rule set for a framework (defaults to the project framework)."""
        if framework is None:
            framework = self.profile.framework
        framework = effective_framework(framework, self.config.default_framework)
        key = (ruleset_name(self.category, framework), framework)
        if key not in self._rulesets:
            self._rulesets[key] = load_ruleset(
                self.category,
                framework,
                project_root=self.project_root,
                config=self.config,
            )
            logger.debug(
                "Loaded %d %s rule(s) from %s",
                len(self._rulesets[key].rules),
                self.category.value,
                key[0],
            )
        return self._rulesets[key]

    def analyze(self, text: str, file_path: str | Path) -> CheckResult:
        """Evaluate all enabled rules against one file's text."""
        framework = resolve_framework_for_file(file_path, self.profile)
        ruleset = self.ruleset(framework)
        enabled = ruleset.enabled_rules
        return aggregate(
            evaluate_rules(enabled, text, str(file_path)),
            self.category,
            file_path=str(file_path),
            framework=ruleset.framework.value,
            total_rules=len(enabled),
        )

    def analyze_project(
        self,
        root: str | Path | None = None,
        *,
        include_tests: bool | None = None,
    ) -> AggregateResult:
        """Scan every source file under ``root`` (default: the project root)."""
        if include_tests is None:
            include_tests = self.config.include_tests
        return scan_project(
            root or self.project_root,
            self.analyze,
            category=self.category,
            include_tests=include_tests,
            max_results=self.config.max_results,
        )

    def rules(
        self,
        *,
        enabled_only: bool = False,
        framework: Framework | None = None,
    ) -> tuple[Rule, ...]:
        ruleset = self.ruleset(framework)
        return ruleset.enabled_rules if enabled_only else ruleset.rules

    def get_rule(self, rule_id: str, framework: Framework | None = None) -> Rule:
        rule = self.ruleset(framework).get(rule_id)
        if rule is None:
            raise UnknownRuleError(rule_id)
        return rule

    def set_rule_enabled(
        self,
        rule_id: str,
        enabled: bool,
        framework: Framework | None = None,
    ) -> Rule:
        """Enable or disable a rule in memory and in the project override file."""
        ruleset = self.ruleset(framework)
        updated = set_rule_enabled(
            ruleset,
            rule_id,
            enabled,
            project_root=self.project_root,
            config=self.config,
        )
        # Frameworks sharing the rule file share its override file too
        for key in [k for k in self._rulesets if k[0] == updated.name]:
            del self._rulesets[key]
        self._rulesets[(updated.name, ruleset.framework)] = updated
        logger.info(
            "Rule %s %s in %s", rule_id, "enabled" if enabled else "disabled", updated.name
        )
        return self.get_rule(rule_id, framework)


class SecurityAnalyzer(RuleAnalyzer):
    category = Category.SECURITY


class AccessibilityAnalyzer(RuleAnalyzer):
    category = Category.ACCESSIBILITY


class BestPracticesAnalyzer(RuleAnalyzer):
    category = Category.BEST_PRACTICES


ANALYZERS: dict[Category, type[RuleAnalyzer]] = {
    Category.SECURITY: SecurityAnalyzer,
    Category.ACCESSIBILITY: AccessibilityAnalyzer,
    Category.BEST_PRACTICES: BestPracticesAnalyzer,
}


def analyzer_for(category: Category | str, **kwargs) -> RuleAnalyzer:
    """Build the analyzer for a check category."""
    category = Category(category)
    try:
        cls = ANALYZERS[category]
    except KeyError:
        raise ValueError(f"{category.value!r} is not a check category") from None
    return cls(**kwargs)
