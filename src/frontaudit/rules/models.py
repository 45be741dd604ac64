"""Rule data models — immutable dataclasses used across the entire codebase."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class Severity(enum.Enum):
    """Rule severity, ordered critical > high > medium > low."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def issue_type(self) -> str:
        """Reported issue level: error, warning or info."""
        if self is Severity.CRITICAL:
            return "error"
        if self is Severity.HIGH:
            return "warning"
        return "info"


_SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


class Category(enum.Enum):
    """What a rule checks for."""

    SECURITY = "security"
    ACCESSIBILITY = "accessibility"
    BEST_PRACTICES = "best-practices"
    PERFORMANCE = "performance"
    SEO = "seo"


# Categories that own a rule set and can be checked directly
CHECK_CATEGORIES = (
    Category.SECURITY,
    Category.ACCESSIBILITY,
    Category.BEST_PRACTICES,
)


class Scope(enum.Enum):
    """Where a rule applies. ``config`` rules are restricted by file globs."""

    CODE = "code"
    COMPONENT = "component"
    FUNCTION = "function"
    CONFIG = "config"
    PROJECT = "project"


class Framework(enum.Enum):
    """Front-end framework a project or file belongs to."""

    NEXTJS = "nextjs"
    REACT = "react"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Detection:
    """Regex-based conditions deciding whether and where a rule fires."""

    patterns: tuple[str, ...] = ()
    require_patterns: tuple[str, ...] = ()
    require_absence: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    file_globs: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, list[str]]:
        data: dict[str, list[str]] = {"patterns": list(self.patterns)}
        if self.require_patterns:
            data["requirePatterns"] = list(self.require_patterns)
        if self.require_absence:
            data["requireAbsence"] = list(self.require_absence)
        if self.exclude_patterns:
            data["excludePatterns"] = list(self.exclude_patterns)
        if self.file_globs:
            data["fileGlobs"] = list(self.file_globs)
        return data


@dataclass(frozen=True)
class Rule:
    """A named, severity-tagged detection spec plus a fix recommendation."""

    id: str
    title: str
    severity: Severity
    category: Category
    recommendation: str
    detection: Detection = field(default_factory=Detection)
    scope: Scope = Scope.CODE
    enabled: bool = True
    intent: str = ""
    references: tuple[str, ...] = ()
    wcag: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "category": self.category.value,
            "scope": self.scope.value,
            "enabled": self.enabled,
            "detection": self.detection.to_dict(),
            "recommendation": self.recommendation,
        }
        if self.intent:
            data["intent"] = self.intent
        if self.references:
            data["references"] = list(self.references)
        if self.wcag:
            data["wcag"] = self.wcag
        return data

    def summary(self) -> dict[str, Any]:
        """Compact listing form used by rule management."""
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "category": self.category.value,
            "enabled": self.enabled,
            "intent": self.intent,
        }


@dataclass(frozen=True)
class RuleSet:
    """The rules loaded for one {category x framework} selection."""

    name: str
    category: Category
    framework: Framework
    rules: tuple[Rule, ...] = ()
    version: str = ""

    @property
    def enabled_rules(self) -> tuple[Rule, ...]:
        return tuple(r for r in self.rules if r.enabled)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": {
                "name": self.name,
                "category": self.category.value,
                "framework": self.framework.value,
                "version": self.version,
            },
            "rules": [r.to_dict() for r in self.rules],
        }
