"""Exception hierarchy shared across frontaudit."""

from __future__ import annotations


class FrontAuditError(Exception):
    """Base class for all frontaudit errors."""


class RuleValidationError(FrontAuditError, ValueError):
    """A rule definition is malformed or outside the closed vocabularies."""


class UnknownRuleError(FrontAuditError, LookupError):
    """No rule with the requested id exists in the active rule set."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f'Rule "{rule_id}" not found')
        self.rule_id = rule_id

    def __str__(self) -> str:
        return self.args[0]


class RuleSetNotFoundError(FrontAuditError, FileNotFoundError):
    """A shipped rule set file could not be located."""


class ConfigError(FrontAuditError, ValueError):
    """An environment setting holds a value outside its allowed range."""
