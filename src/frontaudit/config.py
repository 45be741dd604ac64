"""Global configuration — XDG paths, env vars, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from frontaudit.engine.scanner import MAX_RESULTS
from frontaudit.errors import ConfigError
from frontaudit.rules.models import Framework

_TRUTHY = {"1", "true", "yes", "on"}

# "unknown" would select no rule set at all
_DEFAULT_FRAMEWORKS = (Framework.NEXTJS, Framework.REACT)


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "frontaudit"
    return Path.home() / ".config" / "frontaudit"


def _default_workspace() -> Path:
    return Path.cwd()


@dataclass
class AuditConfig:
    """Application-wide configuration."""

    workspace: Path = field(default_factory=_default_workspace)
    config_dir: Path = field(default_factory=_default_config_dir)
    default_framework: Framework = Framework.NEXTJS
    max_results: int = MAX_RESULTS
    include_tests: bool = False
    project_override_dirname: str = ".frontaudit"

    @property
    def user_rules_dir(self) -> Path:
        return self.config_dir / "rules"

    def project_override_dir(self, project_root: str | Path) -> Path:
        return Path(project_root) / self.project_override_dirname

    @classmethod
    def load(cls) -> AuditConfig:
        """Load config from environment variables with XDG defaults.

        Raises ConfigError when a variable holds a value outside its range.
        """
        config = cls()

        env_workspace = os.environ.get("FRONTAUDIT_WORKSPACE")
        if env_workspace:
            config.workspace = Path(env_workspace).expanduser()

        env_framework = os.environ.get("FRONTAUDIT_DEFAULT_FRAMEWORK")
        if env_framework:
            config.default_framework = _parse_framework(env_framework)

        env_max = os.environ.get("FRONTAUDIT_MAX_RESULTS")
        if env_max:
            config.max_results = _parse_max_results(env_max)

        env_tests = os.environ.get("FRONTAUDIT_INCLUDE_TESTS")
        if env_tests:
            config.include_tests = env_tests.strip().lower() in _TRUTHY

        return config


def _parse_framework(value: str) -> Framework:
    allowed = ", ".join(f.value for f in _DEFAULT_FRAMEWORKS)
    try:
        framework = Framework(value.strip().lower())
    except ValueError:
        framework = None
    if framework not in _DEFAULT_FRAMEWORKS:
        raise ConfigError(
            f"FRONTAUDIT_DEFAULT_FRAMEWORK must be one of: {allowed} (got {value!r})"
        )
    return framework


def _parse_max_results(value: str) -> int:
    try:
        limit = int(value)
    except ValueError:
        limit = 0
    if not 1 <= limit <= MAX_RESULTS:
        raise ConfigError(
            f"FRONTAUDIT_MAX_RESULTS must be an integer between 1 and {MAX_RESULTS} "
            f"(got {value!r})"
        )
    return limit
