"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from frontaudit.config import AuditConfig
from frontaudit.rules.models import Category, Detection, Rule, Scope, Severity

_ENV_VARS = (
    "FRONTAUDIT_WORKSPACE",
    "FRONTAUDIT_DEFAULT_FRAMEWORK",
    "FRONTAUDIT_MAX_RESULTS",
    "FRONTAUDIT_INCLUDE_TESTS",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path_factory: pytest.TempPathFactory, monkeypatch) -> None:
    """Keep user-level overrides and env settings out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("config")


@pytest.fixture
def config(tmp_path: Path, config_dir: Path) -> AuditConfig:
    return AuditConfig(workspace=tmp_path, config_dir=config_dir)


def _write_manifest(root: Path, dependencies: dict, dev: dict | None = None) -> None:
    data = {"name": "app", "dependencies": dependencies}
    if dev:
        data["devDependencies"] = dev
    (root / "package.json").write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def write_manifest() -> Callable[..., None]:
    return _write_manifest


@pytest.fixture
def nextjs_project(tmp_path: Path) -> Path:
    _write_manifest(tmp_path, {"next": "14.2.0", "react": "18.2.0"})
    (tmp_path / "app").mkdir()
    return tmp_path


@pytest.fixture
def react_project(tmp_path: Path) -> Path:
    _write_manifest(tmp_path, {"react": "18.2.0"}, dev={"vite": "5.0.0"})
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def make_rule() -> Callable[..., Rule]:
    def _make_rule(
        rule_id: str = "test-rule",
        patterns: tuple[str, ...] = ("console\\.log",),
        severity: Severity = Severity.MEDIUM,
        category: Category = Category.SECURITY,
        **kwargs,
    ) -> Rule:
        detection_keys = (
            "require_patterns",
            "require_absence",
            "exclude_patterns",
            "file_globs",
        )
        detection = Detection(
            patterns=tuple(patterns),
            **{k: tuple(kwargs.pop(k)) for k in detection_keys if k in kwargs},
        )
        return Rule(
            id=rule_id,
            title=kwargs.pop("title", "Test rule"),
            severity=severity,
            category=category,
            recommendation=kwargs.pop("recommendation", "Fix it."),
            detection=detection,
            scope=kwargs.pop("scope", Scope.CODE),
            **kwargs,
        )

    return _make_rule
