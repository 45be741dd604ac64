"""Tests for the category analyzers."""

from __future__ import annotations

import pytest

from frontaudit.analyzers import (
    AccessibilityAnalyzer,
    BestPracticesAnalyzer,
    SecurityAnalyzer,
    analyzer_for,
)
from frontaudit.errors import UnknownRuleError
from frontaudit.profile import ProfileResolver
from frontaudit.rules.models import Category, Framework

CLIENT_COMPONENT = """'use client'
import { useState } from 'react';

export default function Widget() {
  const [html] = useState(process.env.API_KEY);
  return <div dangerouslySetInnerHTML={{ __html: html }} />;
}
"""


@pytest.fixture
def security(nextjs_project, config):
    return SecurityAnalyzer(project_root=nextjs_project, config=config)


def test_analyzer_for():
    assert isinstance(analyzer_for("security"), SecurityAnalyzer)
    assert isinstance(analyzer_for(Category.ACCESSIBILITY), AccessibilityAnalyzer)
    assert isinstance(analyzer_for("best-practices"), BestPracticesAnalyzer)
    with pytest.raises(ValueError):
        analyzer_for(Category.SEO)
    with pytest.raises(ValueError):
        analyzer_for("style")


def test_ruleset_follows_project_framework(security, react_project, config):
    assert security.ruleset().name == "security-nextjs"
    react = SecurityAnalyzer(project_root=react_project, config=config)
    assert react.ruleset().name == "security-react"


def test_unknown_project_uses_default_framework(tmp_path, config):
    analyzer = BestPracticesAnalyzer(project_root=tmp_path, config=config)
    assert analyzer.ruleset().name == "best-practices-nextjs"

    config.default_framework = Framework.REACT
    analyzer = BestPracticesAnalyzer(project_root=tmp_path, config=config)
    assert analyzer.ruleset().name == "best-practices-react"


def test_analyze_file(security, nextjs_project):
    result = security.analyze(CLIENT_COMPONENT, nextjs_project / "app" / "Widget.tsx")

    rule_ids = {i.rule_id for i in result.issues}
    assert {"no-env-variable-exposure", "no-dangerously-set-inner-html"} <= rule_ids
    assert result.framework == "nextjs"
    assert result.score is not None and result.score < 100


def test_disabled_rule_is_silent(security, nextjs_project):
    path = nextjs_project / "app" / "Widget.tsx"
    security.set_rule_enabled("no-env-variable-exposure", False)

    result = security.analyze(CLIENT_COMPONENT, path)
    assert "no-env-variable-exposure" not in {i.rule_id for i in result.issues}

    # A fresh analyzer picks up the persisted override
    fresh = SecurityAnalyzer(project_root=nextjs_project, config=security.config)
    assert fresh.get_rule("no-env-variable-exposure").enabled is False
    assert "no-env-variable-exposure" not in {
        r.id for r in fresh.rules(enabled_only=True)
    }


def test_get_rule_unknown(security):
    with pytest.raises(UnknownRuleError):
        security.get_rule("nope")
    with pytest.raises(UnknownRuleError):
        security.set_rule_enabled("nope", False)


def test_accessibility_shared_and_unscored(nextjs_project, config):
    analyzer = AccessibilityAnalyzer(project_root=nextjs_project, config=config)
    assert analyzer.ruleset(Framework.REACT).name == analyzer.ruleset(Framework.NEXTJS).name

    result = analyzer.analyze("<img src='x.jpg' />", nextjs_project / "app" / "page.tsx")
    assert [i.rule_id for i in result.issues] == ["img-alt-text"]
    assert result.score is None


def test_shared_resolver(nextjs_project, config):
    resolver = ProfileResolver()
    a = SecurityAnalyzer(project_root=nextjs_project, resolver=resolver, config=config)
    b = AccessibilityAnalyzer(project_root=nextjs_project, resolver=resolver, config=config)
    assert a.profile is b.profile


def test_analyze_project(security, nextjs_project):
    (nextjs_project / "app" / "Widget.tsx").write_text(CLIENT_COMPONENT, encoding="utf-8")
    (nextjs_project / "app" / "Widget.test.tsx").write_text(CLIENT_COMPONENT, encoding="utf-8")
    (nextjs_project / "app" / "clean.ts").write_text("export const x = 1;\n", encoding="utf-8")

    result = security.analyze_project()
    assert result.total_files_scanned == 2
    assert result.files_with_issues == 1
    assert result.severity_counts["critical"] >= 1

    with_tests = security.analyze_project(include_tests=True)
    assert with_tests.total_files_scanned == 3


def test_shared_rule_file_reports_requested_framework(react_project, config):
    analyzer = AccessibilityAnalyzer(project_root=react_project, config=config)
    assert analyzer.ruleset(Framework.NEXTJS).framework is Framework.NEXTJS
    assert analyzer.ruleset().framework is Framework.REACT

    result = analyzer.analyze("<img src='x.jpg' />", react_project / "src" / "App.tsx")
    assert result.framework == "react"


def test_toggle_applies_to_every_framework_of_shared_file(react_project, config):
    analyzer = AccessibilityAnalyzer(project_root=react_project, config=config)
    analyzer.ruleset()
    analyzer.set_rule_enabled("img-alt-text", False, Framework.NEXTJS)

    assert not analyzer.get_rule("img-alt-text").enabled
    assert not analyzer.get_rule("img-alt-text", Framework.NEXTJS).enabled
