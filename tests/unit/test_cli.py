"""Tests for CLI commands using Click's CliRunner."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from frontaudit.cli import main


@pytest.fixture
def project(nextjs_project):
    (nextjs_project / "app" / "client.tsx").write_text(
        "'use client'\nconst key = process.env.API_KEY;\n", encoding="utf-8"
    )
    (nextjs_project / "app" / "clean.tsx").write_text(
        "export const x = 1;\n", encoding="utf-8"
    )
    return nextjs_project


def _invoke(*args):
    runner = CliRunner()
    return runner.invoke(main, list(args))


def test_main_help():
    result = _invoke("--help")
    assert result.exit_code == 0
    assert "frontaudit" in result.output
    assert "check" in result.output
    assert "rules" in result.output


def test_main_version():
    result = _invoke("--version")
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_check_help():
    result = _invoke("check", "--help")
    assert result.exit_code == 0
    assert "--include-tests" in result.output


def test_check_critical_exits_nonzero(project):
    result = _invoke("--root", str(project), "check", "security", "--json")
    assert result.exit_code == 1
    report = json.loads(result.stdout)
    assert report["filesWithIssues"] == 1
    assert report["severityCounts"]["critical"] == 1


def test_check_clean_file(project):
    result = _invoke(
        "--root", str(project), "check", "security", str(project / "app" / "clean.tsx"), "--json"
    )
    assert result.exit_code == 0
    assert json.loads(result.stdout)["issues"] == []


def test_check_all_json(project):
    result = _invoke("--root", str(project), "check", "--json")
    report = json.loads(result.stdout)
    assert set(report) == {"security", "accessibility", "best-practices"}


def test_check_table_output(project):
    result = _invoke("--root", str(project), "check", "security")
    assert result.exit_code == 1
    assert "1 critical issue(s)" in result.output


def test_rules_list_json(project):
    result = _invoke("--root", str(project), "rules", "list", "security", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["ruleset"] == "security-nextjs"


def test_rules_list_framework_option(project):
    result = _invoke(
        "--root", str(project), "rules", "list", "security", "--framework", "react", "--json"
    )
    assert json.loads(result.stdout)["ruleset"] == "security-react"


def test_rules_disable_then_check(project):
    result = _invoke(
        "--root", str(project), "rules", "disable", "security", "no-env-variable-exposure"
    )
    assert result.exit_code == 0
    assert (project / ".frontaudit" / "security-nextjs.json").is_file()

    result = _invoke("--root", str(project), "check", "security", "--json")
    assert result.exit_code == 0


def test_rules_enable_unknown(project):
    result = _invoke("--root", str(project), "rules", "enable", "security", "nope")
    assert result.exit_code == 1
    assert 'Rule "nope" not found' in result.output


def test_rules_validate(tmp_path):
    good = tmp_path / "good.json"
    good.write_text(
        json.dumps(
            {
                "rules": [
                    {
                        "id": "a",
                        "title": "A",
                        "severity": "low",
                        "category": "security",
                        "recommendation": "r",
                        "detection": {"patterns": ["a"]},
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"rules": [{"id": "b"}]}), encoding="utf-8")

    assert _invoke("rules", "validate", str(good)).exit_code == 0
    result = _invoke("rules", "validate", str(good), str(bad))
    assert result.exit_code == 1
    assert "1 invalid rule file(s)" in result.output


def test_info_json(project):
    result = _invoke("--root", str(project), "info", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["framework"] == "nextjs"


def test_invalid_env_setting_reported(project, monkeypatch):
    monkeypatch.setenv("FRONTAUDIT_MAX_RESULTS", "500")
    result = _invoke("--root", str(project), "info")
    assert result.exit_code == 1
    assert "FRONTAUDIT_MAX_RESULTS" in result.output
    assert "Traceback" not in result.output


def test_quality_json(project):
    result = _invoke("--root", str(project), "quality", "--json")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["totalFilesScanned"] == 2


def test_migration_blockers_exit_nonzero(project):
    pages = project / "pages"
    pages.mkdir()
    (pages / "_document.tsx").write_text("export default 1;", encoding="utf-8")

    result = _invoke("--root", str(project), "migration")
    assert result.exit_code == 1
    assert "blocker" in result.output


def test_migration_without_pages_dir(project):
    result = _invoke("--root", str(project), "migration")
    assert result.exit_code == 1
    assert "No pages directory" in result.output
