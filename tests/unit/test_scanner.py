"""Tests for the project scanner."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from frontaudit.engine.aggregator import aggregate
from frontaudit.engine.evaluator import evaluate_rules
from frontaudit.engine.scanner import is_test_file, iter_source_files, scan_project
from frontaudit.rules.models import Category, Severity


def _write(root: Path, relpath: str, text: str = "") -> Path:
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _evaluator(rules):
    def _evaluate(text: str, file_path: str):
        return aggregate(
            evaluate_rules(rules, text, file_path), Category.SECURITY, file_path=file_path
        )

    return _evaluate


class TestIterSourceFiles:
    def test_skip_dirs_and_extensions(self, tmp_path):
        _write(tmp_path, "src/App.tsx")
        _write(tmp_path, "src/util.js")
        _write(tmp_path, "src/styles.css")
        _write(tmp_path, "node_modules/lib/index.js")
        _write(tmp_path, ".next/server/page.js")
        _write(tmp_path, "dist/bundle.js")
        _write(tmp_path, "out/index.js")

        found = [p.relative_to(tmp_path).as_posix() for p in iter_source_files(tmp_path)]
        assert found == ["src/App.tsx", "src/util.js"]

    def test_test_files_excluded_by_default(self, tmp_path):
        _write(tmp_path, "Button.tsx")
        _write(tmp_path, "Button.test.tsx")
        _write(tmp_path, "api.spec.ts")

        assert [p.name for p in iter_source_files(tmp_path)] == ["Button.tsx"]
        assert len(list(iter_source_files(tmp_path, include_tests=True))) == 3

    def test_sorted_order(self, tmp_path):
        for name in ("b/z.ts", "a/y.ts", "c.ts", "a/x.ts"):
            _write(tmp_path, name)
        found = [p.relative_to(tmp_path).as_posix() for p in iter_source_files(tmp_path)]
        assert found == ["c.ts", "a/x.ts", "a/y.ts", "b/z.ts"]

    def test_is_test_file(self):
        assert is_test_file("a.test.js")
        assert is_test_file("a.spec.tsx")
        assert not is_test_file("contest.ts")


class TestScanProject:
    def test_counts_and_results(self, tmp_path, make_rule):
        _write(tmp_path, "a.ts", "eval(x)\neval(y)")
        _write(tmp_path, "b.ts", "const ok = 1;")
        _write(tmp_path, "c.ts", "eval(z)")
        rule = make_rule("no-eval", patterns=("eval\\(",), severity=Severity.CRITICAL)

        result = scan_project(tmp_path, _evaluator([rule]), category=Category.SECURITY)

        assert result.total_files_scanned == 3
        assert result.files_with_issues == 2
        assert result.total_violations == 3
        assert result.severity_counts["critical"] == 3
        assert [Path(r.file).name for r in result.results] == ["a.ts", "c.ts"]
        assert result.summary.startswith(
            "Found 3 security violation(s) across 2 file(s) (3 scanned)"
        )

    def test_results_capped_counters_complete(self, tmp_path, make_rule):
        for i in range(55):
            _write(tmp_path, f"f{i:02d}.ts", "eval(x)")
        rule = make_rule("no-eval", patterns=("eval\\(",), severity=Severity.HIGH)

        result = scan_project(tmp_path, _evaluator([rule]), category=Category.SECURITY)

        assert len(result.results) == 50
        assert result.files_with_issues == 55
        assert result.total_violations == 55
        assert result.severity_counts["high"] == 55
        assert "Showing the first 50 files" in result.summary

    def test_custom_cap(self, tmp_path, make_rule):
        for i in range(5):
            _write(tmp_path, f"f{i}.ts", "eval(x)")
        rule = make_rule(patterns=("eval\\(",))

        result = scan_project(
            tmp_path, _evaluator([rule]), category=Category.SECURITY, max_results=2
        )
        assert len(result.results) == 2
        assert result.files_with_issues == 5

    @pytest.mark.parametrize("limit", [0, -1, 51, 100])
    def test_cap_outside_range_rejected(self, tmp_path, limit):
        with pytest.raises(ValueError, match="max_results"):
            scan_project(
                tmp_path, _evaluator([]), category=Category.SECURITY, max_results=limit
            )

    def test_duration_reported(self, tmp_path):
        result = scan_project(tmp_path, _evaluator([]), category=Category.SECURITY)
        assert result.to_dict()["duration"] >= 0

    def test_unreadable_file_skipped(self, tmp_path, make_rule, caplog):
        _write(tmp_path, "a.ts", "eval(x)")
        (tmp_path / "b.ts").write_bytes(b"\xff\xfe\x00bad")
        _write(tmp_path, "c.ts", "eval(x)")
        rule = make_rule(patterns=("eval\\(",))

        with caplog.at_level(logging.WARNING, logger="frontaudit.engine.scanner"):
            result = scan_project(tmp_path, _evaluator([rule]), category=Category.SECURITY)

        assert result.total_files_scanned == 3
        assert result.files_skipped == 1
        assert result.files_with_issues == 2
        assert "b.ts" in caplog.text
        assert "Skipped 1 unreadable file(s)" in result.summary

    def test_evaluator_failure_skips_file(self, tmp_path):
        _write(tmp_path, "a.ts", "x")
        _write(tmp_path, "b.ts", "y")

        def _boom(text, file_path):
            if file_path.endswith("a.ts"):
                raise RuntimeError("boom")
            return aggregate([], Category.SECURITY, file_path=file_path)

        result = scan_project(tmp_path, _boom, category=Category.SECURITY)
        assert result.files_skipped == 1
        assert result.total_files_scanned == 2

    def test_empty_tree(self, tmp_path):
        result = scan_project(tmp_path, _evaluator([]), category=Category.SECURITY)
        assert result.total_files_scanned == 0
        assert result.results == []
        assert result.to_dict()["severityCounts"] == {
            "critical": 0,
            "high": 0,
            "medium": 0,
            "low": 0,
        }
