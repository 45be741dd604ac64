"""Tests for framework profile resolution."""

from __future__ import annotations

import logging

from frontaudit.profile import (
    FrameworkProfile,
    ProfileResolver,
    detect_profile,
    resolve_framework_for_file,
)
from frontaudit.rules.models import Framework


class TestDetectProfile:
    def test_nextjs_app_router(self, nextjs_project):
        profile = detect_profile(nextjs_project)
        assert profile.framework is Framework.NEXTJS
        assert profile.has_app_router
        assert not profile.has_pages_router
        assert profile.next_version == "14.2.0"
        assert profile.describe() == "Next.js 14.2.0 with App Router"

    def test_nextjs_src_pages_router(self, tmp_path, write_manifest):
        write_manifest(tmp_path, {"next": "13.0.0", "react": "18.2.0"})
        (tmp_path / "src" / "pages").mkdir(parents=True)
        profile = detect_profile(tmp_path)
        assert profile.has_pages_router
        assert not profile.has_app_router

    def test_react_vite(self, react_project):
        profile = detect_profile(react_project)
        assert profile.framework is Framework.REACT
        assert profile.bundler == "vite"
        assert profile.describe() == "React 18.2.0 (vite)"
        assert not profile.has_app_router

    def test_dev_dependency_counts(self, tmp_path, write_manifest):
        write_manifest(tmp_path, {}, dev={"react": "18.0.0", "typescript": "5.4.0"})
        profile = detect_profile(tmp_path)
        assert profile.framework is Framework.REACT
        assert profile.uses_typescript

    def test_tsconfig_means_typescript(self, react_project):
        (react_project / "tsconfig.json").write_text("{}", encoding="utf-8")
        assert detect_profile(react_project).uses_typescript

    def test_cra_bundler(self, tmp_path, write_manifest):
        write_manifest(tmp_path, {"react": "17.0.0", "react-scripts": "5.0.0"})
        assert detect_profile(tmp_path).bundler == "cra"

    def test_missing_manifest(self, tmp_path):
        profile = detect_profile(tmp_path)
        assert profile.framework is Framework.UNKNOWN
        assert profile.describe() == "Unknown framework"

    def test_corrupt_manifest(self, tmp_path, caplog):
        (tmp_path / "package.json").write_text("{oops", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="frontaudit.profile"):
            profile = detect_profile(tmp_path)
        assert profile.framework is Framework.UNKNOWN
        assert "package.json" in caplog.text

    def test_to_dict(self, nextjs_project):
        data = detect_profile(nextjs_project).to_dict()
        assert data["framework"] == "nextjs"
        assert data["hasAppRouter"] is True
        assert data["nextVersion"] == "14.2.0"


class TestFileFramework:
    def test_non_nextjs_project(self):
        profile = FrameworkProfile(framework=Framework.REACT)
        assert resolve_framework_for_file("/p/app/page.tsx", profile) is Framework.REACT

    def test_nextjs_router_file(self):
        profile = FrameworkProfile(framework=Framework.NEXTJS, has_app_router=True)
        assert resolve_framework_for_file("/p/app/users/page.tsx", profile) is Framework.NEXTJS
        assert resolve_framework_for_file("/p/components/layout.tsx", profile) is Framework.NEXTJS

    def test_shared_component_follows_project(self):
        profile = FrameworkProfile(framework=Framework.NEXTJS)
        assert resolve_framework_for_file("/p/components/Button.tsx", profile) is Framework.NEXTJS


class TestProfileResolver:
    def test_cached_per_root(self, nextjs_project, write_manifest):
        resolver = ProfileResolver()
        first = resolver.resolve(nextjs_project)

        # Changing the manifest is invisible until the cache is cleared
        write_manifest(nextjs_project, {"react": "18.2.0"})
        assert resolver.resolve(nextjs_project) is first

        resolver.clear_cache()
        assert resolver.resolve(nextjs_project).framework is Framework.REACT

    def test_instances_are_independent(self, nextjs_project, write_manifest):
        a = ProfileResolver()
        a.resolve(nextjs_project)
        write_manifest(nextjs_project, {"react": "18.2.0"})
        assert ProfileResolver().resolve(nextjs_project).framework is Framework.REACT

    def test_resolve_for_file(self, nextjs_project):
        resolver = ProfileResolver()
        framework = resolver.resolve_for_file(nextjs_project / "app" / "page.tsx", nextjs_project)
        assert framework is Framework.NEXTJS
