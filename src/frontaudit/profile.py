"""Framework profile resolution for React / Next.js projects.

Determines which rule set applies to a project, and to an individual file
within it, from ``package.json`` dependencies plus a few directory probes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from frontaudit.rules.models import Framework

logger = logging.getLogger(__name__)

_MANIFEST = "package.json"
_TS_CONFIG = "tsconfig.json"

# Route-segment files that only exist in Next.js
_NEXTJS_SPECIAL_FILES = frozenset(
    {"layout", "page", "loading", "error", "not-found", "template", "route"}
)
_NEXTJS_ROUTER_DIRS = frozenset({"app", "pages"})

_BUNDLERS = (
    ("vite", "vite"),
    ("react-scripts", "cra"),
    ("webpack", "webpack"),
)


@dataclass(frozen=True)
class FrameworkProfile:
    """Resolved framework, router style, bundler and TypeScript usage."""

    framework: Framework = Framework.UNKNOWN
    has_app_router: bool = False
    has_pages_router: bool = False
    bundler: str = "other"
    uses_typescript: bool = False
    react_version: str = ""
    next_version: str = ""

    def describe(self) -> str:
        """Human-readable label, e.g. ``Next.js 14.2.0 with App Router``."""
        if self.framework is Framework.NEXTJS:
            routers = []
            if self.has_app_router:
                routers.append("App Router")
            if self.has_pages_router:
                routers.append("Pages Router")
            version = f" {self.next_version}" if self.next_version else ""
            router = f" with {' and '.join(routers)}" if routers else ""
            return f"Next.js{version}{router}"
        if self.framework is Framework.REACT:
            version = f" {self.react_version}" if self.react_version else ""
            bundler = f" ({self.bundler})" if self.bundler != "other" else ""
            return f"React{version}{bundler}"
        return "Unknown framework"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "framework": self.framework.value,
            "hasAppRouter": self.has_app_router,
            "hasPagesRouter": self.has_pages_router,
            "bundler": self.bundler,
            "usesTypeScript": self.uses_typescript,
        }
        if self.react_version:
            data["reactVersion"] = self.react_version
        if self.next_version:
            data["nextVersion"] = self.next_version
        return data


@dataclass
class ProfileResolver:
    """Resolves and caches framework profiles.

    Construct one per top-level invocation and pass it to the analyzers;
    results are cached for the lifetime of the resolver instance.
    """

    _cache: dict[Path, FrameworkProfile] = field(default_factory=dict)

    def resolve(self, root: str | Path) -> FrameworkProfile:
        """Resolve the profile of the project at ``root``. Never raises."""
        key = Path(root).resolve()
        if key in self._cache:
            return self._cache[key]

        profile = detect_profile(key)
        self._cache[key] = profile
        return profile

    def resolve_for_file(self, file_path: str | Path, root: str | Path) -> Framework:
        return resolve_framework_for_file(file_path, self.resolve(root))

    def clear_cache(self) -> None:
        self._cache.clear()


def detect_profile(root: Path) -> FrameworkProfile:
    """Read the manifest and probe directories. Missing manifest => unknown."""
    deps = _read_dependencies(root)

    if "next" in deps:
        framework = Framework.NEXTJS
    elif "react" in deps:
        framework = Framework.REACT
    else:
        framework = Framework.UNKNOWN

    bundler = "other"
    for package, name in _BUNDLERS:
        if package in deps:
            bundler = name
            break

    has_app_router = has_pages_router = False
    if framework is Framework.NEXTJS:
        has_app_router = (root / "app").is_dir() or (root / "src" / "app").is_dir()
        has_pages_router = (root / "pages").is_dir() or (root / "src" / "pages").is_dir()

    return FrameworkProfile(
        framework=framework,
        has_app_router=has_app_router,
        has_pages_router=has_pages_router,
        bundler=bundler,
        uses_typescript="typescript" in deps or (root / _TS_CONFIG).is_file(),
        react_version=str(deps.get("react", "")),
        next_version=str(deps.get("next", "")),
    )


def resolve_framework_for_file(
    file_path: str | Path,
    profile: FrameworkProfile,
) -> Framework:
    """Framework that governs a single file inside a project."""
    if profile.framework is not Framework.NEXTJS:
        return profile.framework

    path = PurePosixPath(str(file_path).replace("\\", "/"))
    if _NEXTJS_ROUTER_DIRS.intersection(path.parent.parts):
        return Framework.NEXTJS
    if path.suffix in (".ts", ".tsx", ".js", ".jsx") and path.stem in _NEXTJS_SPECIAL_FILES:
        return Framework.NEXTJS
    # Shared components in a Next.js project follow the project framework
    return profile.framework


def _read_dependencies(root: Path) -> dict[str, Any]:
    manifest = root / _MANIFEST
    if not manifest.is_file():
        logger.debug("No %s in %s", _MANIFEST, root)
        return {}

    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Error reading %s: %s", manifest, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring %s: top level is not an object", manifest)
        return {}

    deps: dict[str, Any] = {}
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            deps.update(section)
    return deps
