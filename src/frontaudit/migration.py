"""Pages Router to App Router migration readiness."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from frontaudit.engine.scanner import iter_source_files

logger = logging.getLogger(__name__)

READY = "Ready"
HAS_BLOCKERS = "Has blockers"


@dataclass(frozen=True)
class MigrationCheck:
    pattern: re.Pattern[str]
    message: str
    step: str
    blocker: bool = False
    on_path: bool = False


MIGRATION_CHECKS = (
    MigrationCheck(
        re.compile(r"getServerSideProps|getStaticProps|getInitialProps"),
        "Uses Pages Router data fetching methods",
        "Convert data fetching to Server Components or Server Actions",
    ),
    MigrationCheck(
        re.compile(r"<Head>"),
        "Uses Head component",
        "Replace with Metadata API",
    ),
    MigrationCheck(
        re.compile(r"_app\.|_document\."),
        "Special Pages Router files (_app, _document)",
        "Convert _app to layout.tsx and _document to root layout",
        blocker=True,
        on_path=True,
    ),
    MigrationCheck(
        re.compile(r"useRouter\(\)\.push|useRouter\(\)\.replace"),
        "Uses Pages Router useRouter",
        "Update to App Router useRouter from next/navigation",
    ),
)


@dataclass
class MigrationResult:
    file: str
    blockers: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)

    @property
    def readiness(self) -> str:
        return HAS_BLOCKERS if self.blockers else READY

    @property
    def confidence(self) -> str:
        if self.blockers:
            return "Low"
        return "Medium" if self.warnings else "High"

    @property
    def estimated_effort(self) -> str:
        if len(self.blockers) > 2:
            return "High"
        if len(self.warnings) > 3:
            return "Medium"
        return "Low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "readiness": self.readiness,
            "confidence": self.confidence,
            "blockers": list(self.blockers),
            "warnings": list(self.warnings),
            "migrationSteps": list(self.steps),
            "estimatedEffort": self.estimated_effort,
        }


def check_migration(text: str, file_path: str | Path = "") -> MigrationResult:
    """Find App Router migration blockers and warnings in one file."""
    result = MigrationResult(file=str(file_path))
    for check in MIGRATION_CHECKS:
        subject = Path(file_path).name if check.on_path else text
        if not check.pattern.search(subject):
            continue
        (result.blockers if check.blocker else result.warnings).append(check.message)
        result.steps.append(check.step)
    return result


def pages_dir(root: str | Path) -> Path | None:
    """The Pages Router directory of a project, if it has one."""
    root = Path(root)
    for candidate in (root / "pages", root / "src" / "pages"):
        if candidate.is_dir():
            return candidate
    return None


def check_directory(directory: str | Path) -> dict[str, Any]:
    """Check every source file under a directory; unreadable files are skipped."""
    directory = Path(directory).resolve()
    results: list[MigrationResult] = []
    skipped = 0
    for file_path in iter_source_files(directory):
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", file_path, e)
            skipped += 1
            continue
        results.append(check_migration(text, file_path))

    ready = sum(1 for r in results if r.readiness == READY)
    return {
        "root": str(directory),
        "totalPages": len(results) + skipped,
        "filesSkipped": skipped,
        "results": [r.to_dict() for r in results],
        "summary": {
            "ready": ready,
            "hasBlockers": sum(1 for r in results if r.blockers),
            "overallReadiness": READY if ready == len(results) else "Needs work",
        },
    }
