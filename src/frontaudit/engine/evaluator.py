"""Pattern evaluator — runs one rule's detection spec against a body of text.

Detection is textual: rules are regexes over raw source, and the
``requirePatterns`` / ``requireAbsence`` qualifiers are whole-text presence
checks. No syntax tree is built.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable

from frontaudit.engine.models import RuleResult, Violation
from frontaudit.rules.models import Rule, Scope

logger = logging.getLogger(__name__)

# Rule files are written in JavaScript regex dialect
_JS_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")
_JS_NAMED_BACKREF = re.compile(r"\\k<([A-Za-z_]\w*)>")

_GLOB_TOKEN = re.compile(r"(\*\*/|\*\*|\*|\?)")
_GLOB_REPLACEMENTS = {
    "**/": "(?:.*/)?",
    "**": ".*",
    "*": "[^/]*",
    "?": "[^/]",
}

_SNIPPET_MAX = 60


def translate_pattern(pattern: str) -> str:
    """Rewrite JS-only regex syntax into its Python equivalent."""
    pattern = _JS_NAMED_GROUP.sub("(?P<", pattern)
    return _JS_NAMED_BACKREF.sub(r"(?P=\1)", pattern)


@functools.lru_cache(maxsize=1024)
def compile_pattern(pattern: str, multiline: bool = False) -> re.Pattern[str]:
    """Compile a rule pattern. Raises re.error for malformed patterns."""
    flags = re.MULTILINE if multiline else 0
    return re.compile(translate_pattern(pattern), flags)


@functools.lru_cache(maxsize=256)
def _glob_regex(glob: str) -> re.Pattern[str]:
    parts = []
    for token in _GLOB_TOKEN.split(glob):
        if token in _GLOB_REPLACEMENTS:
            parts.append(_GLOB_REPLACEMENTS[token])
        elif token:
            parts.append(re.escape(token))
    return re.compile("^" + "".join(parts) + "$")


def matches_glob(file_path: str, glob: str) -> bool:
    """Match a path against a rule file glob.

    Globs with wildcards are anchored against the whole path (or the basename
    when the glob has no directory part). Plain globs are substring tests.
    """
    path = file_path.replace("\\", "/")
    glob = glob.replace("\\", "/")

    if "*" not in glob and "?" not in glob:
        return glob in path

    regex = _glob_regex(glob)
    if regex.match(path):
        return True
    if "/" not in glob:
        return regex.match(path.rsplit("/", 1)[-1]) is not None
    return False


def locate(text: str, offset: int) -> tuple[int, int]:
    """1-based (line, column) of a character offset."""
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def evaluate(rule: Rule, text: str, file_path: str) -> list[Violation]:
    """Run one rule against one text and return its violations in match order."""
    if not rule.enabled:
        return []

    detection = rule.detection

    if rule.scope is Scope.CONFIG and detection.file_globs:
        if not any(matches_glob(file_path, g) for g in detection.file_globs):
            return []

    if _any_match(rule, detection.exclude_patterns, text):
        return []

    # Whole-text qualifiers: evaluated on the first raw match, then reused
    required: bool | None = None
    absent_blocked: bool | None = None

    violations: list[Violation] = []
    for pattern in detection.patterns:
        try:
            regex = compile_pattern(pattern, multiline=True)
        except re.error as e:
            logger.warning(
                "Invalid regex pattern in rule %s: %r (%s)", rule.id, pattern, e
            )
            continue

        for match in regex.finditer(text):
            if detection.require_patterns:
                if required is None:
                    required = _any_match(rule, detection.require_patterns, text)
                if not required:
                    continue

            if detection.require_absence:
                if absent_blocked is None:
                    absent_blocked = _any_match(rule, detection.require_absence, text)
                if absent_blocked:
                    continue

            line, column = locate(text, match.start())
            violations.append(
                Violation(
                    line=line,
                    column=column,
                    message=_describe_match(match),
                    rule_id=rule.id,
                )
            )

    return violations


def evaluate_rules(
    rules: Iterable[Rule],
    text: str,
    file_path: str,
) -> list[RuleResult]:
    """Evaluate every enabled rule; disabled rules are skipped entirely."""
    return [
        RuleResult(rule=rule, violations=evaluate(rule, text, file_path))
        for rule in rules
        if rule.enabled
    ]


def _any_match(rule: Rule, patterns: Iterable[str], text: str) -> bool:
    for pattern in patterns:
        try:
            regex = compile_pattern(pattern)
        except re.error as e:
            logger.warning(
                "Invalid regex pattern in rule %s: %r (%s)", rule.id, pattern, e
            )
            continue
        if regex.search(text):
            return True
    return False


def _describe_match(match: re.Match[str]) -> str:
    snippet = match.group(0).strip().splitlines()[0] if match.group(0).strip() else ""
    if len(snippet) > _SNIPPET_MAX:
        snippet = snippet[: _SNIPPET_MAX - 3] + "..."
    if not snippet:
        return "pattern matched"
    return f"found `{snippet}`"
