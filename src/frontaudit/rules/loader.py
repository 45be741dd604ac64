"""Load rule sets from shipped presets and merge user/project overrides."""

from __future__ import annotations

import importlib.resources
import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from frontaudit.config import AuditConfig
from frontaudit.errors import RuleSetNotFoundError, RuleValidationError
from frontaudit.rules.models import (
    Category,
    Detection,
    Framework,
    Rule,
    RuleSet,
    Scope,
    Severity,
)

logger = logging.getLogger(__name__)

_PRESET_PACKAGE = "frontaudit.rules.presets"

_RULESET_FILES = {
    (Category.SECURITY, Framework.NEXTJS): "security-nextjs.json",
    (Category.SECURITY, Framework.REACT): "security-react.json",
    # One accessibility set covers both frameworks
    (Category.ACCESSIBILITY, Framework.NEXTJS): "accessibility.json",
    (Category.ACCESSIBILITY, Framework.REACT): "accessibility.json",
    (Category.BEST_PRACTICES, Framework.NEXTJS): "best-practices-nextjs.json",
    (Category.BEST_PRACTICES, Framework.REACT): "best-practices-react.json",
}

# Older rule files keep their rules under a category-specific key
LEGACY_RULE_KEYS = ("securityRules", "accessibilityRules", "bestPracticeRules")

_OVERRIDE_SUFFIXES = (".json", ".yaml", ".yml")

_DETECTION_FIELDS = {
    "patterns": "patterns",
    "requirePatterns": "require_patterns",
    "requireAbsence": "require_absence",
    "excludePatterns": "exclude_patterns",
    "fileGlobs": "file_globs",
}


def effective_framework(framework: Framework, default: Framework) -> Framework:
    """Map ``unknown`` onto the configured default rule-set framework."""
    if framework is Framework.UNKNOWN:
        return default
    return framework


def ruleset_name(category: Category, framework: Framework) -> str:
    """Stem of the rule file for a resolved (non-unknown) framework."""
    try:
        filename = _RULESET_FILES[(category, framework)]
    except KeyError:
        raise ValueError(
            f"No rule set for category {category.value!r} "
            f"and framework {framework.value!r}"
        ) from None
    return Path(filename).stem


def load_ruleset(
    category: Category,
    framework: Framework,
    *,
    project_root: str | Path | None = None,
    config: AuditConfig | None = None,
) -> RuleSet:
    """Load the shipped rules for a selection and apply override layers.

    Override precedence is shipped < user config dir < project ``.frontaudit/``.
    Configuration problems never raise: a broken layer is logged and skipped,
    and a malformed rule is dropped with a warning.
    """
    config = config or AuditConfig.load()
    framework = effective_framework(framework, config.default_framework)
    name = ruleset_name(category, framework)

    try:
        data = _load_preset(f"{name}.json")
    except (RuleSetNotFoundError, ValueError) as e:
        logger.warning("Failed to load rule set %s: %s", name, e)
        data = {}

    entries = extract_rule_entries(data)
    meta = data.get("meta") if isinstance(data.get("meta"), dict) else {}

    override_dirs = [config.user_rules_dir]
    if project_root is not None:
        override_dirs.append(config.project_override_dir(project_root))

    for directory in override_dirs:
        path = find_override_file(directory, name)
        if path is None:
            continue
        try:
            override = read_rules_file(path)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring override file %s: %s", path, e)
            continue
        override_entries = extract_rule_entries(override)
        logger.debug("Loaded %d override(s) from %s", len(override_entries), path)
        entries = merge_rule_entries(entries, override_entries)

    rules: list[Rule] = []
    for entry in entries:
        try:
            rules.append(parse_rule(entry, default_category=category))
        except RuleValidationError as e:
            logger.warning("Dropping rule from %s: %s", name, e)

    return RuleSet(
        name=name,
        category=category,
        framework=framework,
        rules=tuple(rules),
        version=str(meta.get("version", "")),
    )


def read_rules_file(path: str | Path) -> dict[str, Any]:
    """Parse a JSON or YAML rule file into a mapping."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    return _parse_rules_text(text, yaml_syntax=path.suffix in (".yaml", ".yml"))


def find_override_file(directory: Path, name: str) -> Path | None:
    for suffix in _OVERRIDE_SUFFIXES:
        candidate = directory / f"{name}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def extract_rule_entries(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the raw rule mappings from a parsed rule file."""
    raw = data.get("rules")
    if raw is None:
        for key in LEGACY_RULE_KEYS:
            if key in data:
                raw = data[key]
                break
    if raw is None:
        return []
    if not isinstance(raw, list):
        logger.warning("Rule list must be an array, got %s", type(raw).__name__)
        return []
    return [dict(r) if isinstance(r, dict) else r for r in raw]


def merge_rule_entries(
    base: list[dict[str, Any]],
    overrides: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge override entries into base entries by rule id, override wins.

    A partial override only replaces the keys it names; ``detection`` is
    merged key by key. Overrides with a new id are appended.
    """
    merged = list(base)
    index = {
        e["id"]: i for i, e in enumerate(merged) if isinstance(e, dict) and "id" in e
    }

    for entry in overrides:
        if not isinstance(entry, dict) or not entry.get("id"):
            logger.warning("Skipping override entry without an id: %r", entry)
            continue
        rule_id = entry["id"]
        if rule_id not in index:
            index[rule_id] = len(merged)
            merged.append(dict(entry))
            continue

        current = merged[index[rule_id]]
        updated = {**current, **entry}
        base_detection = current.get("detection")
        override_detection = entry.get("detection")
        if isinstance(base_detection, dict) and isinstance(override_detection, dict):
            updated["detection"] = {**base_detection, **override_detection}
        merged[index[rule_id]] = updated

    return merged


def parse_rule(data: Any, default_category: Category | None = None) -> Rule:
    """Validate one raw rule mapping and build a Rule."""
    if not isinstance(data, dict):
        raise RuleValidationError(f"Rule must be a mapping, got {type(data).__name__}")

    rule_id = data.get("id")
    if not isinstance(rule_id, str) or not rule_id:
        raise RuleValidationError("Missing 'id'")

    for key in ("title", "recommendation"):
        value = data.get(key)
        if not isinstance(value, str) or not value:
            raise RuleValidationError(f"{rule_id}: missing or invalid '{key}'")

    enabled = data.get("enabled", True)
    if not isinstance(enabled, bool):
        raise RuleValidationError(f"{rule_id}: 'enabled' must be boolean")

    severity = _parse_enum(Severity, data.get("severity"), "severity", rule_id)
    category_raw = data.get("category")
    if category_raw is None and default_category is not None:
        category = default_category
    else:
        category = _parse_enum(Category, category_raw, "category", rule_id)
    scope = _parse_enum(Scope, data.get("scope", "code"), "scope", rule_id)

    references = data.get("references", [])
    if not isinstance(references, list):
        raise RuleValidationError(f"{rule_id}: 'references' must be an array")

    return Rule(
        id=rule_id,
        title=data["title"],
        severity=severity,
        category=category,
        recommendation=data["recommendation"],
        detection=_parse_detection(data, rule_id),
        scope=scope,
        enabled=enabled,
        intent=str(data.get("intent", "")),
        references=tuple(str(r) for r in references),
        wcag=str(data.get("wcag", "")),
    )


def validate_ruleset_file(path: str | Path) -> list[str]:
    """Check a rule file and return human-readable problems (empty if valid)."""
    from frontaudit.engine.evaluator import compile_pattern

    try:
        data = read_rules_file(path)
    except (OSError, ValueError) as e:
        return [f"Parse error: {e}"]

    raw = data.get("rules")
    if raw is None:
        raw = next((data[k] for k in LEGACY_RULE_KEYS if k in data), None)
    if raw is None:
        return ["Missing 'rules' array"]
    if not isinstance(raw, list):
        return ["'rules' must be an array"]

    problems: list[str] = []
    seen: set[str] = set()
    for idx, entry in enumerate(raw, start=1):
        try:
            rule = parse_rule(entry)
        except RuleValidationError as e:
            problems.append(f"Rule {idx}: {e}")
            continue

        if rule.id in seen:
            problems.append(f"Rule {idx} ({rule.id}): duplicate id")
        seen.add(rule.id)

        detection = rule.detection
        for pattern in (
            *detection.patterns,
            *detection.require_patterns,
            *detection.require_absence,
            *detection.exclude_patterns,
        ):
            try:
                compile_pattern(pattern)
            except re.error as e:
                problems.append(
                    f"Rule {idx} ({rule.id}): invalid regex pattern {pattern!r}: {e}"
                )
    return problems


def _parse_enum(enum_cls, value, field_name: str, rule_id: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise RuleValidationError(
            f"{rule_id}: invalid {field_name} {value!r}. Must be: {allowed}"
        ) from None


def _parse_detection(data: dict[str, Any], rule_id: str) -> Detection:
    # Simplified rule files put the detection fields on the rule itself
    raw = data.get("detection")
    if raw is None:
        raw = {k: data[k] for k in _DETECTION_FIELDS if k in data}
    if not isinstance(raw, dict):
        raise RuleValidationError(f"{rule_id}: 'detection' must be a mapping")

    kwargs: dict[str, tuple[str, ...]] = {}
    for key, attr in _DETECTION_FIELDS.items():
        values = raw.get(key, [])
        if isinstance(values, str):
            values = [values]
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise RuleValidationError(f"{rule_id}: '{key}' must be an array of strings")
        kwargs[attr] = tuple(values)
    return Detection(**kwargs)


def _parse_rules_text(text: str, yaml_syntax: bool) -> dict[str, Any]:
    if yaml_syntax:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML: {e}") from e
    else:
        data = json.loads(text)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Rule file must be a mapping")
    return data


def _load_preset(filename: str) -> dict[str, Any]:
    pkg = importlib.resources.files(_PRESET_PACKAGE)
    resource = pkg.joinpath(filename)
    if not resource.is_file():
        raise RuleSetNotFoundError(f"Rule set not found: {filename}")
    text = resource.read_text(encoding="utf-8")
    return _parse_rules_text(text, yaml_syntax=False)
