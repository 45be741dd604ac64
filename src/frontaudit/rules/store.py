"""Rule mutation — enable/disable rules and persist them as project overrides."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from frontaudit.config import AuditConfig
from frontaudit.errors import UnknownRuleError
from frontaudit.rules.loader import (
    LEGACY_RULE_KEYS,
    extract_rule_entries,
    find_override_file,
    merge_rule_entries,
    read_rules_file,
)
from frontaudit.rules.models import RuleSet

logger = logging.getLogger(__name__)


def set_rule_enabled(
    ruleset: RuleSet,
    rule_id: str,
    enabled: bool,
    *,
    project_root: str | Path,
    config: AuditConfig | None = None,
) -> RuleSet:
    """Return a new RuleSet with the rule toggled, and persist the change.

    Raises UnknownRuleError without touching disk if the id is not in the set.
    """
    rule = ruleset.get(rule_id)
    if rule is None:
        raise UnknownRuleError(rule_id)

    save_override(
        ruleset.name,
        {"id": rule_id, "enabled": enabled},
        project_root=project_root,
        config=config,
    )

    updated = replace(rule, enabled=enabled)
    return replace(
        ruleset,
        rules=tuple(updated if r.id == rule_id else r for r in ruleset.rules),
    )


def override_path(
    ruleset_name: str,
    project_root: str | Path,
    config: AuditConfig | None = None,
) -> Path:
    """Path of the project override file for a rule set (may not exist yet)."""
    config = config or AuditConfig.load()
    directory = config.project_override_dir(project_root)
    return find_override_file(directory, ruleset_name) or directory / f"{ruleset_name}.json"


def save_override(
    ruleset_name: str,
    entry: dict[str, Any],
    *,
    project_root: str | Path,
    config: AuditConfig | None = None,
) -> Path:
    """Merge one override entry into the project override file.

    Other entries already in the file are preserved. The file is replaced
    atomically so a crash never leaves it half-written.
    """
    path = override_path(ruleset_name, project_root, config)

    data: dict[str, Any] = {}
    if path.is_file():
        try:
            data = read_rules_file(path)
        except (OSError, ValueError) as e:
            logger.warning("Replacing unreadable override file %s: %s", path, e)

    entries = merge_rule_entries(extract_rule_entries(data), [entry])
    for key in LEGACY_RULE_KEYS:
        data.pop(key, None)
    data["rules"] = entries

    if path.suffix in (".yaml", ".yml"):
        text = yaml.dump(data, default_flow_style=False, sort_keys=False)
    else:
        text = json.dumps(data, indent=2) + "\n"

    _atomic_write(path, text)
    logger.debug("Saved %d override(s) to %s", len(entries), path)
    return path


def _atomic_write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
