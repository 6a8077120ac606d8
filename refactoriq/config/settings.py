"""Pydantic-based configuration model and YAML loader for RefactorIQ."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from refactoriq.rules.base_rule import IssueSeverity

__all__ = ["RulesConfig", "RefactoringConfig", "ScoringConfig", "RefactorIQSettings", "load_settings"]

_CONFIG_FILE_NAMES: list[str] = [
    "refactoriq.yaml",
    "refactoriq.yml",
    ".refactoriq.yaml",
    ".refactoriq.yml",
]


class RulesConfig(BaseModel):
    """Per-rule toggles, severity overrides, and options."""

    disabled: list[str] = Field(
        default_factory=list,
        description="Rule ids to disable.",
    )
    severity_overrides: dict[str, IssueSeverity] = Field(
        default_factory=dict,
        description="Severity to report for a rule instead of its default.",
    )
    options: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Rule-specific options, keyed by rule id.",
    )
    max_execution_time_ms: int = Field(
        default=5000,
        gt=0,
        description="Advisory time limit for a single rule on a single file.",
    )


class RefactoringConfig(BaseModel):
    """Suggestion generation and auto-fix gating."""

    max_suggestions_per_violation: int = Field(
        default=3,
        ge=0,
        description="Suggestions kept per violation, in provider registration order.",
    )
    enable_auto_fix: bool = Field(
        default=False,
        description="Expose high-confidence suggestions as auto-fixable.",
    )
    min_confidence_for_auto_fix: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Minimum confidence score for an auto-fixable suggestion.",
    )


class ScoringConfig(BaseModel):
    """Confidence scorer tuning."""

    rule_confidence: dict[str, int] = Field(
        default_factory=dict,
        description="Base confidence per rule id, merged over the built-in table.",
    )


class RefactorIQSettings(BaseModel):
    """Top-level RefactorIQ configuration."""

    rules: RulesConfig = Field(
        default_factory=RulesConfig,
        description="Per-rule configuration.",
    )
    refactoring: RefactoringConfig = Field(
        default_factory=RefactoringConfig,
        description="Refactoring engine configuration.",
    )
    scoring: ScoringConfig = Field(
        default_factory=ScoringConfig,
        description="Confidence scoring configuration.",
    )


def _find_config_file(search_dir: Path) -> Path | None:
    """Walk up from *search_dir* looking for a config file."""
    current = search_dir.resolve()
    while True:
        for name in _CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_settings(
    config_path: Path | None = None,
    search_dir: Path | None = None,
) -> RefactorIQSettings:
    """Load settings from a YAML file, falling back to defaults."""
    raw: dict[str, Any] = {}

    if config_path is not None:
        resolved = Path(config_path).resolve()
        if resolved.is_file():
            raw = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
    else:
        found = _find_config_file(search_dir or Path.cwd())
        if found is not None:
            raw = yaml.safe_load(found.read_text(encoding="utf-8")) or {}

    return RefactorIQSettings(**raw)
