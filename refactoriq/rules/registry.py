"""Rule registry – registered detectors and their per-rule configuration."""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Any

from refactoriq.rules.base_rule import BaseRule, IssueSeverity

__all__ = ["RuleConfig", "RuleRegistry"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleConfig:
    enabled: bool = True
    severity: IssueSeverity | None = None
    options: dict[str, Any] = field(default_factory=dict)


class RuleRegistry:
    """Rules keyed by id, in registration order.

    Registering an id twice replaces the earlier rule and keeps its config.
    Operations on an unknown id are silent no-ops.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._rules: dict[str, BaseRule] = {}
        self._configs: dict[str, RuleConfig] = {}

    def register(self, rule: BaseRule) -> None:
        rule_id = rule.metadata.id
        with self._lock:
            if rule_id in self._rules:
                logger.debug("Replacing rule %s", rule_id)
            self._rules[rule_id] = rule
            self._configs.setdefault(rule_id, RuleConfig())

    def unregister(self, rule_id: str) -> None:
        with self._lock:
            self._rules.pop(rule_id, None)
            self._configs.pop(rule_id, None)

    def enable(self, rule_id: str) -> None:
        self._update(rule_id, enabled=True)

    def disable(self, rule_id: str) -> None:
        self._update(rule_id, enabled=False)

    def set_severity(self, rule_id: str, severity: IssueSeverity | None) -> None:
        self._update(rule_id, severity=severity)

    def set_options(self, rule_id: str, options: dict[str, Any]) -> None:
        self._update(rule_id, options=dict(options))

    def _update(self, rule_id: str, **changes: Any) -> None:
        with self._lock:
            config = self._configs.get(rule_id)
            if config is None:
                logger.debug("Ignoring config change for unknown rule %s", rule_id)
                return
            self._configs[rule_id] = replace(config, **changes)

    def get(self, rule_id: str) -> BaseRule | None:
        with self._lock:
            return self._rules.get(rule_id)

    def get_config(self, rule_id: str) -> RuleConfig | None:
        with self._lock:
            return self._configs.get(rule_id)

    def is_enabled(self, rule_id: str) -> bool:
        config = self.get_config(rule_id)
        return config is not None and config.enabled

    def list(self) -> list[BaseRule]:
        with self._lock:
            return list(self._rules.values())

    def snapshot(self) -> list[tuple[BaseRule, RuleConfig]]:
        """Consistent ``(rule, config)`` pairs in registration order."""
        with self._lock:
            return [(rule, self._configs[rule_id]) for rule_id, rule in self._rules.items()]

    def stats(self) -> dict[str, Any]:
        pairs = self.snapshot()
        enabled = sum(1 for _, cfg in pairs if cfg.enabled)
        by_category = Counter(rule.metadata.category.value for rule, _ in pairs)
        return {
            "total_rules": len(pairs),
            "enabled_rules": enabled,
            "disabled_rules": len(pairs) - enabled,
            "rules_by_category": dict(by_category),
        }

    def __len__(self) -> int:
        with self._lock:
            return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        with self._lock:
            return rule_id in self._rules
