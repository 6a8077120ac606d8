"""Suggestion provider registry – refactoring providers grouped by rule id."""

from __future__ import annotations

import threading
from typing import Any

from refactoriq.refactors.base_provider import BaseRefactoringProvider

__all__ = ["SuggestionProviderRegistry"]


class SuggestionProviderRegistry:
    """Append-only list of providers; several providers may serve the same rule."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._providers: list[BaseRefactoringProvider] = []

    def register_provider(self, provider: BaseRefactoringProvider) -> None:
        with self._lock:
            self._providers.append(provider)

    def unregister_provider(self, rule_id: str) -> None:
        """Remove every provider for *rule_id*; no-op if none is registered."""
        with self._lock:
            self._providers = [p for p in self._providers if p.rule_id != rule_id]

    def providers_for(self, rule_id: str) -> list[BaseRefactoringProvider]:
        with self._lock:
            return [p for p in self._providers if p.rule_id == rule_id]

    def list(self) -> list[BaseRefactoringProvider]:
        with self._lock:
            return list(self._providers)

    def stats(self) -> dict[str, Any]:
        providers = self.list()
        by_rule: dict[str, list[str]] = {}
        for p in providers:
            by_rule.setdefault(p.rule_id, []).append(type(p).__name__)
        return {"total_providers": len(providers), "providers_by_rule": by_rule}

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)
