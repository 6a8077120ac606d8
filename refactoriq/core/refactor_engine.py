"""Refactoring engine – turns rule violations into scored suggestions."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from refactoriq.adapters.base import ParseResult
from refactoriq.core.confidence import ConfidenceScorer
from refactoriq.core.syntax_tree import Language
from refactoriq.refactors.base_provider import RefactoringContext, RefactoringSuggestion
from refactoriq.refactors.registry import SuggestionProviderRegistry
from refactoriq.rules.base_rule import RuleViolation

__all__ = ["ProviderError", "RefactoringResult", "RefactoringEngine"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderError:
    provider: str
    rule_id: str
    line: int
    error: str


@dataclass(frozen=True)
class RefactoringResult:
    file_name: str
    language: Language
    total_suggestions: int
    suggestions: list[RefactoringSuggestion]
    execution_time: float
    provider_errors: list[ProviderError] = field(default_factory=list)


class RefactoringEngine:
    def __init__(
        self,
        providers: SuggestionProviderRegistry,
        scorer: ConfidenceScorer | None = None,
        *,
        max_suggestions_per_violation: int = 3,
        enable_auto_fix: bool = False,
        min_confidence_for_auto_fix: int = 80,
    ) -> None:
        self.providers = providers
        self.scorer = scorer or ConfidenceScorer()
        self.max_suggestions_per_violation = max_suggestions_per_violation
        self.enable_auto_fix = enable_auto_fix
        self.min_confidence_for_auto_fix = min_confidence_for_auto_fix

    async def generate_suggestions(
        self, parse_result: ParseResult, violations: list[RuleViolation], file_name: str
    ) -> RefactoringResult:
        if parse_result is None or getattr(parse_result, "tree", None) is None:
            raise ValueError("generate_suggestions() requires a parse result with a syntax tree")
        if not file_name:
            raise ValueError("generate_suggestions() requires a file name")

        started = time.perf_counter()
        providers = self.providers.list()
        generated: list[RefactoringSuggestion] = []
        errors: list[ProviderError] = []

        for violation in violations:
            context = RefactoringContext(
                parse_result=parse_result,
                violation=violation,
                file_name=file_name,
                source_code=parse_result.source_code,
            )
            per_violation: list[RefactoringSuggestion] = []
            for provider in providers:
                name = type(provider).__name__
                try:
                    if not provider.can_refactor(violation):
                        continue
                    per_violation.extend(await provider.generate_suggestions(context))
                except Exception as exc:
                    logger.warning(
                        "Provider %s failed for %s at line %d: %s",
                        name, violation.rule_id, violation.line, exc, exc_info=True,
                    )
                    errors.append(ProviderError(name, violation.rule_id, violation.line, str(exc) or type(exc).__name__))
            generated.extend(per_violation[: self.max_suggestions_per_violation])

        scored = self.scorer.batch_calculate(generated, violations)
        return RefactoringResult(
            file_name=file_name,
            language=parse_result.language or Language.from_filename(file_name),
            total_suggestions=len(scored),
            suggestions=scored,
            execution_time=(time.perf_counter() - started) * 1000,
            provider_errors=errors,
        )

    def get_auto_fixable_suggestions(self, suggestions: list[RefactoringSuggestion]) -> list[RefactoringSuggestion]:
        if not self.enable_auto_fix:
            return []
        return [s for s in suggestions if s.confidence_score >= self.min_confidence_for_auto_fix]
