"""Confidence scoring for refactoring suggestions."""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import ROUND_HALF_UP, Decimal

from refactoriq.refactors.base_provider import (
    ConfidenceLevel,
    RefactoringSuggestion,
    RefactoringType,
)
from refactoriq.rules.base_rule import RuleViolation

__all__ = [
    "DEFAULT_RULE_CONFIDENCE",
    "FALLBACK_RULE_CONFIDENCE",
    "ConfidenceFactors",
    "ConfidenceScorer",
]

DEFAULT_RULE_CONFIDENCE: dict[str, int] = {
    "glide-deprecated-ajax": 90,
    "glide-log-for-errors": 95,
    "ts-no-any": 85,
    "ts-unused-imports": 90,
    "glide-nested-query": 70,
    "glide-query-no-conditions": 50,
    "ts-missing-types": 60,
    "glide-hardcoded-values": 70,
    "ts-large-loops": 75,
}
FALLBACK_RULE_CONFIDENCE = 50

_COMPLEXITY_CAP = 100
_COMPLEXITY_WEIGHT = Decimal("0.2")


@dataclass(frozen=True)
class ConfidenceFactors:
    syntax_complexity: int
    transformation_count: int
    code_impact: int
    breaking_change: bool
    has_tests: bool
    rule_confidence: int


class ConfidenceScorer:
    def __init__(self, rule_confidence: dict[str, int] | None = None) -> None:
        self.rule_confidence = {**DEFAULT_RULE_CONFIDENCE, **(rule_confidence or {})}

    def calculate_confidence(
        self, suggestion: RefactoringSuggestion, violation: RuleViolation
    ) -> RefactoringSuggestion:
        """Return a copy of *suggestion* with score, tier and reasoning overwritten."""
        factors = self.extract_factors(suggestion, violation)
        score = self.compute_score(factors)
        return replace(
            suggestion,
            confidence_score=score,
            confidence=ConfidenceLevel.from_score(score),
            reasoning=self.generate_reasoning(factors, score),
        )

    def extract_factors(self, suggestion: RefactoringSuggestion, violation: RuleViolation) -> ConfidenceFactors:
        return ConfidenceFactors(
            syntax_complexity=self.syntax_complexity(suggestion),
            transformation_count=len(suggestion.transformations),
            code_impact=suggestion.impact.lines_changed,
            breaking_change=suggestion.impact.breaking_change,
            has_tests=suggestion.impact.testing_required,
            rule_confidence=self.get_rule_confidence(violation.rule_id),
        )

    @staticmethod
    def syntax_complexity(suggestion: RefactoringSuggestion) -> int:
        complexity = 0
        for t in suggestion.transformations:
            if t.type is RefactoringType.REPLACE and t.is_single_line:
                complexity += 10
            elif t.type in (RefactoringType.INSERT, RefactoringType.DELETE):
                complexity += 20
            else:
                complexity += 40
        return min(complexity, _COMPLEXITY_CAP)

    def get_rule_confidence(self, rule_id: str) -> int:
        return self.rule_confidence.get(rule_id, FALLBACK_RULE_CONFIDENCE)

    @staticmethod
    def compute_score(factors: ConfidenceFactors) -> int:
        score = Decimal(factors.rule_confidence)
        score -= Decimal(factors.syntax_complexity) * _COMPLEXITY_WEIGHT

        if factors.transformation_count == 1:
            score += 10
        elif factors.transformation_count > 3:
            score -= 15

        if factors.code_impact <= 3:
            score += 10
        elif factors.code_impact > 10:
            score -= 10

        if factors.breaking_change:
            score -= 20
        if factors.has_tests:
            score -= 5

        rounded = int(score.quantize(Decimal(1), rounding=ROUND_HALF_UP))
        return max(0, min(100, rounded))

    @staticmethod
    def generate_reasoning(factors: ConfidenceFactors, score: int) -> str:
        reasons: list[str] = []

        if factors.syntax_complexity < 30:
            reasons.append("Simple syntax transformation")
        elif factors.syntax_complexity > 60:
            reasons.append("Complex syntax transformation")

        if factors.transformation_count == 1:
            reasons.append("Single transformation")
        elif factors.transformation_count > 3:
            reasons.append("Multiple transformations required")

        if factors.code_impact <= 3:
            reasons.append("Minimal code impact")
        elif factors.code_impact > 10:
            reasons.append("Significant code changes")

        if factors.breaking_change:
            reasons.append("Potential breaking change")
        if factors.has_tests:
            reasons.append("Testing recommended")

        level = ConfidenceLevel.from_score(score)
        if level is ConfidenceLevel.HIGH:
            reasons.append("High confidence - safe to apply")
        elif level is ConfidenceLevel.MEDIUM:
            reasons.append("Medium confidence - review recommended")
        else:
            reasons.append("Low confidence - manual review required")

        return "; ".join(reasons)

    def batch_calculate(
        self, suggestions: list[RefactoringSuggestion], violations: list[RuleViolation]
    ) -> list[RefactoringSuggestion]:
        # First violation per rule id wins.
        first_by_rule: dict[str, RuleViolation] = {}
        for v in violations:
            first_by_rule.setdefault(v.rule_id, v)
        scored: list[RefactoringSuggestion] = []
        for suggestion in suggestions:
            violation = first_by_rule.get(suggestion.rule_id)
            scored.append(self.calculate_confidence(suggestion, violation) if violation else suggestion)
        return scored
