"""Tests for the refactoring engine: provider dispatch, truncation, isolation and auto-fix gating."""
from __future__ import annotations
import asyncio
import pytest
from refactoriq.adapters.base import ParseResult
from refactoriq.core.refactor_engine import RefactoringEngine
from refactoriq.core.syntax_tree import Language, SyntaxTree
from refactoriq.refactors.base_provider import BaseRefactoringProvider
from refactoriq.refactors.defaults import build_default_provider_registry
from refactoriq.refactors.registry import SuggestionProviderRegistry
from tests.conftest import make_suggestion, make_violation


class _CountingProvider(BaseRefactoringProvider):
    def __init__(self, rule_id: str, count: int, tag: str) -> None:
        self.rule_id = rule_id
        self.count = count
        self.tag = tag
        self.calls = 0

    async def generate_suggestions(self, context):
        self.calls += 1
        return [make_suggestion(self.rule_id, suggestion_id=f"{self.tag}-{i}") for i in range(self.count)]


class _FailingProvider(BaseRefactoringProvider):
    rule_id = "ts-no-any"

    async def generate_suggestions(self, context):
        raise RuntimeError("provider exploded")


def _registry(*providers: BaseRefactoringProvider) -> SuggestionProviderRegistry:
    registry = SuggestionProviderRegistry()
    for provider in providers:
        registry.register_provider(provider)
    return registry


def _parse_result() -> ParseResult:
    return ParseResult(SyntaxTree.empty(), "let a: any;\n", "a.ts", Language.TYPESCRIPT)


def _generate(engine: RefactoringEngine, violations, parse_result: ParseResult | None = None, file_name: str = "a.ts"):
    return asyncio.run(engine.generate_suggestions(parse_result or _parse_result(), violations, file_name))


class TestDispatch:
    def test_only_matching_providers_run(self) -> None:
        match = _CountingProvider("ts-no-any", 1, "m")
        other = _CountingProvider("ts-large-loops", 1, "o")
        result = _generate(RefactoringEngine(_registry(match, other)), [make_violation("ts-no-any")])
        assert [s.id for s in result.suggestions] == ["m-0"]
        assert other.calls == 0

    def test_violation_then_registration_order(self) -> None:
        a = _CountingProvider("ts-no-any", 1, "a")
        b = _CountingProvider("ts-no-any", 1, "b")
        loops = _CountingProvider("ts-large-loops", 1, "l")
        violations = [make_violation("ts-large-loops"), make_violation("ts-no-any")]
        result = _generate(RefactoringEngine(_registry(a, loops, b)), violations)
        assert [s.id for s in result.suggestions] == ["l-0", "a-0", "b-0"]
        assert result.total_suggestions == 3

    def test_no_violations(self) -> None:
        result = _generate(RefactoringEngine(build_default_provider_registry()), [])
        assert result.suggestions == [] and result.total_suggestions == 0
        assert result.language is Language.TYPESCRIPT


class TestTruncation:
    def test_keeps_first_n_per_violation(self) -> None:
        engine = RefactoringEngine(
            _registry(_CountingProvider("ts-no-any", 2, "a"), _CountingProvider("ts-no-any", 2, "b")),
            max_suggestions_per_violation=3,
        )
        result = _generate(engine, [make_violation("ts-no-any"), make_violation("ts-no-any", line=2)])
        assert [s.id for s in result.suggestions] == ["a-0", "a-1", "b-0", "a-0", "a-1", "b-0"]

    def test_zero_cap(self) -> None:
        engine = RefactoringEngine(_registry(_CountingProvider("ts-no-any", 2, "a")), max_suggestions_per_violation=0)
        assert _generate(engine, [make_violation("ts-no-any")]).suggestions == []


class TestIsolation:
    def test_failing_provider_is_recorded(self) -> None:
        good = _CountingProvider("ts-no-any", 1, "good")
        result = _generate(RefactoringEngine(_registry(_FailingProvider(), good)), [make_violation("ts-no-any", line=4)])
        assert [s.id for s in result.suggestions] == ["good-0"]
        assert len(result.provider_errors) == 1
        err = result.provider_errors[0]
        assert (err.provider, err.rule_id, err.line, err.error) == ("_FailingProvider", "ts-no-any", 4, "provider exploded")


class TestScoring:
    def test_suggestions_are_scored(self) -> None:
        result = _generate(RefactoringEngine(_registry(_CountingProvider("ts-no-any", 1, "a"))), [make_violation("ts-no-any")])
        # 85 - 2 + 10 + 10, clamped
        assert result.suggestions[0].confidence_score == 100
        assert result.suggestions[0].reasoning.endswith("High confidence - safe to apply")


class TestAutoFix:
    def _suggestions(self):
        return [make_suggestion(confidence_score=s, suggestion_id=str(s)) for s in (95, 80, 79, 10)]

    def test_disabled_returns_nothing(self) -> None:
        engine = RefactoringEngine(SuggestionProviderRegistry(), enable_auto_fix=False)
        assert engine.get_auto_fixable_suggestions(self._suggestions()) == []

    def test_threshold_is_inclusive(self) -> None:
        engine = RefactoringEngine(SuggestionProviderRegistry(), enable_auto_fix=True)
        assert [s.id for s in engine.get_auto_fixable_suggestions(self._suggestions())] == ["95", "80"]

    def test_custom_threshold(self) -> None:
        engine = RefactoringEngine(SuggestionProviderRegistry(), enable_auto_fix=True, min_confidence_for_auto_fix=0)
        assert len(engine.get_auto_fixable_suggestions(self._suggestions())) == 4


class TestInvalidInput:
    def test_missing_tree(self) -> None:
        with pytest.raises(ValueError):
            _generate(RefactoringEngine(SuggestionProviderRegistry()), [], ParseResult(None, "", "a.ts", Language.TYPESCRIPT))

    def test_empty_file_name(self) -> None:
        with pytest.raises(ValueError):
            _generate(RefactoringEngine(SuggestionProviderRegistry()), [], file_name="")
