"""Orchestration engine – ties the parse adapter, rules, refactorings and scoring together."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from pathlib import Path
from typing import Any

from refactoriq.adapters.base import ParseError, ParseResult
from refactoriq.adapters.estree_adapter import EstreeJsonAdapter
from refactoriq.config.settings import RefactorIQSettings
from refactoriq.core.confidence import ConfidenceScorer
from refactoriq.core.refactor_engine import ProviderError, RefactoringEngine
from refactoriq.core.rule_engine import RuleEngine, RuleExecutionResult
from refactoriq.refactors.base_provider import RefactoringSuggestion
from refactoriq.refactors.defaults import build_default_provider_registry
from refactoriq.refactors.registry import SuggestionProviderRegistry
from refactoriq.rules.base_rule import CodeIssue, IssueSeverity, RuleViolation
from refactoriq.rules.defaults import build_default_registry
from refactoriq.rules.registry import RuleRegistry

__all__ = ["AnalysisReport", "RefactorIQEngine", "load_parse_result"]

logger = logging.getLogger(__name__)


class AnalysisReport:
    def __init__(
        self,
        parse_result: ParseResult,
        violations: list[RuleViolation],
        issues: list[CodeIssue],
        suggestions: list[RefactoringSuggestion],
        auto_fixable: list[RefactoringSuggestion],
        rule_errors: list[RuleExecutionResult],
        provider_errors: list[ProviderError],
        execution_time: float,
    ) -> None:
        self.parse_result = parse_result
        self.violations = violations
        self.issues = issues
        self.suggestions = suggestions
        self.auto_fixable = auto_fixable
        self.rule_errors = rule_errors
        self.provider_errors = provider_errors
        self.execution_time = execution_time

    @property
    def file_name(self) -> str:
        return self.parse_result.file_name

    @property
    def parse_errors(self) -> list[ParseError]:
        return self.parse_result.errors

    @property
    def stats(self) -> dict[str, int]:
        counts = Counter(i.severity for i in self.issues)
        return {s.value: counts.get(s, 0) for s in IssueSeverity}

    @property
    def has_blocking(self) -> bool:
        return any(i.severity in (IssueSeverity.HIGH, IssueSeverity.CRITICAL) for i in self.issues)

    @property
    def exit_code(self) -> int:
        if self.has_blocking:
            return 2
        if self.issues:
            return 1
        return 0

    def suggestions_for(self, rule_id: str) -> list[RefactoringSuggestion]:
        return [s for s in self.suggestions if s.rule_id == rule_id]

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileName": self.file_name,
            "language": self.parse_result.language.value,
            "issues": [i.to_dict() for i in self.issues],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "autoFixable": [s.id for s in self.auto_fixable],
            "stats": self.stats,
            "parseErrors": [
                {"message": e.message, "line": e.line, "column": e.column} for e in self.parse_errors
            ],
            "ruleErrors": [{"ruleId": r.rule_id, "error": r.error} for r in self.rule_errors],
            "providerErrors": [
                {"provider": e.provider, "ruleId": e.rule_id, "line": e.line, "error": e.error}
                for e in self.provider_errors
            ],
            "executionTime": round(self.execution_time, 3),
        }


class RefactorIQEngine:
    """Central orchestrator for a RefactorIQ analysis run."""

    def __init__(
        self,
        settings: RefactorIQSettings | None = None,
        rules: RuleRegistry | None = None,
        providers: SuggestionProviderRegistry | None = None,
    ) -> None:
        self.settings = settings or RefactorIQSettings()
        self.rules = rules or build_default_registry()
        self.providers = providers or build_default_provider_registry()
        self._configure_rules()

        cfg = self.settings.refactoring
        self.rule_engine = RuleEngine(self.rules, max_execution_time_ms=self.settings.rules.max_execution_time_ms)
        self.scorer = ConfidenceScorer(self.settings.scoring.rule_confidence)
        self.refactoring_engine = RefactoringEngine(
            self.providers,
            self.scorer,
            max_suggestions_per_violation=cfg.max_suggestions_per_violation,
            enable_auto_fix=cfg.enable_auto_fix,
            min_confidence_for_auto_fix=cfg.min_confidence_for_auto_fix,
        )

    def _configure_rules(self) -> None:
        cfg = self.settings.rules
        for rule_id in cfg.disabled:
            if rule_id not in self.rules:
                logger.warning("Unknown rule in disabled list: %s", rule_id)
            self.rules.disable(rule_id)
        for rule_id, severity in cfg.severity_overrides.items():
            self.rules.set_severity(rule_id, severity)
        for rule_id, options in cfg.options.items():
            self.rules.set_options(rule_id, options)

    async def analyze(self, parse_result: ParseResult) -> AnalysisReport:
        file_name = parse_result.file_name
        rule_result = await self.rule_engine.execute(parse_result, file_name)
        refactoring = await self.refactoring_engine.generate_suggestions(
            parse_result, rule_result.violations, file_name
        )
        logger.debug(
            "%s: %d issue(s), %d suggestion(s)", file_name, rule_result.total_violations, refactoring.total_suggestions
        )
        return AnalysisReport(
            parse_result=parse_result,
            violations=rule_result.violations,
            issues=rule_result.issues,
            suggestions=refactoring.suggestions,
            auto_fixable=self.refactoring_engine.get_auto_fixable_suggestions(refactoring.suggestions),
            rule_errors=rule_result.failed_rules,
            provider_errors=refactoring.provider_errors,
            execution_time=rule_result.total_execution_time + refactoring.execution_time,
        )

    def run_analyze(self, parse_result: ParseResult) -> AnalysisReport:
        """Synchronous entry point for callers without an event loop."""
        return asyncio.run(self.analyze(parse_result))

    def close(self) -> None:
        self.rule_engine.close()

    def __enter__(self) -> RefactorIQEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def load_parse_result(source_path: Path, ast_path: Path | None = None) -> ParseResult:
    """Read *source_path* and pair it with its ESTree document.

    Without *ast_path*, ``<source>.ast.json`` beside the source is used.
    """
    source_path = Path(source_path)
    source = source_path.read_text(encoding="utf-8")
    adapter = EstreeJsonAdapter(Path(ast_path) if ast_path is not None else None)
    return adapter.parse(source, str(source_path))
