"""Rule engine – runs registered rules against a parsed file and collects issues."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace

from refactoriq.adapters.base import ParseResult
from refactoriq.core.syntax_tree import Language
from refactoriq.rules.base_rule import BaseRule, CodeIssue, RuleContext, RuleViolation
from refactoriq.rules.registry import RuleConfig, RuleRegistry

__all__ = [
    "DEFAULT_MAX_EXECUTION_TIME_MS",
    "RuleExecutionResult",
    "RuleEngineResult",
    "RuleEngine",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_EXECUTION_TIME_MS = 5000


@dataclass(frozen=True)
class RuleExecutionResult:
    rule_id: str
    violations: list[RuleViolation] = field(default_factory=list)
    execution_time: float = 0.0
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class RuleEngineResult:
    file_name: str
    language: Language
    total_violations: int
    violations: list[RuleViolation]
    rule_results: list[RuleExecutionResult]
    total_execution_time: float
    issues: list[CodeIssue]

    @property
    def failed_rules(self) -> list[RuleExecutionResult]:
        return [r for r in self.rule_results if r.failed]


class RuleEngine:
    """Executes the enabled rules of a :class:`RuleRegistry`.

    Each rule runs on a worker thread and is raced against
    ``max_execution_time_ms``.  The deadline is advisory: a rule that overruns
    keeps its worker thread until it returns, but its result is discarded and
    the run records a timeout error for that rule only.  The pool holding the
    stuck worker is retired so later rules start on idle workers.
    """

    def __init__(
        self,
        registry: RuleRegistry,
        max_execution_time_ms: int = DEFAULT_MAX_EXECUTION_TIME_MS,
        max_workers: int = 4,
    ) -> None:
        self.registry = registry
        self.max_execution_time_ms = max_execution_time_ms
        self.max_workers = max_workers
        self._executor = self._new_executor()

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="refactoriq-rule")

    def _retire_executor(self) -> None:
        stuck, self._executor = self._executor, self._new_executor()
        stuck.shutdown(wait=False)

    def applicable_rules(self, language: Language) -> list[tuple[BaseRule, RuleConfig]]:
        return [
            (rule, config)
            for rule, config in self.registry.snapshot()
            if config.enabled and rule.metadata.applies_to(language)
        ]

    async def execute(self, parse_result: ParseResult, file_name: str) -> RuleEngineResult:
        if parse_result is None or getattr(parse_result, "tree", None) is None:
            raise ValueError("execute() requires a parse result with a syntax tree")
        if not file_name:
            raise ValueError("execute() requires a file name")

        started = time.perf_counter()
        language = parse_result.language or Language.from_filename(file_name)
        if parse_result.errors:
            logger.debug("Analysing %s despite %d parse error(s)", file_name, len(parse_result.errors))

        rule_results: list[RuleExecutionResult] = []
        violations: list[RuleViolation] = []
        for rule, config in self.applicable_rules(language):
            result = await self._execute_rule(rule, config, parse_result, file_name)
            rule_results.append(result)
            violations.extend(result.violations)

        return RuleEngineResult(
            file_name=file_name,
            language=language,
            total_violations=len(violations),
            violations=violations,
            rule_results=rule_results,
            total_execution_time=(time.perf_counter() - started) * 1000,
            issues=self._to_issues(violations, file_name),
        )

    async def _execute_rule(
        self, rule: BaseRule, config: RuleConfig, parse_result: ParseResult, file_name: str
    ) -> RuleExecutionResult:
        rule_id = rule.metadata.id
        started = time.perf_counter()
        context = RuleContext(
            parse_result=parse_result,
            file_name=file_name,
            source_code=parse_result.source_code,
            options=dict(config.options),
        )
        loop = asyncio.get_running_loop()
        try:
            found = await asyncio.wait_for(
                loop.run_in_executor(self._executor, rule.check, context),
                timeout=self.max_execution_time_ms / 1000,
            )
        except asyncio.TimeoutError:
            logger.warning("Rule %s exceeded %d ms on %s", rule_id, self.max_execution_time_ms, file_name)
            self._retire_executor()
            return RuleExecutionResult(rule_id, [], _elapsed_ms(started), "Rule execution timeout")
        except Exception as exc:
            logger.warning("Rule %s failed on %s: %s", rule_id, file_name, exc, exc_info=True)
            return RuleExecutionResult(rule_id, [], _elapsed_ms(started), str(exc) or type(exc).__name__)

        severity = config.severity or rule.metadata.severity
        resolved = [v if v.severity is severity else replace(v, severity=severity) for v in found or []]
        return RuleExecutionResult(rule_id, resolved, _elapsed_ms(started))

    @staticmethod
    def _to_issues(violations: list[RuleViolation], file_name: str) -> list[CodeIssue]:
        return [
            CodeIssue(
                id=f"{v.rule_id}-{uuid.uuid4().hex[:12]}",
                type=v.rule_id,
                severity=v.severity,
                message=v.message,
                line=v.line,
                column=v.column,
                end_line=v.end_line,
                end_column=v.end_column,
                file_name=file_name,
            )
            for v in violations
        ]

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> RuleEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000
