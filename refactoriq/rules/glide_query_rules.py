"""Rules: GlideRecord query anti-patterns."""
from __future__ import annotations

from refactoriq.core.syntax_tree import Language, Node, call_name, call_receiver
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["NestedQueryRule", "QueryWithoutConditionsRule"]

_CONDITION_METHODS = frozenset(
    {"addQuery", "addEncodedQuery", "addActiveQuery", "addNullQuery", "addNotNullQuery", "addOrCondition"}
)


class NestedQueryRule(BaseRule):
    metadata = RuleMetadata(
        id="glide-nested-query",
        name="No Nested GlideRecord Queries",
        description="Detects nested GlideRecord queries which cause performance issues",
        category=RuleCategory.PERFORMANCE,
        severity=IssueSeverity.HIGH,
        language=Language.JAVASCRIPT,
        tags=("gliderecord", "performance", "query"),
        documentation="Use GlideAggregate or join queries instead of nested loops",
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        tree = context.parse_result.tree
        seen: set[int] = set()
        violations: list[RuleViolation] = []
        for loop in tree.find_loops():
            for call in tree.find_calls("query", start=loop):
                # A call inside nested loops is reported once.
                if id(call) in seen:
                    continue
                seen.add(id(call))
                violations.append(self._node_violation(
                    "Nested GlideRecord query detected. Consider using GlideAggregate or optimizing the query.",
                    call,
                ))
        return violations


class QueryWithoutConditionsRule(BaseRule):
    metadata = RuleMetadata(
        id="glide-query-no-conditions",
        name="Query Without Conditions",
        description="Detects GlideRecord queries without addQuery conditions",
        category=RuleCategory.PERFORMANCE,
        severity=IssueSeverity.MEDIUM,
        language=Language.JAVASCRIPT,
        tags=("gliderecord", "performance"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        tree = context.parse_result.tree
        calls = tree.find_calls()
        conditions: dict[str, list[tuple[int, int]]] = {}
        for call in calls:
            receiver = call_receiver(call)
            if receiver and call_name(call) in _CONDITION_METHODS:
                conditions.setdefault(receiver, []).append((call.line, call.column))

        violations: list[RuleViolation] = []
        for call in calls:
            if call_name(call) != "query" or not _is_member_call(call):
                continue
            receiver = call_receiver(call)
            position = (call.line, call.column)
            if receiver and any(p < position for p in conditions.get(receiver, [])):
                continue
            violations.append(self._node_violation(
                "Consider adding query conditions with addQuery() before calling query()",
                call,
            ))
        return violations


def _is_member_call(call: Node) -> bool:
    callee = call.child("callee")
    return callee is not None and callee.kind == "MemberExpression"
