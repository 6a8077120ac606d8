"""Rules: deprecated or misused Glide APIs."""
from __future__ import annotations

import re

from refactoriq.core.syntax_tree import Language, call_receiver
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["DeprecatedGlideAjaxRule", "LogInsteadOfErrorRule"]

_GET_XML_WAIT = "getXMLWait"
_ERROR_WORDS_RE = re.compile(r"error|exception|fail", re.IGNORECASE)


class DeprecatedGlideAjaxRule(BaseRule):
    metadata = RuleMetadata(
        id="glide-deprecated-ajax",
        name="Deprecated GlideAjax Pattern",
        description="Detects deprecated GlideAjax usage patterns",
        category=RuleCategory.DEPRECATED,
        severity=IssueSeverity.MEDIUM,
        language=Language.JAVASCRIPT,
        tags=("glideajax", "deprecated"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for index, line in enumerate(context.source_code.splitlines(), start=1):
            col = line.find(_GET_XML_WAIT)
            if col == -1:
                continue
            violations.append(self._violation(
                "getXMLWait() is deprecated. Use getXML() with callback instead.",
                index, col + 1,
                end_line=index, end_column=col + 1 + len(_GET_XML_WAIT),
            ))
        return violations


class LogInsteadOfErrorRule(BaseRule):
    metadata = RuleMetadata(
        id="glide-log-for-errors",
        name="Use gs.error for Errors",
        description="Detects gs.log() usage for error messages",
        category=RuleCategory.BEST_PRACTICE,
        severity=IssueSeverity.LOW,
        language=Language.JAVASCRIPT,
        tags=("logging", "best-practice"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for call in context.parse_result.tree.find_calls("log"):
            if call_receiver(call) not in (None, "gs"):
                continue
            args = call.get("arguments") or []
            if not args:
                continue
            first = args[0]
            value = first.get("value")
            if first.kind == "Literal" and isinstance(value, str) and _ERROR_WORDS_RE.search(value):
                violations.append(self._node_violation(
                    "Consider using gs.error() instead of gs.log() for error messages",
                    call,
                ))
        return violations
