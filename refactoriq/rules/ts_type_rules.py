"""Rules: TypeScript type annotations."""
from __future__ import annotations

import re

from refactoriq.core.syntax_tree import Language, Node
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["MissingTypeDefinitionsRule", "NoAnyTypeRule"]

_ANY_RE = re.compile(r":\s*any\b")
_UNTYPED_METHOD_KINDS = {"constructor", "set"}


class MissingTypeDefinitionsRule(BaseRule):
    metadata = RuleMetadata(
        id="ts-missing-types",
        name="Missing Type Definitions",
        description="Detects variables and functions without explicit type definitions",
        category=RuleCategory.BEST_PRACTICE,
        severity=IssueSeverity.MEDIUM,
        language=Language.TYPESCRIPT,
        tags=("types", "best-practice"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        tree = context.parse_result.tree
        violations: list[RuleViolation] = []
        for node in tree.find_by_kind({"FunctionDeclaration", "MethodDefinition", "TSDeclareFunction"}):
            if node.kind == "MethodDefinition":
                if node.get("kind") in _UNTYPED_METHOD_KINDS:
                    continue
                target = node.child("value")
            else:
                target = node
            if target is not None and not _has_return_type(target):
                violations.append(self._node_violation("Function missing explicit return type", node))
        return violations


def _has_return_type(fn: Node) -> bool:
    return fn.get("returnType") is not None


class NoAnyTypeRule(BaseRule):
    metadata = RuleMetadata(
        id="ts-no-any",
        name="Avoid Any Type",
        description="Detects usage of the any type which bypasses type checking",
        category=RuleCategory.BEST_PRACTICE,
        severity=IssueSeverity.MEDIUM,
        language=Language.TYPESCRIPT,
        tags=("types", "type-safety"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        for index, line in enumerate(context.source_code.splitlines(), start=1):
            for match in _ANY_RE.finditer(line):
                any_col = match.end() - 3
                violations.append(self._violation(
                    'Avoid using "any" type. Use specific types or "unknown" instead.',
                    index, any_col + 1,
                    end_line=index, end_column=match.end() + 1,
                ))
        return violations
