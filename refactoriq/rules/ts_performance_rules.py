"""Rule: Detect deeply nested loops in TypeScript code."""
from __future__ import annotations

from refactoriq.core.syntax_tree import LOOP_KINDS, Language, Node
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["LargeLoopsRule"]

DEFAULT_MAX_NESTING = 1


class LargeLoopsRule(BaseRule):
    """Reports a loop enclosed by at least ``max_nesting`` other loops (option, default 1)."""

    metadata = RuleMetadata(
        id="ts-large-loops",
        name="Optimize Large Loops",
        description="Detects large loops that may need optimization",
        category=RuleCategory.PERFORMANCE,
        severity=IssueSeverity.MEDIUM,
        language=Language.TYPESCRIPT,
        tags=("performance", "loops"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        max_nesting = int(context.options.get("max_nesting", DEFAULT_MAX_NESTING))
        violations: list[RuleViolation] = []
        stack: list[tuple[Node, int]] = [(context.parse_result.tree.root, 0)]
        while stack:
            node, enclosing = stack.pop()
            if node.kind in LOOP_KINDS:
                if enclosing >= max_nesting:
                    violations.append(self._node_violation(
                        f"Loop nested {enclosing + 1} levels deep. "
                        "Consider flatMap/map/filter or a lookup table instead.",
                        node,
                    ))
                enclosing += 1
            stack.extend((child, enclosing) for child in reversed(list(node.children())))
        return violations
