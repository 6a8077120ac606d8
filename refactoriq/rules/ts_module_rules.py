"""Rule: Detect import specifiers that are never referenced."""
from __future__ import annotations

from refactoriq.core.syntax_tree import Language
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["UnusedImportsRule"]

_SPECIFIER_KINDS = {"ImportSpecifier", "ImportDefaultSpecifier", "ImportNamespaceSpecifier"}
_REFERENCE_KINDS = {"Identifier", "JSXIdentifier"}


class UnusedImportsRule(BaseRule):
    metadata = RuleMetadata(
        id="ts-unused-imports",
        name="Unused Imports",
        description="Detects unused import statements",
        category=RuleCategory.MAINTAINABILITY,
        severity=IssueSeverity.LOW,
        language=Language.TYPESCRIPT,
        tags=("imports", "maintainability"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        tree = context.parse_result.tree
        imports = tree.find_by_kind("ImportDeclaration")
        if not imports:
            return []

        inside_imports = {id(n) for decl in imports for n in tree.nodes(decl)}
        used = {
            n.name
            for n in tree.find_by_kind(_REFERENCE_KINDS)
            if id(n) not in inside_imports and n.name
        }

        violations: list[RuleViolation] = []
        for decl in imports:
            for spec in decl.get("specifiers") or []:
                if spec.kind not in _SPECIFIER_KINDS:
                    continue
                local = spec.child("local")
                name = local.name if local is not None else None
                if name and name not in used:
                    violations.append(self._node_violation(f"'{name}' is imported but never used", spec))
        return violations
