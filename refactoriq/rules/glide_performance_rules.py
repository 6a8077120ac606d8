"""Rule: Detect hardcoded URLs and email addresses that belong in system properties."""
from __future__ import annotations

import re

from refactoriq.core.syntax_tree import Language
from refactoriq.rules.base_rule import (
    BaseRule, IssueSeverity, RuleCategory, RuleContext, RuleMetadata, RuleViolation,
)

__all__ = ["HardcodedValuesRule"]

_URL_RE = re.compile(r"""['"]https?://[^'"]+['"]""")
_EMAIL_RE = re.compile(r"""['"][^'"@\s]*@[^'"\s]+\.[^'"\s]+['"]""")


class HardcodedValuesRule(BaseRule):
    metadata = RuleMetadata(
        id="glide-hardcoded-values",
        name="Avoid Hardcoded Values",
        description="Detects hardcoded values that should be system properties",
        category=RuleCategory.MAINTAINABILITY,
        severity=IssueSeverity.LOW,
        language=Language.JAVASCRIPT,
        tags=("maintainability", "configuration"),
    )

    def check(self, context: RuleContext) -> list[RuleViolation]:
        violations: list[RuleViolation] = []
        lines = context.source_code.splitlines()
        patterns: list[tuple[re.Pattern[str], str]] = [(_URL_RE, "URL"), (_EMAIL_RE, "email")]
        for pattern, kind in patterns:
            for index, line in enumerate(lines, start=1):
                for match in pattern.finditer(line):
                    violations.append(self._violation(
                        f"Hardcoded {kind} detected. Consider using system properties.",
                        index, match.start() + 1,
                        end_line=index, end_column=match.end() + 1,
                    ))
        return violations
