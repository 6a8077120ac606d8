"""Refactoring provider for hardcoded configuration values."""
from __future__ import annotations

import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["HardcodedValuesRefactoringProvider"]

SYSTEM_PROPERTY_PREVIEW = textwrap.dedent("""\
    // Before: Hardcoded values
    var apiUrl = 'https://api.example.com';
    var owner = 'admin@example.com';

    // After: System properties
    var apiUrl = gs.getProperty('x_app.config.url', 'https://api.example.com');
    var owner = gs.getProperty('x_app.config.email', 'admin@example.com');

    // Note: Create the system properties in the System Properties module.""")


class HardcodedValuesRefactoringProvider(BaseRefactoringProvider):
    rule_id = "glide-hardcoded-values"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        start = self._offset(v)
        end = v.end_column - 1 if v.end_column else len(self._line_of(context, v.line))
        literal = self._span_text(context, v.line, start, v.line, end) or "'hardcoded value'"
        kind = "url" if "://" in literal else "email" if "@" in literal else "value"
        return [RefactoringSuggestion(
            id=self._suggestion_id("system-property"), rule_id=self.rule_id,
            title="Replace hardcoded value with system property",
            description="Move hardcoded value to a system property for better configuration management",
            transformations=[CodeTransformation(
                type=RefactoringType.REPLACE, start_line=v.line, start_column=start, end_line=v.line, end_column=end,
                original_code=literal, new_code=f"gs.getProperty('x_app.config.{kind}', {literal})",
                description="Replace with system property",
            )],
            confidence=ConfidenceLevel.MEDIUM, confidence_score=70,
            reasoning="Requires creating a new system property and updating code",
            impact=RefactoringImpact(lines_changed=1, complexity="low", breaking_change=False, testing_required=True, estimated_time="10 minutes"),
            preview=SYSTEM_PROPERTY_PREVIEW,
        )]
