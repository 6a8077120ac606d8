"""Refactoring provider for nested loops."""
from __future__ import annotations

import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["LargeLoopsRefactoringProvider"]

FUNCTIONAL_PREVIEW = textwrap.dedent("""\
    // Before: Nested loops
    const results = [];
    for (let i = 0; i < data.length; i++) {
      for (let j = 0; j < data[i].items.length; j++) {
        results.push(processItem(data[i].items[j]));
      }
    }

    // After: Functional approach
    const results = data.flatMap(item =>
      item.items.map(subItem => processItem(subItem))
    );""")


class LargeLoopsRefactoringProvider(BaseRefactoringProvider):
    rule_id = "ts-large-loops"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        start = self._offset(v)
        end_line = v.end_line or v.line
        end_col = v.end_column - 1 if v.end_column else len(self._line_of(context, end_line))
        return [RefactoringSuggestion(
            id=self._suggestion_id("functional"), rule_id=self.rule_id,
            title="Use functional programming",
            description="Replace nested loops with functional methods like map, filter, flatMap",
            transformations=[CodeTransformation(
                type=RefactoringType.REPLACE, start_line=v.line, start_column=start, end_line=end_line, end_column=end_col,
                original_code=self._span_text(context, v.line, start, end_line, end_col),
                new_code="// Replace with flatMap/map over the collection",
                description="Replace with functional approach",
            )],
            confidence=ConfidenceLevel.MEDIUM, confidence_score=75,
            reasoning="Functional approach is often more readable and maintainable",
            impact=RefactoringImpact(lines_changed=5, complexity="medium", breaking_change=False, testing_required=True, estimated_time="10 minutes"),
            preview=FUNCTIONAL_PREVIEW,
        )]
