"""Refactoring provider for unused imports."""
from __future__ import annotations

import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["UnusedImportsRefactoringProvider"]

REMOVE_IMPORTS_PREVIEW = textwrap.dedent("""\
    // Before: Unused imports
    import { Component, OnInit, ViewChild } from '@angular/core';
    import { Observable } from 'rxjs';

    export class MyComponent implements OnInit {}

    // After: Only used imports
    import { Component, OnInit } from '@angular/core';

    export class MyComponent implements OnInit {}""")


class UnusedImportsRefactoringProvider(BaseRefactoringProvider):
    rule_id = "ts-unused-imports"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        line = self._line_of(context, v.line)
        return [RefactoringSuggestion(
            id=self._suggestion_id("remove"), rule_id=self.rule_id,
            title="Remove unused imports",
            description="Remove import statements that are not used in the code",
            transformations=[CodeTransformation(
                type=RefactoringType.DELETE, start_line=v.line, start_column=0, end_line=v.line, end_column=len(line),
                original_code=line, new_code="", description="Remove unused import",
            )],
            confidence=ConfidenceLevel.HIGH, confidence_score=90,
            reasoning="Unused imports can be safely removed",
            impact=RefactoringImpact(lines_changed=1, complexity="low", breaking_change=False, testing_required=False, estimated_time="1 minute"),
            preview=REMOVE_IMPORTS_PREVIEW,
        )]
