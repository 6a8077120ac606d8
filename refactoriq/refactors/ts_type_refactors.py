"""Refactoring providers for TypeScript type violations."""
from __future__ import annotations

import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["MissingTypeRefactoringProvider", "NoAnyRefactoringProvider"]

TYPE_ANNOTATION_PREVIEW = textwrap.dedent("""\
    // Before: Missing type annotations
    function processData(data) {
      return data.map(item => item.value);
    }

    // After: With type annotations
    interface DataItem {
      value: string;
    }

    function processData(data: DataItem[]): string[] {
      return data.map(item => item.value);
    }""")

UNKNOWN_PREVIEW = textwrap.dedent("""\
    // Before: Using any
    function handleData(data: any): any {
      return data.process();
    }

    // After: Using unknown with type guard
    function handleData(data: unknown): unknown {
      if (typeof data === 'object' && data !== null && 'process' in data) {
        return (data as { process: () => unknown }).process();
      }
      throw new Error('Invalid data');
    }""")

INTERFACE_PREVIEW = textwrap.dedent("""\
    // Before: Using any
    function handleData(data: any): any {
      return data.process();
    }

    // After: Using specific interface
    interface ProcessableData {
      process(): Result;
    }

    function handleData(data: ProcessableData): Result {
      return data.process();
    }""")


class MissingTypeRefactoringProvider(BaseRefactoringProvider):
    rule_id = "ts-missing-types"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        line = self._line_of(context, v.line)
        close = line.find(")", self._offset(v))
        if close == -1:
            close = len(line)
            original, new_code = "", ": void"
        else:
            original, new_code = ")", "): void"
        return [RefactoringSuggestion(
            id=self._suggestion_id("add-types"), rule_id=self.rule_id,
            title="Add explicit type annotations",
            description="Add type annotations to function parameters and return types",
            transformations=[CodeTransformation(
                type=RefactoringType.REPLACE, start_line=v.line, start_column=close, end_line=v.line,
                end_column=close + len(original), original_code=original, new_code=new_code,
                description="Add return type annotation",
            )],
            confidence=ConfidenceLevel.MEDIUM, confidence_score=60,
            reasoning="Type inference may provide hints, but explicit types are clearer",
            impact=RefactoringImpact(lines_changed=1, complexity="low", breaking_change=False, testing_required=False, estimated_time="5 minutes"),
            preview=TYPE_ANNOTATION_PREVIEW,
        )]


class NoAnyRefactoringProvider(BaseRefactoringProvider):
    rule_id = "ts-no-any"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        return [
            RefactoringSuggestion(
                id=self._suggestion_id("unknown"), rule_id=self.rule_id,
                title="Replace any with unknown",
                description="Use unknown type for truly unknown data with type guards",
                transformations=[self._replace_any(context, "unknown", "Replace any with unknown")],
                confidence=ConfidenceLevel.HIGH, confidence_score=85,
                reasoning="unknown is type-safe alternative to any",
                impact=RefactoringImpact(lines_changed=1, complexity="low", breaking_change=True, testing_required=True, estimated_time="5 minutes"),
                preview=UNKNOWN_PREVIEW,
            ),
            RefactoringSuggestion(
                id=self._suggestion_id("interface"), rule_id=self.rule_id,
                title="Create specific interface",
                description="Define a specific interface for the data structure",
                transformations=[self._replace_any(context, "DataType", "Replace any with specific interface")],
                confidence=ConfidenceLevel.MEDIUM, confidence_score=70,
                reasoning="Specific types provide better type safety",
                impact=RefactoringImpact(lines_changed=5, complexity="medium", breaking_change=False, testing_required=True, estimated_time="10 minutes"),
                preview=INTERFACE_PREVIEW,
            ),
        ]

    def _replace_any(self, context: RefactoringContext, new_code: str, description: str) -> CodeTransformation:
        v = context.violation
        start = self._offset(v)
        return CodeTransformation(
            type=RefactoringType.REPLACE, start_line=v.line, start_column=start, end_line=v.line, end_column=start + 3,
            original_code="any", new_code=new_code, description=description,
        )
