"""Refactoring providers for GlideRecord query violations."""
from __future__ import annotations

import re
import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["NestedQueryRefactoringProvider", "QueryConditionsRefactoringProvider"]

_RECEIVER_RE = re.compile(r"(\w+)\s*\.\s*query\s*\(")

AGGREGATE_PREVIEW = textwrap.dedent("""\
    // Before: Nested query
    var gr1 = new GlideRecord('incident');
    gr1.query();
    while (gr1.next()) {
      var gr2 = new GlideRecord('problem');
      gr2.addQuery('incident', gr1.sys_id);
      gr2.query();
      var count = gr2.getRowCount();
    }

    // After: GlideAggregate
    var ga = new GlideAggregate('problem');
    ga.addAggregate('COUNT');
    ga.groupBy('incident');
    ga.query();
    while (ga.next()) {
      var incidentId = ga.incident;
      var count = ga.getAggregate('COUNT');
    }""")

ENCODED_QUERY_PREVIEW = textwrap.dedent("""\
    // Before: Nested query
    var gr1 = new GlideRecord('incident');
    gr1.query();
    while (gr1.next()) {
      var gr2 = new GlideRecord('problem');
      gr2.addQuery('incident', gr1.sys_id);
      gr2.query();
    }

    // After: Collect IDs and use IN
    var incidentIds = [];
    var gr1 = new GlideRecord('incident');
    gr1.query();
    while (gr1.next()) {
      incidentIds.push(gr1.sys_id.toString());
    }
    var gr2 = new GlideRecord('problem');
    gr2.addQuery('incident', 'IN', incidentIds.join(','));
    gr2.query();
    while (gr2.next()) {
      // Process gr2
    }""")

CONDITIONS_PREVIEW = textwrap.dedent("""\
    // Before: Query without conditions
    var gr = new GlideRecord('incident');
    gr.query();

    // After: Query with conditions
    var gr = new GlideRecord('incident');
    gr.addQuery('active', true);
    gr.addQuery('priority', '<=', 3);
    gr.query();""")


class NestedQueryRefactoringProvider(BaseRefactoringProvider):
    rule_id = "glide-nested-query"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        return [
            RefactoringSuggestion(
                id=self._suggestion_id("aggregate"), rule_id=self.rule_id,
                title="Use GlideAggregate for counting",
                description="Replace nested query with GlideAggregate to count related records",
                transformations=[self._replace_call(context, "// Use GlideAggregate here", "Replace with GlideAggregate")],
                confidence=ConfidenceLevel.MEDIUM, confidence_score=65,
                reasoning="GlideAggregate is more efficient for counting operations",
                impact=RefactoringImpact(lines_changed=5, complexity="medium", breaking_change=False, testing_required=True, estimated_time="10 minutes"),
                preview=AGGREGATE_PREVIEW,
            ),
            RefactoringSuggestion(
                id=self._suggestion_id("encoded"), rule_id=self.rule_id,
                title="Use encoded query with IN operator",
                description="Collect IDs and use a single query with IN operator",
                transformations=[self._replace_call(context, "// Use IN operator here", "Replace with IN operator query")],
                confidence=ConfidenceLevel.HIGH, confidence_score=85,
                reasoning="Single query with IN operator is more efficient than nested queries",
                impact=RefactoringImpact(lines_changed=8, complexity="medium", breaking_change=False, testing_required=True, estimated_time="15 minutes"),
                preview=ENCODED_QUERY_PREVIEW,
            ),
        ]

    def _replace_call(self, context: RefactoringContext, new_code: str, description: str) -> CodeTransformation:
        v = context.violation
        start_col = self._offset(v)
        end_line = v.end_line or v.line
        end_col = v.end_column - 1 if v.end_column else len(self._line_of(context, end_line))
        return CodeTransformation(
            type=RefactoringType.REPLACE, start_line=v.line, start_column=start_col,
            end_line=end_line, end_column=end_col,
            original_code=self._span_text(context, v.line, start_col, end_line, end_col),
            new_code=new_code, description=description,
        )


class QueryConditionsRefactoringProvider(BaseRefactoringProvider):
    rule_id = "glide-query-no-conditions"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        line = self._line_of(context, v.line)
        match = _RECEIVER_RE.search(line)
        receiver = match.group(1) if match else "gr"
        indent = line[: len(line) - len(line.lstrip())]
        return [RefactoringSuggestion(
            id=self._suggestion_id("add-conditions"), rule_id=self.rule_id,
            title="Add query conditions",
            description="Add addQuery() conditions before calling query()",
            transformations=[CodeTransformation(
                type=RefactoringType.INSERT, start_line=v.line, start_column=0, end_line=v.line, end_column=0,
                original_code="", new_code=f"{indent}{receiver}.addQuery('active', true);\n",
                description="Add query condition",
            )],
            confidence=ConfidenceLevel.LOW, confidence_score=40,
            reasoning="Requires domain knowledge to determine appropriate conditions",
            impact=RefactoringImpact(lines_changed=2, complexity="low", breaking_change=False, testing_required=True, estimated_time="5 minutes"),
            preview=CONDITIONS_PREVIEW,
        )]
