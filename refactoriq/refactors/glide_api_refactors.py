"""Refactoring providers for deprecated Glide API usage."""
from __future__ import annotations

import re
import textwrap

from refactoriq.refactors.base_provider import (
    BaseRefactoringProvider, CodeTransformation, ConfidenceLevel, RefactoringContext,
    RefactoringImpact, RefactoringSuggestion, RefactoringType,
)

__all__ = ["DeprecatedGlideAjaxRefactoringProvider", "LogToErrorRefactoringProvider"]

_GET_XML_WAIT_CALL_RE = re.compile(r"getXMLWait\s*\([^)]*\)")

ASYNC_PREVIEW = textwrap.dedent("""\
    // Before: Synchronous (deprecated)
    var ga = new GlideAjax('MyScriptInclude');
    ga.addParam('sysparm_name', 'myFunction');
    var response = ga.getXMLWait();
    var answer = response.responseXML.documentElement.getAttribute('answer');
    processAnswer(answer);

    // After: Asynchronous
    var ga = new GlideAjax('MyScriptInclude');
    ga.addParam('sysparm_name', 'myFunction');
    ga.getXML(function(response) {
      var answer = response.responseXML.documentElement.getAttribute('answer');
      processAnswer(answer);
    });""")

ERROR_PREVIEW = textwrap.dedent("""\
    // Before: Using gs.log for errors
    gs.log('ERROR: Failed to process record');
    gs.log('Exception occurred: ' + ex);

    // After: Using gs.error
    gs.error('Failed to process record');
    gs.error('Exception occurred: ' + ex);""")


class DeprecatedGlideAjaxRefactoringProvider(BaseRefactoringProvider):
    rule_id = "glide-deprecated-ajax"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        line = self._line_of(context, v.line)
        match = _GET_XML_WAIT_CALL_RE.search(line, self._offset(v))
        if match:
            start, end, original = match.start(), match.end(), match.group(0)
        else:
            start = self._offset(v)
            end = start + len("getXMLWait()")
            original = "getXMLWait()"
        return [RefactoringSuggestion(
            id=self._suggestion_id("async"), rule_id=self.rule_id,
            title="Replace getXMLWait with async getXML",
            description="Convert synchronous GlideAjax call to asynchronous pattern",
            transformations=[CodeTransformation(
                type=RefactoringType.REPLACE, start_line=v.line, start_column=start, end_line=v.line, end_column=end,
                original_code=original, new_code="getXML(callback)", description="Replace with async getXML",
            )],
            confidence=ConfidenceLevel.HIGH, confidence_score=90,
            reasoning="Direct replacement of deprecated synchronous method with async equivalent",
            impact=RefactoringImpact(lines_changed=5, complexity="low", breaking_change=False, testing_required=True, estimated_time="5 minutes"),
            preview=ASYNC_PREVIEW,
        )]


class LogToErrorRefactoringProvider(BaseRefactoringProvider):
    rule_id = "glide-log-for-errors"

    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        v = context.violation
        line = self._line_of(context, v.line)
        start = line.find("gs.log", self._offset(v))
        if start == -1:
            start = self._offset(v)
        return [RefactoringSuggestion(
            id=self._suggestion_id("to-error"), rule_id=self.rule_id,
            title="Replace gs.log with gs.error",
            description="Use gs.error() for error messages instead of gs.log()",
            transformations=[CodeTransformation(
                type=RefactoringType.REPLACE, start_line=v.line, start_column=start, end_line=v.line, end_column=start + 6,
                original_code="gs.log", new_code="gs.error", description="Replace gs.log with gs.error",
            )],
            confidence=ConfidenceLevel.HIGH, confidence_score=95,
            reasoning="Simple string replacement for proper log level",
            impact=RefactoringImpact(lines_changed=1, complexity="low", breaking_change=False, testing_required=False, estimated_time="1 minute"),
            preview=ERROR_PREVIEW,
        )]
