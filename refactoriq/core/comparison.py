"""Before/after rendering of refactoring suggestions.

Comparisons are previews: transformations are applied to an in-memory copy
of the source, never to a file.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass

from refactoriq.refactors.base_provider import CodeTransformation, RefactoringSuggestion, RefactoringType

__all__ = ["Comparison", "apply_transformations", "build_comparison"]


@dataclass(frozen=True)
class Comparison:
    suggestion_id: str
    title: str
    before: str
    after: str
    diff: str
    preview: str | None = None

    @property
    def changed(self) -> bool:
        return self.before != self.after


def apply_transformations(source: str, transformations: list[CodeTransformation]) -> str:
    """Apply *transformations* bottom-up so earlier edits keep their line numbers."""
    lines = source.split("\n")
    ordered = sorted(transformations, key=lambda t: (t.start_line, t.start_column), reverse=True)
    for t in ordered:
        _apply(lines, t)
    return "\n".join(lines)


def _apply(lines: list[str], t: CodeTransformation) -> None:
    if not 1 <= t.start_line <= t.end_line <= len(lines):
        raise ValueError(
            f"Transformation span {t.start_line}-{t.end_line} is outside the source ({len(lines)} lines)"
        )
    first = lines[t.start_line - 1]
    last = lines[t.end_line - 1]
    before = first[: min(t.start_column, len(first))]
    after = last[min(t.end_column, len(last)):]
    merged = before + t.new_code + after
    # A delete that empties its lines removes them.
    replacement = [] if t.type is RefactoringType.DELETE and not merged else merged.split("\n")
    lines[t.start_line - 1 : t.end_line] = replacement


def build_comparison(source: str, suggestion: RefactoringSuggestion, file_name: str = "source") -> Comparison:
    after = apply_transformations(source, suggestion.transformations)
    diff = "".join(
        difflib.unified_diff(
            source.splitlines(keepends=True),
            after.splitlines(keepends=True),
            fromfile=f"a/{file_name}",
            tofile=f"b/{file_name}",
        )
    )
    return Comparison(
        suggestion_id=suggestion.id,
        title=suggestion.title,
        before=source,
        after=after,
        diff=diff,
        preview=suggestion.preview,
    )
