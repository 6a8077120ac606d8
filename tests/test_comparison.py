"""Tests for before/after comparisons."""
from __future__ import annotations
from dataclasses import replace
import pytest
from refactoriq.core.comparison import apply_transformations, build_comparison
from refactoriq.refactors.base_provider import CodeTransformation, RefactoringType
from tests.conftest import TS_SOURCE, make_suggestion


def _t(kind, start_line, start_col, end_line, end_col, new_code) -> CodeTransformation:
    return CodeTransformation(
        type=kind, start_line=start_line, start_column=start_col, end_line=end_line, end_column=end_col,
        original_code="", new_code=new_code, description="edit",
    )


class TestApplyTransformations:
    def test_single_line_replace(self) -> None:
        assert apply_transformations("let a: any;\n", [_t(RefactoringType.REPLACE, 1, 7, 1, 10, "unknown")]) == "let a: unknown;\n"

    def test_insert_line(self) -> None:
        source = "var gr = x;\ngr.query();\n"
        out = apply_transformations(source, [_t(RefactoringType.INSERT, 2, 0, 2, 0, "gr.addQuery('active', true);\n")])
        assert out == "var gr = x;\ngr.addQuery('active', true);\ngr.query();\n"

    def test_delete_removes_line(self) -> None:
        source = "import a;\nimport b;\nuse(a);\n"
        assert apply_transformations(source, [_t(RefactoringType.DELETE, 2, 0, 2, 9, "")]) == "import a;\nuse(a);\n"

    def test_multi_line_replace(self) -> None:
        source = "a\n  for (x) {\n    y();\n  }\nb\n"
        out = apply_transformations(source, [_t(RefactoringType.REPLACE, 2, 2, 4, 3, "xs.forEach(y);")])
        assert out == "a\n  xs.forEach(y);\nb\n"

    def test_several_edits_keep_positions(self) -> None:
        source = "one\ntwo\nthree\n"
        out = apply_transformations(source, [
            _t(RefactoringType.REPLACE, 1, 0, 1, 3, "ONE"),
            _t(RefactoringType.REPLACE, 3, 0, 3, 5, "THREE"),
        ])
        assert out == "ONE\ntwo\nTHREE\n"

    def test_columns_clamp_to_line_length(self) -> None:
        assert apply_transformations("abc", [_t(RefactoringType.REPLACE, 1, 1, 1, 99, "Z")]) == "aZ"

    @pytest.mark.parametrize("start,end", [(0, 1), (2, 1), (1, 9)])
    def test_out_of_range_lines(self, start, end) -> None:
        with pytest.raises(ValueError):
            apply_transformations("a\nb", [_t(RefactoringType.REPLACE, start, 0, end, 0, "x")])


class TestBuildComparison:
    def test_unified_diff(self) -> None:
        suggestion = make_suggestion()
        comparison = build_comparison("any\n", suggestion, file_name="x.ts")
        assert comparison.before == "any\n" and comparison.after == "unknown\n"
        assert comparison.changed
        assert "--- a/x.ts" in comparison.diff and "+++ b/x.ts" in comparison.diff
        assert "-any" in comparison.diff and "+unknown" in comparison.diff
        assert comparison.suggestion_id == suggestion.id

    def test_identical_edit_is_unchanged(self) -> None:
        first_line = TS_SOURCE.splitlines()[0]
        edit = _t(RefactoringType.REPLACE, 1, 0, 1, len(first_line), first_line)
        comparison = build_comparison(TS_SOURCE, replace(make_suggestion(), transformations=[edit]))
        assert not comparison.changed and comparison.diff == ""
