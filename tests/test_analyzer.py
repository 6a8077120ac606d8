"""Tests for the analysis orchestrator."""
from __future__ import annotations
import json
from refactoriq.config.settings import RefactorIQSettings
from refactoriq.core.analyzer import RefactorIQEngine, load_parse_result
from refactoriq.rules.base_rule import IssueSeverity
from tests.conftest import GLIDE_SOURCE, write_source


def _analyze(parse_result, settings: RefactorIQSettings | None = None):
    with RefactorIQEngine(settings) as engine:
        return engine.run_analyze(parse_result)


class TestAnalyzeGlide:
    def test_issues_and_exit_code(self, glide_parse_result) -> None:
        report = _analyze(glide_parse_result)
        assert [i.type for i in report.issues] == [
            "glide-nested-query", "glide-query-no-conditions", "glide-deprecated-ajax",
            "glide-log-for-errors", "glide-hardcoded-values",
        ]
        assert report.stats == {"low": 2, "medium": 2, "high": 1, "critical": 0}
        assert report.exit_code == 2

    def test_suggestions_are_scored(self, glide_parse_result) -> None:
        report = _analyze(glide_parse_result)
        scores = {s.rule_id: s.confidence_score for s in report.suggestions}
        assert len(report.suggestions) == 6
        assert scores["glide-log-for-errors"] == 100
        assert scores["glide-deprecated-ajax"] == 93
        assert scores["glide-hardcoded-values"] == 83
        assert scores["glide-query-no-conditions"] == 61
        assert [s.confidence_score for s in report.suggestions_for("glide-nested-query")] == [73, 73]

    def test_auto_fix_disabled_by_default(self, glide_parse_result) -> None:
        assert _analyze(glide_parse_result).auto_fixable == []

    def test_auto_fix_enabled(self, glide_parse_result) -> None:
        settings = RefactorIQSettings(refactoring={"enable_auto_fix": True})
        report = _analyze(glide_parse_result, settings)
        assert sorted(s.rule_id for s in report.auto_fixable) == [
            "glide-deprecated-ajax", "glide-hardcoded-values", "glide-log-for-errors",
        ]

    def test_to_dict_is_json_serialisable(self, glide_parse_result) -> None:
        payload = json.loads(json.dumps(_analyze(glide_parse_result).to_dict(), default=str))
        assert payload["fileName"] == "incident_sync.js" and payload["language"] == "javascript"
        assert len(payload["issues"]) == 5 and payload["issues"][0]["endLine"] == 6
        assert payload["suggestions"][0]["transformations"][0]["type"] == "replace"


class TestAnalyzeTypeScript:
    def test_issues(self, ts_parse_result) -> None:
        report = _analyze(ts_parse_result)
        assert [i.type for i in report.issues] == ["ts-no-any", "ts-missing-types", "ts-unused-imports", "ts-large-loops"]
        assert report.exit_code == 1
        assert len(report.suggestions) == 5

    def test_clean_file(self, clean_parse_result) -> None:
        report = _analyze(clean_parse_result)
        assert report.issues == [] and report.suggestions == [] and report.exit_code == 0


class TestSettingsWiring:
    def test_disabled_rule(self, glide_parse_result) -> None:
        report = _analyze(glide_parse_result, RefactorIQSettings(rules={"disabled": ["glide-nested-query"]}))
        assert "glide-nested-query" not in {i.type for i in report.issues}
        assert report.exit_code == 1

    def test_unknown_disabled_rule_is_ignored(self, glide_parse_result) -> None:
        report = _analyze(glide_parse_result, RefactorIQSettings(rules={"disabled": ["no-such-rule"]}))
        assert len(report.issues) == 5

    def test_severity_override(self, glide_parse_result) -> None:
        settings = RefactorIQSettings(rules={"severity_overrides": {"glide-log-for-errors": "critical"}})
        report = _analyze(glide_parse_result, settings)
        assert report.stats["critical"] == 1
        assert [i.severity for i in report.issues if i.type == "glide-log-for-errors"] == [IssueSeverity.CRITICAL]

    def test_rule_options(self, ts_parse_result) -> None:
        settings = RefactorIQSettings(rules={"options": {"ts-large-loops": {"max_nesting": 2}}})
        assert "ts-large-loops" not in {i.type for i in _analyze(ts_parse_result, settings).issues}

    def test_suggestion_cap(self, glide_parse_result) -> None:
        settings = RefactorIQSettings(refactoring={"max_suggestions_per_violation": 1})
        report = _analyze(glide_parse_result, settings)
        assert len(report.suggestions_for("glide-nested-query")) == 1

    def test_rule_confidence_override(self, glide_parse_result) -> None:
        settings = RefactorIQSettings(scoring={"rule_confidence": {"glide-hardcoded-values": 10}})
        [suggestion] = _analyze(glide_parse_result, settings).suggestions_for("glide-hardcoded-values")
        assert suggestion.confidence_score == 23


class TestLoadParseResult:
    def test_sidecar(self, tmp_glide_file) -> None:
        result = load_parse_result(tmp_glide_file)
        assert not result.has_errors and result.source_code == GLIDE_SOURCE

    def test_missing_ast_still_runs_text_rules(self, tmp_path) -> None:
        path = write_source(tmp_path, "legacy.js", GLIDE_SOURCE, None)
        report = _analyze(load_parse_result(path))
        assert report.parse_errors
        assert [i.type for i in report.issues] == ["glide-deprecated-ajax", "glide-hardcoded-values"]

    def test_undecodable_ast_still_runs_text_rules(self, tmp_path) -> None:
        path = write_source(tmp_path, "legacy.js", GLIDE_SOURCE, None)
        (tmp_path / "legacy.js.ast.json").write_bytes(b"\xff\xfe{}")
        report = _analyze(load_parse_result(path))
        assert report.parse_errors[0].message.startswith("Unreadable syntax tree")
        assert [i.type for i in report.issues] == ["glide-deprecated-ajax", "glide-hardcoded-values"]
