"""Shared pytest fixtures for RefactorIQ test suite."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest

from refactoriq.adapters.base import ParseResult
from refactoriq.adapters.estree_adapter import EstreeJsonAdapter
from refactoriq.config.settings import RefactorIQSettings
from refactoriq.refactors.base_provider import (
    CodeTransformation, ConfidenceLevel, RefactoringImpact, RefactoringSuggestion, RefactoringType,
)
from refactoriq.rules.base_rule import IssueSeverity, RuleViolation

GLIDE_SOURCE = textwrap.dedent("""\
    var gr = new GlideRecord('incident');
    gr.query();
    while (gr.next()) {
      var child = new GlideRecord('problem');
      child.addQuery('incident', gr.sys_id);
      child.query();
    }
    gs.log('Error: failed to sync');
    var resp = ga.getXMLWait();
    var url = 'https://api.example.com';
""")

TS_SOURCE = textwrap.dedent("""\
    import { Component } from '@angular/core';
    import { unusedHelper } from './helpers';

    export function handle(data: any) {
      for (const a of data) {
        for (const b of a.items) {
          Component(b);
        }
      }
    }
""")

CLEAN_TS_SOURCE = "export const answer: number = 42;\n"


# -- ESTree builders ---------------------------------------------------------

def loc(line: int, col: int, end_line: int | None = None, end_col: int | None = None) -> dict[str, Any]:
    return {
        "start": {"line": line, "column": col},
        "end": {"line": end_line or line, "column": col if end_col is None else end_col},
    }


def node(node_type: str, at: tuple[int, ...] | None = None, /, **fields: Any) -> dict[str, Any]:
    out: dict[str, Any] = {"type": node_type, **fields}
    if at is not None:
        out["loc"] = loc(*at)
    return out


def ident(name: str, line: int = 1, col: int = 0) -> dict[str, Any]:
    return node("Identifier", (line, col, line, col + len(name)), name=name)


def literal(value: Any, line: int = 1, col: int = 0) -> dict[str, Any]:
    raw = repr(value)
    return node("Literal", (line, col, line, col + len(raw)), value=value, raw=raw)


def member_call(obj: str, prop: str, line: int, col: int, end_col: int, args: tuple = ()) -> dict[str, Any]:
    prop_col = col + len(obj) + 1
    callee = node(
        "MemberExpression", (line, col, line, prop_col + len(prop)),
        object=ident(obj, line, col), property=ident(prop, line, prop_col), computed=False,
    )
    return node("CallExpression", (line, col, line, end_col), callee=callee, arguments=list(args))


def statement(expression: dict[str, Any]) -> dict[str, Any]:
    return node("ExpressionStatement", None, expression=expression)


def program(*body: dict[str, Any]) -> dict[str, Any]:
    return node("Program", None, body=list(body), sourceType="script")


def glide_ast() -> dict[str, Any]:
    loop_body = node("BlockStatement", (3, 18, 7, 1), body=[
        statement(member_call("child", "addQuery", 5, 2, 39, (literal("incident", 5, 17),))),
        statement(member_call("child", "query", 6, 2, 15)),
    ])
    return program(
        statement(member_call("gr", "query", 2, 0, 10)),
        node("WhileStatement", (3, 0, 7, 1), test=member_call("gr", "next", 3, 7, 16), body=loop_body),
        statement(member_call("gs", "log", 8, 0, 31, (literal("Error: failed to sync", 8, 7),))),
    )


def ts_ast() -> dict[str, Any]:
    inner = node(
        "ForOfStatement", (6, 4, 8, 5),
        left=node("VariableDeclaration", None, kind="const", declarations=[]),
        right=node("MemberExpression", (6, 20, 6, 27), object=ident("a", 6, 20), property=ident("items", 6, 22)),
        body=node("BlockStatement", (6, 29, 8, 5), body=[
            statement(node("CallExpression", (7, 6, 7, 18), callee=ident("Component", 7, 6), arguments=[ident("b", 7, 16)])),
        ]),
    )
    outer = node(
        "ForOfStatement", (5, 2, 9, 3),
        left=node("VariableDeclaration", None, kind="const", declarations=[]),
        right=ident("data", 5, 18),
        body=node("BlockStatement", (5, 24, 9, 3), body=[inner]),
    )
    function = node(
        "FunctionDeclaration", (4, 7, 10, 1),
        id=ident("handle", 4, 16), params=[ident("data", 4, 23)],
        body=node("BlockStatement", (4, 34, 10, 1), body=[outer]),
    )
    return program(
        node("ImportDeclaration", (1, 0, 1, 42), specifiers=[
            node("ImportSpecifier", (1, 9, 1, 18), local=ident("Component", 1, 9), imported=ident("Component", 1, 9)),
        ], source=literal("@angular/core", 1, 26)),
        node("ImportDeclaration", (2, 0, 2, 41), specifiers=[
            node("ImportSpecifier", (2, 9, 2, 21), local=ident("unusedHelper", 2, 9), imported=ident("unusedHelper", 2, 9)),
        ], source=literal("./helpers", 2, 29)),
        node("ExportNamedDeclaration", (4, 0, 10, 1), declaration=function, specifiers=[]),
    )


def clean_ts_ast() -> dict[str, Any]:
    return program(node("ExportNamedDeclaration", (1, 0, 1, 33), declaration=None, specifiers=[]))


def make_parse_result(source: str, ast: dict[str, Any], file_name: str) -> ParseResult:
    return EstreeJsonAdapter().parse_document(ast, source, file_name)


def write_source(directory: Path, name: str, source: str, ast: dict[str, Any] | None) -> Path:
    path = directory / name
    path.write_text(source, encoding="utf-8")
    if ast is not None:
        (directory / f"{name}.ast.json").write_text(json.dumps(ast), encoding="utf-8")
    return path


def make_violation(rule_id: str = "ts-no-any", line: int = 1, column: int = 1, **kwargs: Any) -> RuleViolation:
    kwargs.setdefault("message", "violation")
    kwargs.setdefault("severity", IssueSeverity.MEDIUM)
    return RuleViolation(rule_id=rule_id, line=line, column=column, **kwargs)


def make_suggestion(
    rule_id: str = "ts-no-any",
    *,
    types: tuple[RefactoringType, ...] = (RefactoringType.REPLACE,),
    multi_line: bool = False,
    lines_changed: int = 1,
    breaking_change: bool = False,
    testing_required: bool = False,
    confidence_score: int = 0,
    suggestion_id: str = "s-1",
) -> RefactoringSuggestion:
    transformations = [
        CodeTransformation(
            type=t, start_line=1, start_column=0, end_line=3 if multi_line else 1, end_column=3,
            original_code="any", new_code="unknown", description="edit",
        )
        for t in types
    ]
    return RefactoringSuggestion(
        id=suggestion_id, rule_id=rule_id, title="Suggestion", description="A suggestion",
        transformations=transformations,
        confidence=ConfidenceLevel.from_score(confidence_score), confidence_score=confidence_score,
        reasoning="provider reasoning",
        impact=RefactoringImpact(
            lines_changed=lines_changed, complexity="low", breaking_change=breaking_change,
            testing_required=testing_required, estimated_time="1 minute",
        ),
    )


@pytest.fixture
def glide_parse_result() -> ParseResult:
    return make_parse_result(GLIDE_SOURCE, glide_ast(), "incident_sync.js")


@pytest.fixture
def ts_parse_result() -> ParseResult:
    return make_parse_result(TS_SOURCE, ts_ast(), "handler.ts")


@pytest.fixture
def clean_parse_result() -> ParseResult:
    return make_parse_result(CLEAN_TS_SOURCE, clean_ts_ast(), "clean.ts")


@pytest.fixture
def tmp_glide_file(tmp_path: Path) -> Path:
    return write_source(tmp_path, "incident_sync.js", GLIDE_SOURCE, glide_ast())


@pytest.fixture
def tmp_ts_file(tmp_path: Path) -> Path:
    return write_source(tmp_path, "handler.ts", TS_SOURCE, ts_ast())


@pytest.fixture
def tmp_clean_file(tmp_path: Path) -> Path:
    return write_source(tmp_path, "clean.ts", CLEAN_TS_SOURCE, clean_ts_ast())


@pytest.fixture
def default_settings() -> RefactorIQSettings:
    return RefactorIQSettings()
