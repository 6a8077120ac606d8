"""ESTree adapter – loads syntax trees emitted by an external ESTree parser.

Parsing GlideScript and TypeScript is owned by upstream tools (acorn,
typescript-estree).  Their JSON output is read here and normalized into a
:class:`ParseResult`.  Two document shapes are accepted: a bare ``Program``
node, or an envelope ``{"ast": {...}, "errors": [{"message", "line", "column"}]}``.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Mapping

from refactoriq.adapters.base import BaseParserAdapter, ParseError, ParseResult
from refactoriq.core.syntax_tree import Language, SyntaxTree

__all__ = ["EstreeJsonAdapter", "AST_SUFFIX"]

logger = logging.getLogger(__name__)

AST_SUFFIX = ".ast.json"

_SUPPORTED_SUFFIXES = {".js", ".ts", ".tsx", ".mts", ".cts"}


class EstreeJsonAdapter(BaseParserAdapter):
    """Adapter that reads a pre-parsed ESTree JSON document for a source file.

    When *ast_path* is omitted, ``<file_name>.ast.json`` next to the source is used.
    """

    def __init__(self, ast_path: Path | None = None) -> None:
        self.ast_path = ast_path

    def supports(self, file_name: str) -> bool:
        return Path(file_name).suffix.lower() in _SUPPORTED_SUFFIXES

    def parse(self, source_code: str, file_name: str) -> ParseResult:
        started = time.perf_counter()
        path = self.ast_path or Path(file_name + AST_SUFFIX)
        if not path.is_file():
            logger.debug("No syntax tree found at %s", path)
            return self._result(
                SyntaxTree.empty(), source_code, file_name, started,
                [ParseError(message=f"No syntax tree available for {file_name}")],
            )
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Unreadable syntax tree file %s: %s", path, exc)
            return self._result(
                SyntaxTree.empty(), source_code, file_name, started,
                [ParseError(message=f"Unreadable syntax tree: {exc}")],
            )
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Malformed syntax tree JSON: %s", path)
            return self._result(
                SyntaxTree.empty(), source_code, file_name, started,
                [ParseError(message=f"Malformed syntax tree: {exc.msg}", line=exc.lineno, column=exc.colno - 1, index=exc.pos)],
            )
        return self.parse_document(document, source_code, file_name, started=started)

    def parse_document(
        self,
        document: Mapping[str, Any],
        source_code: str,
        file_name: str,
        *,
        started: float | None = None,
    ) -> ParseResult:
        """Build a result from an in-memory ESTree document."""
        started = time.perf_counter() if started is None else started
        if not isinstance(document, Mapping):
            return self._result(
                SyntaxTree.empty(), source_code, file_name, started,
                [ParseError(message="Syntax tree document must be a JSON object")],
            )
        raw_errors = document.get("errors")
        if not isinstance(raw_errors, list):
            raw_errors = []
        errors = [_parse_error(e) for e in raw_errors if isinstance(e, Mapping)]
        raw_ast = document.get("ast", document)
        try:
            tree = SyntaxTree.from_dict(raw_ast)
        except (KeyError, TypeError, ValueError, RecursionError) as exc:
            errors.append(ParseError(message=f"Invalid syntax tree: {exc}"))
            tree = SyntaxTree.empty()
        return self._result(tree, source_code, file_name, started, errors)

    @staticmethod
    def _result(
        tree: SyntaxTree, source_code: str, file_name: str, started: float, errors: list[ParseError]
    ) -> ParseResult:
        return ParseResult(
            tree=tree,
            source_code=source_code,
            file_name=file_name,
            language=Language.from_filename(file_name),
            parse_time=(time.perf_counter() - started) * 1000,
            errors=errors,
        )


def _parse_error(raw: Mapping[str, Any]) -> ParseError:
    return ParseError(
        message=str(raw.get("message", "Unknown parse error")),
        line=_as_int(raw.get("line"), 1),
        column=_as_int(raw.get("column"), 0),
        index=_as_int(raw.get("index"), None),
    )


def _as_int(value: Any, default: int | None) -> int | None:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
