"""Refactoring suggestion model and the provider interface."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from refactoriq.adapters.base import ParseResult
    from refactoriq.rules.base_rule import RuleViolation

__all__ = [
    "RefactoringType",
    "ConfidenceLevel",
    "CodeTransformation",
    "RefactoringImpact",
    "RefactoringSuggestion",
    "RefactoringContext",
    "BaseRefactoringProvider",
]

Complexity = Literal["low", "medium", "high"]


class RefactoringType(str, Enum):
    REPLACE = "replace"
    INSERT = "insert"
    DELETE = "delete"
    MOVE = "move"
    EXTRACT = "extract"
    INLINE = "inline"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_score(cls, score: int) -> ConfidenceLevel:
        if score >= 80:
            return cls.HIGH
        if score >= 50:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class CodeTransformation:
    """A single edit.  Lines are 1-based; columns are 0-based offsets into the line."""

    type: RefactoringType
    start_line: int
    start_column: int
    end_line: int
    end_column: int
    original_code: str
    new_code: str
    description: str

    @property
    def is_single_line(self) -> bool:
        return self.start_line == self.end_line


@dataclass(frozen=True)
class RefactoringImpact:
    lines_changed: int
    complexity: Complexity
    breaking_change: bool
    testing_required: bool
    estimated_time: str


@dataclass(frozen=True)
class RefactoringSuggestion:
    id: str
    rule_id: str
    title: str
    description: str
    transformations: list[CodeTransformation]
    confidence: ConfidenceLevel
    confidence_score: int
    reasoning: str
    impact: RefactoringImpact
    preview: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RefactoringContext:
    parse_result: ParseResult
    violation: RuleViolation
    file_name: str
    source_code: str


class BaseRefactoringProvider(ABC):
    """Generates candidate fixes for violations of one rule."""

    rule_id: str = "base"

    def can_refactor(self, violation: RuleViolation) -> bool:
        return violation.rule_id == self.rule_id

    @abstractmethod
    async def generate_suggestions(self, context: RefactoringContext) -> list[RefactoringSuggestion]:
        """Produce zero or more suggestions for ``context.violation``."""

    def _suggestion_id(self, slug: str) -> str:
        return f"{self.rule_id}-{slug}-{uuid.uuid4().hex[:8]}"

    @staticmethod
    def _offset(violation: RuleViolation) -> int:
        """0-based column of the violation start."""
        return max(violation.column - 1, 0)

    @staticmethod
    def _line_of(context: RefactoringContext, line: int) -> str:
        lines = context.source_code.splitlines()
        return lines[line - 1] if 0 < line <= len(lines) else ""

    @staticmethod
    def _span_text(context: RefactoringContext, start_line: int, start_col: int, end_line: int, end_col: int) -> str:
        lines = context.source_code.splitlines()
        if not 0 < start_line <= end_line <= len(lines):
            return ""
        if start_line == end_line:
            return lines[start_line - 1][start_col:end_col]
        chunk = [lines[start_line - 1][start_col:], *lines[start_line:end_line - 1], lines[end_line - 1][:end_col]]
        return "\n".join(chunk)
