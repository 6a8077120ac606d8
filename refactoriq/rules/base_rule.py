"""Base rule interface and violation model for the RefactorIQ rule engine."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from refactoriq.core.syntax_tree import Language, Node

if TYPE_CHECKING:
    from refactoriq.adapters.base import ParseResult

__all__ = [
    "IssueSeverity",
    "RuleCategory",
    "RuleMetadata",
    "RuleContext",
    "RuleFix",
    "RuleViolation",
    "CodeIssue",
    "BaseRule",
]


class IssueSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RuleCategory(str, Enum):
    PERFORMANCE = "performance"
    BEST_PRACTICE = "best-practice"
    SECURITY = "security"
    MAINTAINABILITY = "maintainability"
    DEPRECATED = "deprecated"


@dataclass(frozen=True)
class RuleMetadata:
    id: str
    name: str
    description: str
    category: RuleCategory
    severity: IssueSeverity
    language: Language
    tags: tuple[str, ...] = ()
    documentation: str = ""

    def applies_to(self, language: Language) -> bool:
        return self.language is Language.BOTH or self.language is language


@dataclass(frozen=True)
class RuleContext:
    parse_result: ParseResult
    file_name: str
    source_code: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RuleFix:
    description: str
    range: tuple[int, int]
    replacement: str


@dataclass(frozen=True)
class RuleViolation:
    """One reported anti-pattern occurrence.  ``line`` and ``column`` are 1-based."""

    rule_id: str
    message: str
    severity: IssueSeverity
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None
    node: Node | None = field(default=None, compare=False, repr=False)
    fix: RuleFix | None = None


@dataclass(frozen=True)
class CodeIssue:
    """Storage-facing projection of a :class:`RuleViolation`."""

    id: str
    type: str
    severity: IssueSeverity
    message: str
    line: int
    column: int
    file_name: str
    end_line: int | None = None
    end_column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "severity": self.severity.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "endLine": self.end_line,
            "endColumn": self.end_column,
            "fileName": self.file_name,
        }


class BaseRule(ABC):
    metadata: RuleMetadata

    @abstractmethod
    def check(self, context: RuleContext) -> list[RuleViolation]:
        """Inspect the parsed file and return any violations found."""

    def _violation(
        self,
        message: str,
        line: int,
        column: int,
        *,
        node: Node | None = None,
        end_line: int | None = None,
        end_column: int | None = None,
        fix: RuleFix | None = None,
    ) -> RuleViolation:
        return RuleViolation(
            rule_id=self.metadata.id,
            message=message,
            severity=self.metadata.severity,
            line=line,
            column=column,
            end_line=end_line,
            end_column=end_column,
            node=node,
            fix=fix,
        )

    def _node_violation(self, message: str, node: Node) -> RuleViolation:
        """Violation located at *node*, converting its 0-based columns to 1-based."""
        loc = node.loc
        return self._violation(
            message,
            node.line,
            node.column + 1,
            node=node,
            end_line=loc.end_line if loc else None,
            end_column=loc.end_column + 1 if loc else None,
        )
