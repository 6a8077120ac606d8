"""Abstract parser adapter and the normalized parse result it produces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from refactoriq.core.syntax_tree import Language, SyntaxTree

__all__ = ["ParseError", "ParseResult", "BaseParserAdapter"]


@dataclass(frozen=True)
class ParseError:
    """A parser diagnostic.  ``line`` is 1-based, ``column`` 0-based."""

    message: str
    line: int = 1
    column: int = 0
    index: int | None = None


@dataclass(frozen=True)
class ParseResult:
    """Normalized representation of one parsed source file."""

    tree: SyntaxTree
    source_code: str
    file_name: str
    language: Language
    parse_time: float = 0.0
    errors: list[ParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class BaseParserAdapter(ABC):
    """Interface that each upstream parser integration must implement."""

    @abstractmethod
    def parse(self, source_code: str, file_name: str) -> ParseResult:
        """Parse *source_code* and return a result; failures go into ``errors``, never raised."""

    @abstractmethod
    def supports(self, file_name: str) -> bool:
        """Return ``True`` if this adapter can handle *file_name*."""
