"""Rich-based logging setup and terminal output helpers for RefactorIQ."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

__all__ = [
    "console",
    "print_success",
    "print_warning",
    "print_error",
    "print_info",
    "create_table",
    "create_panel",
    "setup_logging",
    "get_logger",
]

_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "info": "bold cyan",
        "muted": "dim",
        "accent": "bold magenta",
    }
)

console = Console(theme=_THEME)

_ROOT_LOGGER = "refactoriq"


def print_success(message: str) -> None:
    """Print a success message with a checkmark."""
    console.print(f"[success]✔[/success] {message}")


def print_warning(message: str) -> None:
    """Print a warning message with a caution sign."""
    console.print(f"[warning]⚠[/warning] {message}")


def print_error(message: str) -> None:
    """Print an error message with a cross."""
    console.print(f"[error]✖[/error] {message}")


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[info]ℹ[/info] {message}")


def create_table(
    title: str,
    columns: list[tuple[str, str]],
    rows: list[list[str]],
) -> Table:
    """Create a Rich table with the given columns and rows."""
    table = Table(title=title, show_lines=True, expand=True)
    for header, style in columns:
        table.add_column(header, style=style)
    for row in rows:
        table.add_row(*row)
    return table


def create_panel(
    content: str,
    title: str,
    style: str = "cyan",
    subtitle: str | None = None,
) -> Panel:
    """Create a Rich panel around plain (unmarked-up) text such as source code."""
    return Panel(
        Text(content),
        title=title,
        subtitle=subtitle,
        border_style=style,
        expand=True,
        padding=(0, 1),
    )


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Route the ``refactoriq`` loggers through a stderr :class:`RichHandler`.

    ``verbose`` enables DEBUG, ``quiet`` keeps only ERROR; the default is WARNING.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True, theme=_THEME),
            rich_tracebacks=True,
            show_path=verbose,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the ``refactoriq`` logger, or a child of it for *name*."""
    if not name:
        return logging.getLogger(_ROOT_LOGGER)
    if name == _ROOT_LOGGER or name.startswith(_ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")
