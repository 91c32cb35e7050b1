"""Rich logging integration for tormeta."""

from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from typing import TextIO

_MARKUP_PATTERN = re.compile(r"\[/?[^\]]+\]")


def strip_rich_markup(text: str) -> str:
    """Strip Rich markup such as ``[red]`` or ``[/bold]`` from ``text``."""
    return _MARKUP_PATTERN.sub("", text)


class FileFormatter(logging.Formatter):
    """Formatter for file output that strips Rich markup."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, stripping Rich markup for file output."""
        return strip_rich_markup(super().format(record))


def create_rich_handler(
    console: Console | None = None,
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    stream: TextIO | None = None,
) -> RichHandler:
    """Create a RichHandler writing to stderr.

    Logs go to stderr so command output on stdout stays machine-readable.
    """
    if console is None:
        console = Console(file=stream or sys.stderr, markup=True)

    return RichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=True,
    )
