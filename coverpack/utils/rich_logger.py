"""
Rich logging for coverpack.

Provides colorful console logging for the command line using the rich library.
"""

import logging
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .logger import _check_level, add_file_handler


def setup_logging(level: str = "INFO", log_file: Optional[str] = None,
                  console: Optional[Console] = None) -> Console:
    """
    Setup rich logging on the root logger.

    Args:
        level: Log level
        log_file: Optional rotating log file written alongside the console
        console: Console to log to (stderr by default)

    Returns:
        The console used by the handler
    """
    numeric_level = _check_level(level)
    console = console or Console(stderr=True)

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=numeric_level <= logging.DEBUG,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()
    root_logger.addHandler(rich_handler)

    if log_file:
        add_file_handler(root_logger, log_file, level)

    return console


def print_table(console: Console, title: str, data: Dict[str, Any]) -> None:
    """Display key/value data in a rich table."""
    table = Table(title=title)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in data.items():
        table.add_row(str(key), str(value))
    console.print(table)
