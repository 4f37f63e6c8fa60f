"""Console status output for extdev.

User-facing status lines go through rich consoles; debug detail goes through
the ``extdev`` logger so it follows the configured verbosity.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()
error_console = Console(stderr=True)

logger = logging.getLogger("extdev")


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with source paths
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    # Only add handler if not already configured
    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def status(message: str) -> None:
    """Print a progress message."""
    console.print(f"[cyan]→[/cyan] {escape(message)}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}")


def error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {escape(message)}")


def debug(message: str) -> None:
    """Log a debug message (only shown at -vv or higher)."""
    logger.debug(message)


def bullets(title: str, items: list[str]) -> None:
    """Print a bold title followed by a bulleted list."""
    console.print()
    console.print(f"[bold]{escape(title)}[/bold]")
    for item in items:
        console.print(f"  • {escape(item)}")
