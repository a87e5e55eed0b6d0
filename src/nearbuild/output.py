"""Terminal output for nearbuild.

Two kinds of text leave the process:

* **Build status** -- the lines a build prints about itself: the reason a
  container build was abandoned, the ``WARNING!`` that the artifact will not
  be SourceScan-verifiable, and finally the artifact path. These go to
  stdout, in that order, so a log of stdout tells the whole story of one
  build. With ``--json`` stdout is reserved for the JSON document and build
  status moves to stderr.
* **Diagnostics** -- errors, success and progress messages, suggestions and
  ``--verbose`` debug lines. These always go to stderr.

Rich formatting is used when stdout is a terminal; ``NO_COLOR``,
``TERM=dumb`` and ``--no-color`` switch every message to plain ``print``.

:class:`OutputManager` holds the preferences and is installed once by
:func:`~nearbuild.app.main_callback`; the module-level helpers
(:func:`info`, :func:`warning`, ...) delegate to it.
:func:`configure_logging` sends the package's ``logging`` records to stderr
through Rich.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax


class OutputFormat(str, Enum):
    """Output format of the data written to stdout.

    ``AUTO`` becomes ``RICH`` on an interactive, coloured terminal and
    ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes data, build status and diagnostics to the right stream.

    Args:
        format: Desired output format. ``AUTO`` resolves based on TTY
            detection.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational and success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_terminal = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_terminal else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format."""
        return self._format

    def _emit(self, plain: str, markup: str, stdout: bool = False) -> None:
        # Build status falls back to stderr when stdout carries JSON.
        to_stdout = stdout and self._format != OutputFormat.JSON
        if self._no_color:
            print(plain, file=sys.stdout if to_stdout else sys.stderr, flush=True)
        else:
            (self._stdout if to_stdout else self._stderr).print(markup)

    # --- stdout data ---

    def format_response(self, data: Any) -> None:
        """Write a JSON-serialisable document to stdout.

        Highlighted on a rich terminal, plain indented JSON otherwise.
        """
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.RICH:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        else:
            self.print_data(text)

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    # --- messages ---

    def info(self, message: str, stdout: bool = False) -> None:
        """Informational line, on stdout for build status. Hidden by ``--quiet``."""
        if not self._quiet:
            self._emit(message, escape(message), stdout)

    def warning(self, message: str, stdout: bool = False) -> None:
        """``WARNING!`` line in red, on stdout for build status. Never hidden."""
        self._emit(
            f"WARNING! {message}",
            f"[bold red]WARNING![/bold red] [red]{escape(message)}[/red]",
            stdout,
        )

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def suggest(self, message: str) -> None:
        if not self._quiet:
            self._emit(f"→ {message}", f"[dim]→ {escape(message)}[/dim]")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (to anything) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


def configure_logging(verbose: bool) -> None:
    """Attach a stderr handler to the ``nearbuild`` logger.

    At ``--verbose`` the level is DEBUG, otherwise WARNING. Calling this
    again replaces the previously installed handler.
    """
    logger = logging.getLogger("nearbuild")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


# --- global instance (set during app startup) ---

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager`; used between tests."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def info(message: str, stdout: bool = False) -> None:
    get_output().info(message, stdout)


def warning(message: str, stdout: bool = False) -> None:
    get_output().warning(message, stdout)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
