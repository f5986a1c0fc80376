"""Coloured console narration used by test scenarios."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

import click


class Verbosity(str, Enum):
    """How much detail a scenario prints while it runs."""

    NORMAL = "normal"
    QUIET = "quiet"


class ScenarioConsole:
    """Echo helpers returning the pass/fail value they announce.

    A quiet console drops response bodies and progress marks; outcome lines
    from `good`, `bad` and `ugly` are always printed.
    """

    def __init__(
        self,
        verbosity: Verbosity = Verbosity.NORMAL,
        *,
        secho: Callable[..., Any] | None = None,
    ) -> None:
        self.verbosity = verbosity
        self._secho = secho or click.secho

    @property
    def quiet(self) -> bool:
        return self.verbosity == Verbosity.QUIET

    def good(self, message: str) -> bool:
        self._secho(message, fg="green")
        return True

    def bad(self, message: str) -> bool:
        self._secho(message, fg="red")
        return False

    def ugly(self, message: str) -> None:
        self._secho(message, fg="cyan")

    def echo(self, message: str) -> None:
        self._secho(message)

    def detail(self, message: str) -> None:
        """Print chatty output such as raw response bodies unless quiet."""
        if not self.quiet:
            self._secho(message)

    def progress(self, mark: str = ".") -> None:
        if not self.quiet:
            self._secho(mark, nl=False)

    def end_progress(self) -> None:
        if not self.quiet:
            self._secho("")
