"""Scenario console tests."""

from __future__ import annotations

from typing import Any

from pipeline_e2e_tester.console_output import ScenarioConsole, Verbosity


class _RecordingSecho:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def __call__(self, message: str, **kwargs: Any) -> None:
        self.calls.append((message, kwargs))


def test_good_and_bad_return_the_verdict_they_print() -> None:
    secho = _RecordingSecho()
    console = ScenarioConsole(secho=secho)

    assert console.good("passed") is True
    assert console.bad("failed") is False
    console.ugly("starting")

    assert secho.calls == [
        ("passed", {"fg": "green"}),
        ("failed", {"fg": "red"}),
        ("starting", {"fg": "cyan"}),
    ]


def test_quiet_console_drops_details_and_progress_but_keeps_outcomes() -> None:
    secho = _RecordingSecho()
    console = ScenarioConsole(Verbosity.QUIET, secho=secho)

    console.detail('{"id": "x"}')
    console.progress()
    console.end_progress()
    console.bad("***waters Test FAILED***")

    assert console.quiet is True
    assert secho.calls == [("***waters Test FAILED***", {"fg": "red"})]


def test_progress_marks_stay_on_one_line() -> None:
    secho = _RecordingSecho()
    console = ScenarioConsole(secho=secho)

    console.progress()
    console.progress("+")
    console.end_progress()

    assert secho.calls == [(".", {"nl": False}), ("+", {"nl": False}), ("", {})]


def test_default_console_writes_to_stdout(capsys) -> None:
    ScenarioConsole().echo("Response to POST: 201")

    assert "Response to POST: 201" in capsys.readouterr().out
