"""Scenario runner tests."""

from __future__ import annotations

import random
from pathlib import Path

import pytest
from pipeline_e2e_tester.configuration.runtime_settings import PipelineCatalog, TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.payload_production import FakePayloadProducer
from pipeline_e2e_tester.scenario_catalog import (
    Classification,
    E2ETestCase,
    E2ETestOptions,
    FatalRunError,
    ScenarioRegistry,
    ScenarioServices,
    run_tests,
)
from pipeline_e2e_tester.submission import SubmissionError

ENVIRONMENT = TargetEnvironment(
    name="local",
    endpoint="http://localhost:7071/api/reports",
    database_markers=("localhost",),
    requires_key=False,
)

executed: list[str] = []


class _Passing(E2ETestCase):
    name = "alpha"
    description = "always passes"
    classification = Classification.SMOKE

    def execute(self, environment, options, console) -> bool:
        executed.append(self.name)
        return True


class _Failing(E2ETestCase):
    name = "beta"
    description = "always fails"
    classification = Classification.SMOKE

    def execute(self, environment, options, console) -> bool:
        executed.append(self.name)
        raise SubmissionError("connection reset")


class _Crashing(E2ETestCase):
    name = "gamma"
    description = "raises an unexpected error"
    classification = Classification.LOAD

    def execute(self, environment, options, console) -> bool:
        executed.append(self.name)
        raise RuntimeError("boom")


class _Fatal(E2ETestCase):
    name = "delta"
    description = "endpoint is down"
    classification = Classification.EXPERIMENTAL

    def execute(self, environment, options, console) -> bool:
        executed.append(self.name)
        raise FatalRunError("ping returned response code 503")


class _RecordingSecho:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str, **_: object) -> None:
        self.messages.append(message)


def _services(tmp_path: Path) -> ScenarioServices:
    catalog = PipelineCatalog(
        organization="ignore",
        topic="covid-19",
        receiving_states="IG",
        states=(),
        senders=(),
        receivers=(),
    )
    return ScenarioServices(
        catalog=catalog,
        submitter=None,  # type: ignore[arg-type]
        lineage_store=None,  # type: ignore[arg-type]
        payloads=FakePayloadProducer(tmp_path),
        fixtures_dir=tmp_path,
        max_report_items=10,
        rng=random.Random(0),
    )


def _options(tmp_path: Path) -> E2ETestOptions:
    return E2ETestOptions(
        items=1, submits=1, working_dir=tmp_path, env="local", sftp_dir=tmp_path / "sftp"
    )


@pytest.fixture(autouse=True)
def _reset_executed() -> None:
    executed.clear()


def test_failures_do_not_stop_later_scenarios(tmp_path: Path) -> None:
    registry = ScenarioRegistry((_Passing, _Failing, _Crashing))
    secho = _RecordingSecho()

    run_result = run_tests(
        registry,
        ["gamma", "beta", "alpha"],
        _options(tmp_path),
        ENVIRONMENT,
        _services(tmp_path),
        console=ScenarioConsole(secho=secho),
    )

    assert executed == ["alpha", "beta", "gamma"]
    assert [result.passed for result in run_result.results] == [True, False, False]
    assert secho.messages[0] == (
        "Running the following tests, POSTing to http://localhost:7071/api/reports:"
    )
    assert secho.messages[-1] == "*** Tests FAILED:  beta,gamma ***"


def test_default_selection_runs_smoke_scenarios_only(tmp_path: Path) -> None:
    registry = ScenarioRegistry((_Passing, _Crashing))
    secho = _RecordingSecho()

    run_result = run_tests(
        registry,
        None,
        _options(tmp_path),
        ENVIRONMENT,
        _services(tmp_path),
        console=ScenarioConsole(secho=secho),
    )

    assert executed == ["alpha"]
    assert run_result.passed is True
    assert secho.messages[-1] == "All tests passed"


def test_unknown_names_are_reported_and_nothing_runs(tmp_path: Path) -> None:
    secho = _RecordingSecho()

    run_result = run_tests(
        ScenarioRegistry((_Passing,)),
        ["nosuchtest"],
        _options(tmp_path),
        ENVIRONMENT,
        _services(tmp_path),
        console=ScenarioConsole(secho=secho),
    )

    assert executed == []
    assert run_result.results == ()
    assert secho.messages == ["nosuchtest: not found", "No tests to run."]


def test_fatal_error_stops_the_run(tmp_path: Path) -> None:
    registry = ScenarioRegistry((_Fatal, _Passing))

    with pytest.raises(FatalRunError, match="503"):
        run_tests(
            registry,
            ["delta", "alpha"],
            _options(tmp_path),
            ENVIRONMENT,
            _services(tmp_path),
            console=ScenarioConsole(secho=_RecordingSecho()),
        )

    assert executed == ["delta"]
