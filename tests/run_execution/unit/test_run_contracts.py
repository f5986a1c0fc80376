"""Tests for run execution domain entities."""

from __future__ import annotations

from pathlib import Path

from pipeline_e2e_tester.run_execution.run_contracts import RunOutcome, RunRequest
from pipeline_e2e_tester.scenario_catalog import (
    Classification,
    RunResult,
    ScenarioResult,
    ScenarioSummary,
)


def test_run_request_defaults_to_local_environment_and_configured_options() -> None:
    request = RunRequest(config_path="pipeline-e2e.yaml")

    assert request.env == "local"
    assert request.test_names is None
    assert request.items is None
    assert request.submits is None
    assert request.output_dir is None


def test_run_outcome_passes_only_when_every_scenario_passed() -> None:
    summary = ScenarioSummary(name="ping", classification=Classification.SMOKE, description="")
    outcome = RunOutcome(
        run_result=RunResult(results=(ScenarioResult(summary=summary, passed=False),)),
        environment="local",
        output_path=Path("/tmp/e2e-results.xlsx"),
    )

    assert outcome.passed is False
    assert outcome.output_path is not None
    assert outcome.output_path.name == "e2e-results.xlsx"
