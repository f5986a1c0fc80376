"""Scenario catalog exports."""

from .catalog_models import (
    Classification,
    E2ETestOptions,
    RunResult,
    ScenarioResult,
    ScenarioSummary,
)
from .registry import (
    DEFAULT_SCENARIOS,
    DuplicateScenarioError,
    ScenarioRegistry,
    Selection,
    format_test_list,
)
from .runner import run_tests
from .scenario_base import E2ETestCase, FatalRunError, PayloadSubmitter, ScenarioServices

__all__ = [
    "Classification",
    "DEFAULT_SCENARIOS",
    "DuplicateScenarioError",
    "E2ETestCase",
    "E2ETestOptions",
    "FatalRunError",
    "PayloadSubmitter",
    "RunResult",
    "ScenarioRegistry",
    "ScenarioResult",
    "ScenarioServices",
    "ScenarioSummary",
    "Selection",
    "format_test_list",
    "run_tests",
]
