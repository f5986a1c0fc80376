"""Scenario catalog domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pipeline_e2e_tester.configuration import ConfigurationError


class Classification(str, Enum):
    """Tag used for default selection and for the test listing."""

    EXPERIMENTAL = "experimental"
    ALWAYS_FAILING = "always-failing"
    LOAD = "load"
    SMOKE = "smoke"

    @property
    def label(self) -> str:
        return _CLASSIFICATION_LABELS[self]


_CLASSIFICATION_LABELS = {
    Classification.EXPERIMENTAL: "Experimental",
    Classification.ALWAYS_FAILING: "Always fails",
    Classification.LOAD: "Load Test",
    Classification.SMOKE: "Part of Smoke test",
}


@dataclass(frozen=True)
class E2ETestOptions:  # pylint: disable=too-many-instance-attributes
    """Run-scoped options shared by every scenario of one run."""

    items: int
    submits: int
    working_dir: Path
    env: str
    sftp_dir: Path
    key: str | None = None
    sender: str | None = None

    def __post_init__(self) -> None:
        for field_name in ("items", "submits"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{field_name} must be a positive integer, got {value!r}.")


@dataclass(frozen=True)
class ScenarioSummary:
    """Listing row for one registered scenario."""

    name: str
    classification: Classification
    description: str


@dataclass(frozen=True)
class ScenarioResult:
    """Pass/fail verdict of one executed scenario."""

    summary: ScenarioSummary
    passed: bool

    @property
    def name(self) -> str:
        return self.summary.name


@dataclass(frozen=True)
class RunResult:
    """Ordered verdicts of a run; read only once the run has finished."""

    results: tuple[ScenarioResult, ...]

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failed_names(self) -> tuple[str, ...]:
        return tuple(result.name for result in self.results if not result.passed)

    @property
    def passed_count(self) -> int:
        return sum(1 for result in self.results if result.passed)
