"""Fixed, ordered catalog of scenarios and name based selection."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .catalog_models import Classification, ScenarioSummary
from .scenario_base import E2ETestCase
from .scenarios import (
    BadCsv,
    BadSftp,
    DbConnections,
    End2End,
    Garbage,
    HammerTime,
    Hl7Null,
    Huge,
    InternationalContent,
    Merge,
    OtcProctored,
    Ping,
    QualityFilter,
    RepeatWaters,
    SantaClaus,
    Strac,
    StracPack,
    TooBig,
    TooManyCols,
    Waters,
)

LIST_FORMAT = "%-20s%-20s\t%s"

DEFAULT_SCENARIOS: tuple[type[E2ETestCase], ...] = (
    Ping,
    End2End,
    Merge,
    Garbage,
    QualityFilter,
    Hl7Null,
    TooManyCols,
    BadCsv,
    Strac,
    Huge,
    TooBig,
    DbConnections,
    BadSftp,
    StracPack,
    HammerTime,
    Waters,
    RepeatWaters,
    InternationalContent,
    SantaClaus,
    OtcProctored,
)


class DuplicateScenarioError(ValueError):
    """Raised when two registered scenarios share a name."""


@dataclass(frozen=True)
class Selection:
    """Scenarios resolved from a request, in registry order, plus unmatched names."""

    tests: tuple[type[E2ETestCase], ...]
    unresolved_names: tuple[str, ...] = ()


class ScenarioRegistry:
    """Holds scenario classes in declaration order."""

    def __init__(self, scenarios: Sequence[type[E2ETestCase]] = DEFAULT_SCENARIOS) -> None:
        seen: set[str] = set()
        for scenario in scenarios:
            key = scenario.name.lower()
            if key in seen:
                raise DuplicateScenarioError(
                    f"Scenario name '{scenario.name}' is registered twice."
                )
            seen.add(key)
        self._scenarios = tuple(scenarios)

    @property
    def scenarios(self) -> tuple[type[E2ETestCase], ...]:
        return self._scenarios

    def list_tests(self) -> tuple[ScenarioSummary, ...]:
        return tuple(scenario.summary() for scenario in self._scenarios)

    def select(self, names: Iterable[str] | None) -> Selection:
        """Resolve names case-insensitively; `None` means the smoke subset.

        An explicit request never falls back to the smoke subset. Blank names
        are reported as unresolved like any other unknown name.
        """
        if names is None:
            return Selection(
                tests=tuple(
                    scenario
                    for scenario in self._scenarios
                    if scenario.classification == Classification.SMOKE
                )
            )
        requested = [name.strip() for name in names]
        by_name = {scenario.name.lower(): scenario for scenario in self._scenarios}
        wanted = {name.lower() for name in requested}
        unresolved = tuple(name for name in requested if name.lower() not in by_name)
        return Selection(
            tests=tuple(
                scenario for scenario in self._scenarios if scenario.name.lower() in wanted
            ),
            unresolved_names=unresolved,
        )


def format_test_list(summaries: Iterable[ScenarioSummary]) -> list[str]:
    return [
        LIST_FORMAT % (summary.name, summary.classification.label, summary.description)
        for summary in summaries
    ]
