"""Scenario registry tests."""

from __future__ import annotations

import pytest
from pipeline_e2e_tester.scenario_catalog import (
    Classification,
    DuplicateScenarioError,
    ScenarioRegistry,
    format_test_list,
)
from pipeline_e2e_tester.scenario_catalog.scenarios import End2End, Ping, Waters


def test_default_registry_lists_every_scenario_in_catalog_order() -> None:
    names = [summary.name for summary in ScenarioRegistry().list_tests()]

    assert names == [
        "ping",
        "end2end",
        "merge",
        "garbage",
        "qualityfilter",
        "hl7null",
        "toomanycols",
        "badcsv",
        "strac",
        "huge",
        "toobig",
        "dbconnections",
        "badsftp",
        "stracpack",
        "hammertime",
        "waters",
        "repeatwaters",
        "intcontent",
        "santaclaus",
        "otcproctored",
    ]


def test_no_requested_names_runs_the_smoke_subset() -> None:
    selection = ScenarioRegistry().select(None)

    assert [scenario.name for scenario in selection.tests] == [
        "ping",
        "end2end",
        "merge",
        "qualityfilter",
        "hl7null",
        "toomanycols",
        "badcsv",
        "strac",
        "waters",
        "otcproctored",
    ]
    assert all(s.classification == Classification.SMOKE for s in selection.tests)
    assert selection.unresolved_names == ()


@pytest.mark.parametrize("names", [[], [""], ["", "  "]])
def test_explicit_blank_request_selects_nothing(names: list[str]) -> None:
    selection = ScenarioRegistry().select(names)

    assert selection.tests == ()
    assert selection.unresolved_names == tuple(name.strip() for name in names)


def test_named_selection_is_case_insensitive_in_registry_order() -> None:
    selection = ScenarioRegistry().select(["Waters", "PING", "nosuchtest", "end2end"])

    assert selection.tests == (Ping, End2End, Waters)
    assert selection.unresolved_names == ("nosuchtest",)


def test_duplicate_names_are_rejected() -> None:
    with pytest.raises(DuplicateScenarioError, match="'ping' is registered twice"):
        ScenarioRegistry((Ping, End2End, Ping))


def test_format_test_list_uses_classification_labels() -> None:
    lines = format_test_list(ScenarioRegistry((Ping,)).list_tests())

    assert lines == [
        f"{'ping':<20}{'Part of Smoke test':<20}\t"
        "CheckConnections: Is the reports endpoint alive and listening?"
    ]
