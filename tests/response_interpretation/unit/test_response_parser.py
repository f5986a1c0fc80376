"""Submission response parser tests."""

from __future__ import annotations

import json

import pytest
from pipeline_e2e_tester.response_interpretation import (
    ERROR_COUNT,
    DestinationCount,
    ParseFailure,
    SubmissionOutcome,
    parse_submission_response,
)


def _body(**fields: object) -> str:
    return json.dumps(fields)


def test_parses_created_submission() -> None:
    body = _body(
        id="a1b2",
        topic="covid-19",
        errorCount=0,
        warningCount=1,
        destinationCount=2,
        destinations=[
            {"service": "CSV", "itemCount": 3, "organization_id": "ignore"},
            {"service": "HL7", "itemCount": 2},
        ],
    )

    outcome = parse_submission_response(body)

    assert outcome == SubmissionOutcome(
        submission_id="a1b2",
        error_count=0,
        warning_count=1,
        destination_count=2,
        destinations=(
            DestinationCount(service="CSV", item_count=3, organization_id="ignore"),
            DestinationCount(service="HL7", item_count=2),
        ),
        topic="covid-19",
    )
    assert outcome.item_count_for("HL7") == 2
    assert outcome.item_count_for("REDOX") is None


def test_missing_id_maps_to_none() -> None:
    outcome = parse_submission_response(
        _body(errorCount=2, warningCount=0, destinationCount=0, errors=[{"details": "rows"}])
    )

    assert isinstance(outcome, SubmissionOutcome)
    assert outcome.submission_id is None
    assert outcome.error_details == ("rows",)


@pytest.mark.parametrize(
    ("body", "reason"),
    [
        (None, "response body is empty"),
        ("{not json", "response body is not valid JSON"),
        ("[1, 2]", "response root must be an object"),
        (_body(id="x", warningCount=0, destinationCount=1), "'errorCount' is missing"),
        (
            _body(id="x", errorCount=0, warningCount=0, destinationCount=1, destinations={}),
            "'destinations' must be an array",
        ),
    ],
)
def test_malformed_bodies_yield_parse_failure(body: str | None, reason: str) -> None:
    outcome = parse_submission_response(body)

    assert isinstance(outcome, ParseFailure)
    assert reason in outcome.reason


def test_only_requested_counts_are_required() -> None:
    outcome = parse_submission_response(
        _body(errorCount=1), required_counts=(ERROR_COUNT,)
    )

    assert isinstance(outcome, SubmissionOutcome)
    assert outcome.error_count == 1
    assert outcome.warning_count is None
    assert outcome.destination_count is None


def test_boolean_count_is_not_an_integer() -> None:
    outcome = parse_submission_response(
        _body(errorCount=False, warningCount=0, destinationCount=0)
    )

    assert isinstance(outcome, ParseFailure)


def test_destinations_without_service_are_skipped() -> None:
    body = _body(
        errorCount=0,
        warningCount=0,
        destinationCount=1,
        destinations=[
            "CSV",
            {"service": "CSV"},
            {"itemCount": 1},
            {"service": "HL7", "itemCount": 4},
        ],
    )

    outcome = parse_submission_response(body)

    assert isinstance(outcome, SubmissionOutcome)
    assert outcome.destinations == (
        DestinationCount(service="CSV", item_count=None),
        DestinationCount(service="HL7", item_count=4),
    )


def test_destination_without_item_count_keeps_routing_fields() -> None:
    body = _body(
        id="r-1",
        errorCount=0,
        warningCount=0,
        destinationCount=1,
        destinations=[{"service": "elr", "organization_id": "pa-phd"}],
    )

    outcome = parse_submission_response(body)

    assert isinstance(outcome, SubmissionOutcome)
    assert outcome.destinations == (
        DestinationCount(service="elr", item_count=None, organization_id="pa-phd"),
    )


def test_error_details_keep_the_position_of_every_error() -> None:
    body = _body(
        errorCount=2,
        warningCount=0,
        destinationCount=0,
        errors=[{"scope": "report"}, {"details": "too many rows"}],
    )

    outcome = parse_submission_response(body)

    assert isinstance(outcome, SubmissionOutcome)
    assert outcome.error_details == ("", "too many rows")


def test_parse_failure_message_names_the_test() -> None:
    failure = ParseFailure("response body is empty")

    assert failure.message_for("end2end") == (
        "***end2end Test FAILED***: Unable to properly parse response json "
        "(response body is empty)"
    )
