"""Parse submission response bodies into typed outcomes."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from .submission_outcomes import DestinationCount, ParseFailure, SubmissionOutcome

ERROR_COUNT = "errorCount"
WARNING_COUNT = "warningCount"
DESTINATION_COUNT = "destinationCount"
DEFAULT_REQUIRED_COUNTS = (ERROR_COUNT, WARNING_COUNT, DESTINATION_COUNT)


def parse_submission_response(
    json_body: str | bytes | None,
    *,
    required_counts: Sequence[str] = DEFAULT_REQUIRED_COUNTS,
) -> SubmissionOutcome | ParseFailure:
    """Interpret a submission response body.

    A missing ``id`` maps to ``submission_id=None``. A count listed in
    ``required_counts`` that is absent or not an integer yields a ParseFailure;
    other counts parse to None when absent. Destinations without a service are
    skipped; a missing ``itemCount`` parses to None. Every error entry keeps its
    position, with an empty detail when it carries none.
    """
    if json_body is None:
        return ParseFailure("response body is empty")
    try:
        root = json.loads(json_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return ParseFailure("response body is not valid JSON")
    if not isinstance(root, Mapping):
        return ParseFailure("response root must be an object")

    counts: dict[str, int | None] = {}
    for count_name in (ERROR_COUNT, WARNING_COUNT, DESTINATION_COUNT):
        value = _integer_or_none(root.get(count_name))
        if value is None and count_name in required_counts:
            return ParseFailure(f"'{count_name}' is missing from response json")
        counts[count_name] = value

    destinations = root.get("destinations")
    if destinations is not None and not _is_array(destinations):
        return ParseFailure("'destinations' must be an array")

    return SubmissionOutcome(
        submission_id=_submission_id(root.get("id")),
        error_count=counts[ERROR_COUNT],
        warning_count=counts[WARNING_COUNT],
        destination_count=counts[DESTINATION_COUNT],
        destinations=_parse_destinations(destinations or ()),
        error_details=_parse_error_details(root.get("errors")),
        topic=root.get("topic") if isinstance(root.get("topic"), str) else None,
    )


def _submission_id(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def _parse_destinations(entries: Sequence[Any]) -> tuple[DestinationCount, ...]:
    parsed: list[DestinationCount] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        service = entry.get("service")
        item_count = _integer_or_none(entry.get("itemCount"))
        if not isinstance(service, str):
            continue
        organization_id = entry.get("organization_id")
        parsed.append(
            DestinationCount(
                service=service,
                item_count=item_count,
                organization_id=organization_id if isinstance(organization_id, str) else None,
            )
        )
    return tuple(parsed)


def _parse_error_details(value: Any) -> tuple[str, ...]:
    if not _is_array(value):
        return ()
    return tuple(
        entry["details"]
        if isinstance(entry, Mapping) and isinstance(entry.get("details"), str)
        else ""
        for entry in value
    )


def _integer_or_none(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes)
