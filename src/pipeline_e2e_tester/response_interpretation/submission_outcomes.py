"""Response interpretation domain entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DestinationCount:
    """Items routed to one destination, as reported in a submission response."""

    service: str
    item_count: int | None
    organization_id: str | None = None


@dataclass(frozen=True)
class SubmissionOutcome:  # pylint: disable=too-many-instance-attributes
    """Typed view of the JSON document returned for one submission."""

    submission_id: str | None
    error_count: int | None
    warning_count: int | None
    destination_count: int | None
    destinations: tuple[DestinationCount, ...] = ()
    error_details: tuple[str, ...] = ()
    topic: str | None = None

    def item_count_for(self, service: str) -> int | None:
        """Return the item count reported for `service`, or None when it got nothing."""
        for destination in self.destinations:
            if destination.service == service:
                return destination.item_count
        return None


@dataclass(frozen=True)
class ParseFailure:
    """Response body did not have the expected structure."""

    reason: str

    def message_for(self, test_name: str) -> str:
        return (
            f"***{test_name} Test FAILED***: "
            f"Unable to properly parse response json ({self.reason})"
        )
