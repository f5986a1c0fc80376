"""Response interpretation exports."""

from .response_parser import (
    DEFAULT_REQUIRED_COUNTS,
    DESTINATION_COUNT,
    ERROR_COUNT,
    WARNING_COUNT,
    parse_submission_response,
)
from .submission_outcomes import DestinationCount, ParseFailure, SubmissionOutcome

__all__ = [
    "DEFAULT_REQUIRED_COUNTS",
    "DESTINATION_COUNT",
    "DestinationCount",
    "ERROR_COUNT",
    "ParseFailure",
    "SubmissionOutcome",
    "WARNING_COUNT",
    "parse_submission_response",
]
