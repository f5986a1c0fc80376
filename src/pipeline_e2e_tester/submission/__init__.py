"""Submission exports."""

from .report_submitter import (
    CONTENT_TYPES,
    ReportSubmitter,
    SubmissionError,
    SubmissionResponse,
    SubmitMode,
)

__all__ = [
    "CONTENT_TYPES",
    "ReportSubmitter",
    "SubmissionError",
    "SubmissionResponse",
    "SubmitMode",
]
