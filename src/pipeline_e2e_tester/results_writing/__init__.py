"""Results writing domain exports."""

from .report_models import RunMetadata, ScenarioStatus
from .run_report_writer import (
    RESULT_COLUMNS,
    RESULTS_SHEET_NAME,
    RUN_INFO_SHEET_NAME,
    ResultsWritingError,
    write_results_workbook,
)

__all__ = [
    "RESULT_COLUMNS",
    "RESULTS_SHEET_NAME",
    "RUN_INFO_SHEET_NAME",
    "ResultsWritingError",
    "RunMetadata",
    "ScenarioStatus",
    "write_results_workbook",
]
