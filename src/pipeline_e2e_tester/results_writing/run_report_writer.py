"""Results workbook writer service."""

from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from pipeline_e2e_tester.scenario_catalog import RunResult

from .report_models import RunMetadata, ScenarioStatus

RESULTS_SHEET_NAME = "Results"
RUN_INFO_SHEET_NAME = "RunInfo"
RESULT_COLUMNS = ("name", "classification", "description", "status")
_COLUMN_WIDTHS = (20, 22, 80, 12)


class ResultsWritingError(Exception):
    """Raised when the results workbook cannot be saved."""


def write_results_workbook(
    run_result: RunResult, run_metadata: RunMetadata, output_path: Path | str
) -> Path:
    """Write a Results sheet with one row per executed scenario plus a RunInfo sheet."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = RESULTS_SHEET_NAME
    _write_results_sheet(sheet, run_result)
    _write_run_info_sheet(workbook, run_metadata, run_result)

    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(output)
    except OSError as exc:
        raise ResultsWritingError(f"Unable to write results workbook {output}: {exc}") from exc
    return output


def _write_results_sheet(sheet, run_result: RunResult) -> None:
    columns = zip(RESULT_COLUMNS, _COLUMN_WIDTHS, strict=True)
    for column, (header, width) in enumerate(columns, start=1):
        sheet.cell(row=1, column=column, value=header)
        sheet.cell(row=1, column=column).style = "Headline 1"
        sheet.column_dimensions[get_column_letter(column)].width = width
    for row, result in enumerate(run_result.results, start=2):
        status = ScenarioStatus.PASSED if result.passed else ScenarioStatus.FAILED
        values = (
            result.summary.name,
            result.summary.classification.value,
            result.summary.description,
            status.value,
        )
        for column, value in enumerate(values, start=1):
            sheet.cell(row=row, column=column, value=value)
    sheet.freeze_panes = "A2"


def _write_run_info_sheet(workbook, run_metadata: RunMetadata, run_result: RunResult) -> None:
    sheet = workbook.create_sheet(RUN_INFO_SHEET_NAME)
    total = len(run_result.results)
    entries = (
        ("run_start", run_metadata.run_start.isoformat()),
        ("output_path", str(run_metadata.output_path)),
        ("environment", run_metadata.environment),
        ("endpoint", run_metadata.endpoint),
        ("items", run_metadata.items),
        ("submits", run_metadata.submits),
        ("total", total),
        ("passed", run_result.passed_count),
        ("failed", total - run_result.passed_count),
    )
    for row, (key, value) in enumerate(entries, start=1):
        sheet.cell(row=row, column=1, value=key)
        sheet.cell(row=row, column=2, value=value)
