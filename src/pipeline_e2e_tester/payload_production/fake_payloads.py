"""Synthetic payload files and canned fixtures for scenario submissions."""

from __future__ import annotations

import csv
import logging
import random
import uuid
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from pipeline_e2e_tester.configuration.runtime_settings import SenderIdentity

logger = logging.getLogger(__name__)

CSV_COLUMNS = (
    "message_id",
    "patient_id",
    "patient_first_name",
    "patient_last_name",
    "patient_state",
    "patient_county",
    "ordering_facility_state",
    "ordering_facility_county",
    "test_result",
    "specimen_collection_date",
)
HL7_FORMAT = "HL7"
CSV_FORMAT = "CSV"

_FIRST_NAMES = {
    None: ("Alex", "Jordan", "Riley", "Casey", "Morgan", "Taylor"),
    "zh_CN": ("伟", "芳", "娜", "敏", "静", "磊"),
}
_LAST_NAMES = {
    None: ("Smith", "Garcia", "Nguyen", "Okafor", "Schmidt", "Rossi"),
    "zh_CN": ("王", "李", "张", "刘", "陈", "杨"),
}
_TEST_RESULTS = ("260373001", "260415000", "419984006")


class PayloadProductionError(Exception):
    """Raised when a payload file cannot be produced."""


class FakePayloadProducer:
    """Writes fake data files whose rows are spread over the requested receivers."""

    def __init__(self, working_dir: Path, *, rng: random.Random | None = None) -> None:
        self._working_dir = working_dir
        self._rng = rng or random.Random()

    def create_fake_file(
        self,
        sender: SenderIdentity,
        count: int,
        *,
        target_states: str | None,
        target_receivers: str | None,
        fmt: str | None = None,
        locale: str | None = None,
        directory: Path | None = None,
    ) -> Path:
        """Write `count` rows round-robin over the comma separated states and receivers.

        Receivers are addressed through the county column, which is how the
        pipeline routes the test organization's data.
        """
        if count <= 0:
            raise PayloadProductionError("A fake payload needs at least one item.")
        payload_format = (fmt or sender.format).upper()
        states = _split_targets(target_states)
        counties = _split_targets(target_receivers)
        rows = [self._fake_row(index, states, counties, locale) for index in range(count)]

        output_dir = directory or self._working_dir
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PayloadProductionError(f"Unable to create {output_dir}: {exc}") from exc
        suffix = "hl7" if payload_format == HL7_FORMAT else "csv"
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        path = output_dir / f"{sender.name}-{timestamp}-{uuid.uuid4().hex[:8]}.{suffix}"
        if payload_format == HL7_FORMAT:
            _write_hl7(path, sender, rows)
        else:
            _write_csv(path, rows)
        logger.debug("wrote %s fake items to %s", count, path)
        return path

    def _fake_row(
        self, index: int, states: Sequence[str], counties: Sequence[str], locale: str | None
    ) -> dict[str, str]:
        first_names = _FIRST_NAMES.get(locale, _FIRST_NAMES[None])
        last_names = _LAST_NAMES.get(locale, _LAST_NAMES[None])
        state = states[index % len(states)] if states else ""
        county = counties[index % len(counties)] if counties else ""
        return {
            "message_id": uuid.uuid4().hex,
            "patient_id": f"{index + 1:06d}",
            "patient_first_name": self._rng.choice(first_names),
            "patient_last_name": self._rng.choice(last_names),
            "patient_state": state,
            "patient_county": county,
            "ordering_facility_state": state,
            "ordering_facility_county": county,
            "test_result": self._rng.choice(_TEST_RESULTS),
            "specimen_collection_date": datetime.now().strftime("%Y%m%d"),
        }


def fixture_path(fixtures_dir: Path, name: str) -> Path:
    """Return a canned input file, failing when it is missing."""
    candidate = fixtures_dir / name
    if not candidate.is_file():
        raise PayloadProductionError(f"Unable to find file {candidate.resolve()}")
    return candidate


def substitute_text(template: Path, token: str, replacement: str, output_dir: Path) -> Path:
    """Copy `template` into `output_dir` with every `token` replaced."""
    try:
        content = template.read_text(encoding="utf-8")
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise PayloadProductionError(f"Unable to read template {template}: {exc}") from exc
    target = output_dir / f"{template.stem}-{uuid.uuid4().hex[:8]}{template.suffix}"
    target.write_text(content.replace(token, replacement), encoding="utf-8")
    return target


def _split_targets(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _write_csv(path: Path, rows: Sequence[dict[str, str]]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)


def _write_hl7(path: Path, sender: SenderIdentity, rows: Sequence[dict[str, str]]) -> None:
    lines = []
    for row in rows:
        lines.append(
            f"MSH|^~\\&|{sender.full_name}|||{row['ordering_facility_county']}^"
            f"{row['ordering_facility_state']}|{row['specimen_collection_date']}||"
            f"ORU^R01|{row['message_id']}|P|2.5.1"
        )
        lines.append(
            f"PID|1||{row['patient_id']}||{row['patient_last_name']}^{row['patient_first_name']}"
            f"||||||^^^{row['patient_state']}^^^^^{row['patient_county']}"
        )
        lines.append(f"OBX|1|CE|94558-4||{row['test_result']}")
    path.write_text("\r".join(lines) + "\r", encoding="utf-8")
