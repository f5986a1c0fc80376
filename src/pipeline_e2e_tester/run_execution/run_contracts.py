"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pipeline_e2e_tester.scenario_catalog import RunResult


@dataclass(frozen=True)
class RunRequest:  # pylint: disable=too-many-instance-attributes
    """Input contract for executing one run; None means use the configured default."""

    config_path: str
    test_names: tuple[str, ...] | None = None
    env: str = "local"
    key: str | None = None
    items: int | None = None
    submits: int | None = None
    working_dir: str | None = None
    sftp_dir: str | None = None
    sender: str | None = None
    output_dir: str | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed run."""

    run_result: RunResult
    environment: str
    output_path: Path | None = None

    @property
    def passed(self) -> bool:
        return self.run_result.passed
