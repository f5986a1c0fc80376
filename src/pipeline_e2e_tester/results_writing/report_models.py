"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class ScenarioStatus(str, Enum):
    """Rendered status in the Results sheet status column."""

    PASSED = "PASSED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class RunMetadata:
    """Metadata rendered into the RunInfo sheet."""

    run_start: datetime
    output_path: Path
    environment: str
    endpoint: str
    items: int
    submits: int
