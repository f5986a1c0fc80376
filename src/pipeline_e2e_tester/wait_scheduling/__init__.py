"""Wait scheduling exports."""

from .wait_scheduler import (
    BATCH_CYCLE_SECONDS,
    UNCERTAIN_CADENCE_SLACK_SECONDS,
    PipelineWaiter,
    compute_delay,
)

__all__ = [
    "BATCH_CYCLE_SECONDS",
    "PipelineWaiter",
    "UNCERTAIN_CADENCE_SLACK_SECONDS",
    "compute_delay",
]
