"""Heuristic pause before lineage verification.

Batch and send stages of a local deployment fire at the top of every minute.
Other deployments run on a cadence we cannot observe, so they always get the
extra slack.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime

from pipeline_e2e_tester.configuration.runtime_settings import TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole

logger = logging.getLogger(__name__)

BATCH_CYCLE_SECONDS = 60
UNCERTAIN_CADENCE_SLACK_SECONDS = 90


def compute_delay(
    extra_seconds: int, environment: TargetEnvironment, *, now: datetime | None = None
) -> int:
    """Seconds to wait so that the next batch cycle, plus `extra_seconds`, has elapsed."""
    current = now or datetime.now()
    elapsed = current.second % BATCH_CYCLE_SECONDS
    delay = BATCH_CYCLE_SECONDS - elapsed + extra_seconds
    if elapsed > BATCH_CYCLE_SECONDS - extra_seconds or not environment.is_local:
        delay += UNCERTAIN_CADENCE_SLACK_SECONDS
    return delay


class PipelineWaiter:
    """Blocks for the computed delay, one second at a time, printing progress marks."""

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._clock = clock or datetime.now
        self._sleep = sleep or time.sleep

    def wait(
        self, extra_seconds: int, environment: TargetEnvironment, *, console: ScenarioConsole
    ) -> int:
        delay = compute_delay(extra_seconds, environment, now=self._clock())
        logger.debug("waiting %s seconds for environment %s", delay, environment.name)
        console.echo(
            f"Waiting {delay} seconds for the pipeline to fully receive, batch, and send the data"
        )
        for _ in range(delay):
            self._sleep(1)
            console.progress()
        console.end_progress()
        return delay
