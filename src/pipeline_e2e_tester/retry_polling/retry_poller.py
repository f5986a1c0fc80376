"""Bounded polling of a read-only probe."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 1.0

AttemptCallback = Callable[[bool, int], None]


def poll_until(
    max_attempts: int,
    probe: Callable[[], bool],
    on_attempt: AttemptCallback | None = None,
    *,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Call `probe` until it returns True or `max_attempts` calls have been made.

    `on_attempt` receives the probe result and the zero-based attempt index after
    every call. There is no pause after the final attempt.
    """
    for attempt in range(max_attempts):
        succeeded = bool(probe())
        if on_attempt is not None:
            on_attempt(succeeded, attempt)
        if succeeded:
            logger.debug("probe succeeded on attempt %s", attempt + 1)
            return True
        if attempt + 1 < max_attempts:
            sleep(interval_seconds)
    logger.debug("probe did not succeed within %s attempts", max_attempts)
    return False
