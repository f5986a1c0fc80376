"""Concurrent submission waves followed by per-identifier verification."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, wait

from pipeline_e2e_tester.console_output import ScenarioConsole

from .fanout_outcomes import FanoutOutcome, IdentifierCollector, UnitFailure

logger = logging.getLogger(__name__)

DEFAULT_JOIN_TIMEOUT_SECONDS = 30.0


class FanoutExecutor:  # pylint: disable=too-few-public-methods
    """Launches one worker per submission, then verifies every collected identifier.

    `submit_one(index)` returns the submission identifier or raises when the
    submission was not accepted. `settle(count)` blocks while the pipeline
    processes the wave. Workers still running once `settle` returns get
    `join_timeout_seconds` more before they are counted as unfinished.
    """

    def __init__(
        self,
        submit_one: Callable[[int], str],
        *,
        settle: Callable[[int], object],
        verify: Callable[[str], bool],
        console: ScenarioConsole,
        join_timeout_seconds: float = DEFAULT_JOIN_TIMEOUT_SECONDS,
    ) -> None:
        self._submit_one = submit_one
        self._settle = settle
        self._verify = verify
        self._console = console
        self._join_timeout_seconds = join_timeout_seconds

    def run(self, count: int) -> FanoutOutcome:
        if count <= 0:
            raise ValueError("Fan-out requires at least one submission.")
        collector = IdentifierCollector()
        executor = ThreadPoolExecutor(max_workers=count, thread_name_prefix="fanout")
        try:
            futures: list[Future[None]] = [
                executor.submit(self._submit_single, index, collector) for index in range(count)
            ]
            self._settle(count)
            _, not_done = wait(futures, timeout=self._join_timeout_seconds)
        finally:
            executor.shutdown(wait=False)
        if not_done:
            logger.warning(
                "%s of %s submissions still running after the wait", len(not_done), count
            )
            self._console.bad(f"{len(not_done)} of {count} submissions did not finish in time")

        collected = collector.snapshot()
        for failure in collected.failures:
            self._console.bad(f"Submission {failure.index + 1} of {count} failed: {failure.reason}")
        verification_passed = True
        for identifier in collected.identifiers:
            if not self._verify_single(identifier):
                verification_passed = False
        return FanoutOutcome(
            identifiers=collected.identifiers,
            failures=collected.failures,
            unfinished=len(not_done),
            verification_passed=verification_passed,
        )

    def _submit_single(self, index: int, collector: IdentifierCollector) -> None:
        try:
            identifier = self._submit_one(index)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            collector.record_failure(UnitFailure.from_exception(index, exc))
            return
        collector.append(identifier)

    def _verify_single(self, identifier: str) -> bool:
        try:
            return bool(self._verify(identifier))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning("Verification of %s raised %s", identifier, exc)
            self._console.bad(f"Verification of {identifier} failed: {exc}")
            return False
