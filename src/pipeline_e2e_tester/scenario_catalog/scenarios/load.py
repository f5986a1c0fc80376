"""Load scenarios: concurrent submission waves and repeated rounds."""

from __future__ import annotations

import threading
from typing import ClassVar

from pipeline_e2e_tester.configuration.runtime_settings import TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole, Verbosity
from pipeline_e2e_tester.fanout_execution import FanoutExecutor
from pipeline_e2e_tester.submission import SubmissionError

from ..catalog_models import Classification, E2ETestOptions
from ..scenario_base import E2ETestCase
from .delivery import Waters

EXTRA_WAIT_SECONDS_PER_SUBMISSION = 5
SLEEP_BETWEEN_SUBMIT_MILLIS = 360
SUBMIT_VARIATION_MILLIS = 360
PACE_REPORT_MIN_SECONDS = 600


class _FanoutScenario(E2ETestCase):
    """Submits one fake file `--submits` times at once to a single receiver."""

    sender_role: ClassVar[str]
    receiver_name: ClassVar[str]

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        sender = self.catalog.sender_for_role(self.sender_role)
        receiver = self.catalog.require_receiver(self.receiver_name)
        console.ugly(
            f"Starting {self.name} Test: simultaneously submitting {options.submits} batches "
            f"of {options.items} items per batch to the {receiver.name} receiver only."
        )
        payload = self.create_fake_file(sender, options.items, (receiver,), options, console)

        def submit_one(index: int) -> str:
            response = self.post(environment, payload, sender, options, console)
            if not response.is_created:
                console.detail(response.body)
                raise SubmissionError(f"response code {response.status_code}")
            submission_id = self.peek_submission_id(response.body)
            if submission_id is None:
                raise SubmissionError("A report ID came back as null")
            console.echo(f"{index + 1}: Id of submitted report: {submission_id}")
            return submission_id

        executor = FanoutExecutor(
            submit_one,
            settle=lambda count: self.wait(
                EXTRA_WAIT_SECONDS_PER_SUBMISSION * count, environment, console
            ),
            verify=lambda submission_id: self.verify(
                submission_id, (receiver,), options.items, console
            ),
            console=console,
        )
        outcome = executor.run(options.submits)
        if outcome.failures:
            self.fail(
                console, f"{len(outcome.failures)} of {options.submits} submissions failed"
            )
        return outcome.passed


class StracPack(_FanoutScenario):
    name = "stracpack"
    description = (
        "Does '--submits X' simultaneous strac submissions, each with '--items Y' items. "
        "Redox only"
    )
    classification = Classification.LOAD
    sender_role = "strac"
    receiver_name = "REDOX"


class HammerTime(_FanoutScenario):
    """Hammers the reports endpoint with parallel HL7 submissions."""

    name = "hammertime"
    description = "Does '--submits X' HL7 submissions in parallel, each with '--items Y' items."
    classification = Classification.LOAD
    sender_role = "simple_report"
    receiver_name = "HL7"


class RepeatWaters(E2ETestCase):
    """Runs the waters scenario once per round, each on its own thread."""

    name = "repeatwaters"
    description = "Submit waters over and over, sending to BLOBSTORE"
    classification = Classification.LOAD

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        console.ugly(f"Starting {self.name} Test: sending Waters data {options.submits} times.")
        pace = (3_600_000 // SLEEP_BETWEEN_SUBMIT_MILLIS) * options.items
        console.echo(f"Submitting at an expected pace of {pace} items per hour")

        lock = threading.Lock()
        round_results: list[bool] = []

        def run_round() -> None:
            success = Waters(self.services).run(environment, options, Verbosity.QUIET)
            with lock:
                round_results.append(success)

        started = self.services.monotonic()
        threads = []
        for round_number in range(1, options.submits + 1):
            thread = threading.Thread(
                target=run_round, name=f"{self.name}-{round_number}", daemon=True
            )
            thread.start()
            threads.append(thread)
            if round_number < options.submits:
                jitter = self.services.rng.randint(
                    -SUBMIT_VARIATION_MILLIS, SUBMIT_VARIATION_MILLIS - 1
                )
                sleep_millis = max(SLEEP_BETWEEN_SUBMIT_MILLIS + jitter, 0)
                console.echo(
                    f"{round_number}: Sleeping for {sleep_millis} milliseconds before next submit"
                )
                self.services.sleep(sleep_millis / 1000)
        console.echo("Submits done.  Now waiting for checking results to complete")
        for thread in threads:
            thread.join()
        elapsed_seconds = int(self.services.monotonic() - started)

        with lock:
            results = tuple(round_results)
        total_items = sum(options.items for success in results if success)
        console.echo(f"{self.name} Test took {elapsed_seconds} seconds. Expected pace/hr: {pace}.")
        # short runs are dominated by the final wait, so their pace is meaningless
        if elapsed_seconds > PACE_REPORT_MIN_SECONDS:
            console.echo(f" Actual pace: {(total_items // elapsed_seconds) * 3600}")
        return len(results) == options.submits and all(results)
