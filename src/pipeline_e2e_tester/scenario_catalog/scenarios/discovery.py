"""Every-state routing scenario checked with bounded lineage polling."""

from __future__ import annotations

from collections.abc import Sequence

from pipeline_e2e_tester.configuration.runtime_settings import (
    ReceiverTarget,
    SenderIdentity,
    TargetEnvironment,
)
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.response_interpretation import DestinationCount
from pipeline_e2e_tester.retry_polling import poll_until

from ..catalog_models import Classification, E2ETestOptions
from ..scenario_base import E2ETestCase

SANTA_SENDER_ORGANIZATIONS = ("simple_report", "waters", "strac", "safehealth")
SANTA_ENVIRONMENTS = ("local", "staging")
LINEAGE_POLL_ATTEMPTS = 90


class SantaClaus(E2ETestCase):
    """Sends one row per state and follows each routed destination through lineage."""

    name = "santaclaus"
    description = (
        "Creates fake data as if from a sender and tries to send it to every state and territory"
    )
    classification = Classification.EXPERIMENTAL

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        if environment.name not in SANTA_ENVIRONMENTS:
            return self.fail(console, "This test can only be run locally or on staging")
        if options.sender:
            sender = self.catalog.find_sender(options.sender)
            if sender is None:
                return self.fail(console, f"The sender indicated doesn't exists '{options.sender}'")
            senders: tuple[SenderIdentity, ...] = (sender,)
        else:
            senders = tuple(
                sender
                for sender in self.catalog.senders
                if sender.organization_name in SANTA_SENDER_ORGANIZATIONS
            )
        states = self.catalog.states
        if not states:
            return self.fail(console, "No states configured in catalog.states")

        passed = True
        for sender in senders:
            console.ugly(f"Starting {self.name} Test: send with {sender.full_name}")
            payload = self.services.payloads.create_fake_file(
                sender,
                len(states),
                target_states=",".join(states),
                target_receivers=None,
                fmt="CSV" if sender.format == "CSV" else "HL7",
                directory=options.working_dir,
            )
            console.echo(f"Created datafile {payload}")
            response = self.post(environment, payload, sender, options, console)
            if not response.is_created:
                return self.fail(console, f" response code {response.status_code}")
            console.good(f"Posting of report succeeded with response code {response.status_code}")
            console.detail(response.body)
            outcome = self.parse(response.body, console)
            if outcome is None:
                return False
            if outcome.submission_id is None:
                return self.fail(console, "A report ID came back as null")
            receivers = self._routed_receivers(outcome.destinations)
            if not receivers:
                continue
            submission_id = outcome.submission_id
            self._poll_lineage(submission_id, receivers, sender, console)
            passed = (
                self.verify(submission_id, receivers, len(receivers), console, filter_by_org=True)
                and passed
            )
        return passed

    def _routed_receivers(
        self, destinations: Sequence[DestinationCount]
    ) -> tuple[ReceiverTarget, ...]:
        receivers = []
        for destination in destinations:
            if destination.organization_id is None:
                continue
            receiver = self.catalog.find_receiver(destination.organization_id, destination.service)
            if receiver is not None:
                receivers.append(receiver)
        return tuple(receivers)

    def _poll_lineage(
        self,
        submission_id: str,
        receivers: tuple[ReceiverTarget, ...],
        sender: SenderIdentity,
        console: ScenarioConsole,
    ) -> bool:
        def on_attempt(succeeded: bool, attempt: int) -> None:
            if succeeded:
                console.end_progress()
                return
            if attempt == 0:
                console.echo(
                    f"Waiting for examining lineage results of sender '{sender.full_name}'"
                )
            console.progress()

        return poll_until(
            LINEAGE_POLL_ATTEMPTS,
            lambda: self.verify(
                submission_id,
                receivers,
                len(receivers),
                console,
                filter_by_org=True,
                silent=True,
            ),
            on_attempt,
            sleep=self.services.sleep,
        )
