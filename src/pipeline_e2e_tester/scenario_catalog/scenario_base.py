"""Shared behaviour of every registered end-to-end scenario."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar, Protocol

from pipeline_e2e_tester.configuration.runtime_settings import (
    CatalogLookupError,
    PipelineCatalog,
    ReceiverTarget,
    SenderIdentity,
    TargetEnvironment,
)
from pipeline_e2e_tester.console_output import ScenarioConsole, Verbosity
from pipeline_e2e_tester.lineage_verification import (
    LineageStore,
    LineageStoreError,
    LineageVerifier,
)
from pipeline_e2e_tester.payload_production import FakePayloadProducer, PayloadProductionError
from pipeline_e2e_tester.response_interpretation import (
    ParseFailure,
    SubmissionOutcome,
    parse_submission_response,
)
from pipeline_e2e_tester.submission import SubmissionError, SubmissionResponse, SubmitMode
from pipeline_e2e_tester.wait_scheduling import PipelineWaiter

from .catalog_models import Classification, E2ETestOptions, ScenarioSummary


class FatalRunError(Exception):
    """Raised by a scenario when the remaining scenarios cannot work either."""


class PayloadSubmitter(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for the client that POSTs payloads to the pipeline."""

    def submit(
        self,
        environment: TargetEnvironment,
        payload: Path | bytes,
        sender: SenderIdentity,
        key: str | None,
        mode: SubmitMode | None = None,
    ) -> SubmissionResponse: ...


class Waiter(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for the heuristic pause before lineage checks."""

    def wait(
        self, extra_seconds: int, environment: TargetEnvironment, *, console: ScenarioConsole
    ) -> int: ...


@dataclass(frozen=True)
class ScenarioServices:  # pylint: disable=too-many-instance-attributes
    """Collaborators handed to every scenario of a run."""

    catalog: PipelineCatalog
    submitter: PayloadSubmitter
    lineage_store: LineageStore
    payloads: FakePayloadProducer
    fixtures_dir: Path
    max_report_items: int
    waiter: Waiter = field(default_factory=PipelineWaiter)
    sleep: Callable[[float], None] = time.sleep
    monotonic: Callable[[], float] = time.monotonic
    rng: random.Random = field(default_factory=random.Random)

    @property
    def verifier(self) -> LineageVerifier:
        return LineageVerifier(self.lineage_store)


_SCENARIO_FAILURES = (
    SubmissionError,
    LineageStoreError,
    CatalogLookupError,
    PayloadProductionError,
    OSError,
    ValueError,
)


class E2ETestCase(ABC):
    """One named scenario; `run` never raises except for FatalRunError."""

    name: ClassVar[str]
    description: ClassVar[str]
    classification: ClassVar[Classification]

    def __init__(self, services: ScenarioServices) -> None:
        self.services = services

    @classmethod
    def summary(cls) -> ScenarioSummary:
        return ScenarioSummary(
            name=cls.name, classification=cls.classification, description=cls.description
        )

    @property
    def catalog(self) -> PipelineCatalog:
        return self.services.catalog

    def run(
        self,
        environment: TargetEnvironment,
        options: E2ETestOptions,
        verbosity: Verbosity = Verbosity.NORMAL,
    ) -> bool:
        console = ScenarioConsole(verbosity)
        try:
            return bool(self.execute(environment, options, console))
        except _SCENARIO_FAILURES as exc:
            return self.fail(console, str(exc))

    @abstractmethod
    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        """Run the scenario body and return its verdict."""

    def fail(self, console: ScenarioConsole, message: str) -> bool:
        return console.bad(f"***{self.name} Test FAILED***: {message}")

    def post(
        self,
        environment: TargetEnvironment,
        payload: Path | bytes,
        sender: SenderIdentity,
        options: E2ETestOptions,
        console: ScenarioConsole,
        *,
        mode: SubmitMode | None = None,
    ) -> SubmissionResponse:
        response = self.services.submitter.submit(environment, payload, sender, options.key, mode)
        console.echo(f"Response to POST: {response.status_code}")
        return response

    def create_fake_file(
        self,
        sender: SenderIdentity,
        count: int,
        receivers: Sequence[ReceiverTarget] | str,
        options: E2ETestOptions,
        console: ScenarioConsole,
        *,
        fmt: str | None = None,
        locale: str | None = None,
    ) -> Path:
        target_receivers = (
            receivers if isinstance(receivers, str) else county_list(receivers)
        )
        path = self.services.payloads.create_fake_file(
            sender,
            count,
            target_states=self.catalog.receiving_states,
            target_receivers=target_receivers,
            fmt=fmt,
            locale=locale,
            directory=options.working_dir,
        )
        console.echo(f"Created datafile {path}")
        return path

    def parse(
        self,
        body: str,
        console: ScenarioConsole,
        *,
        required_counts: Sequence[str] = (),
    ) -> SubmissionOutcome | None:
        """Parse a response body, reporting a ParseFailure as a failed assertion."""
        outcome = parse_submission_response(body, required_counts=required_counts)
        if isinstance(outcome, ParseFailure):
            console.bad(outcome.message_for(self.name))
            return None
        return outcome

    def submission_id_from(self, body: str, console: ScenarioConsole) -> str | None:
        outcome = self.parse(body, console)
        if outcome is None:
            return None
        if outcome.submission_id is None:
            self.fail(console, "A report ID came back as null")
            return None
        console.echo(f"Id of submitted report: {outcome.submission_id}")
        return outcome.submission_id

    @staticmethod
    def peek_submission_id(body: str) -> str | None:
        """Return the submission id without reporting anything."""
        outcome = parse_submission_response(body, required_counts=())
        if isinstance(outcome, ParseFailure):
            return None
        return outcome.submission_id

    def examine_response(self, body: str, console: ScenarioConsole) -> bool:
        """Check topic, error count, destination count and id of a created submission."""
        outcome = self.parse(body, console)
        if outcome is None:
            return False
        console.echo(f"Id of submitted report: {outcome.submission_id}")
        passed = True
        topic = self.catalog.topic
        if outcome.topic is not None and outcome.topic.lower() == topic.lower():
            console.good(f"'topic' is in response and correctly set to '{topic}'")
        else:
            passed = self.fail(console, "'topic' is missing from response json")
        if outcome.error_count == 0:
            console.good("No errors detected.")
        else:
            passed = self.fail(console, "There were errors reported.")
        if outcome.destination_count is not None and outcome.destination_count > 0:
            console.good("Data going to be sent to one or more destinations.")
        else:
            passed = self.fail(console, "There are no destinations set for sending the data.")
        if outcome.submission_id is None:
            passed = self.fail(console, "Report ID was empty.")
        return passed

    def wait(
        self, extra_seconds: int, environment: TargetEnvironment, console: ScenarioConsole
    ) -> None:
        self.services.waiter.wait(extra_seconds, environment, console=console)

    def verify(
        self,
        submission_id: str,
        receivers: Sequence[ReceiverTarget],
        total_items: int,
        console: ScenarioConsole,
        *,
        filter_by_org: bool = False,
        silent: bool = False,
    ) -> bool:
        return self.services.verifier.verify(
            submission_id,
            receivers,
            total_items,
            console=console,
            filter_by_org=filter_by_org,
            silent=silent,
        )


def county_list(receivers: Sequence[ReceiverTarget]) -> str:
    return ",".join(receiver.name for receiver in receivers)
