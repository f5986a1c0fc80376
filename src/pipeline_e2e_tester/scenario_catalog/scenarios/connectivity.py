"""Endpoint liveness scenario."""

from __future__ import annotations

from pipeline_e2e_tester.configuration.runtime_settings import TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.response_interpretation import ERROR_COUNT, WARNING_COUNT
from pipeline_e2e_tester.submission import SubmitMode

from ..catalog_models import Classification, E2ETestOptions
from ..scenario_base import E2ETestCase, FatalRunError


class Ping(E2ETestCase):
    """Run a CheckConnections submission; a dead endpoint aborts the whole run."""

    name = "ping"
    description = "CheckConnections: Is the reports endpoint alive and listening?"
    classification = Classification.SMOKE

    def execute(
        self, environment: TargetEnvironment, options: E2ETestOptions, console: ScenarioConsole
    ) -> bool:
        console.ugly(f"Starting ping Test: run CheckConnections of {environment.endpoint}")
        response = self.post(
            environment,
            b"x",
            self.catalog.sender_for_role("simple_report"),
            options,
            console,
            mode=SubmitMode.CHECK_CONNECTIONS,
        )
        console.detail(response.body)
        if not response.is_ok:
            console.bad(f"Ping/CheckConnections Test FAILED:  response code {response.status_code}")
            raise FatalRunError(
                f"ping returned response code {response.status_code}; other tests won't work."
            )
        self._report_latest_action(console)
        outcome = self.parse(
            response.body, console, required_counts=(ERROR_COUNT, WARNING_COUNT)
        )
        if outcome is None:
            return False
        if outcome.error_count != 0 or outcome.warning_count != 0:
            return console.bad("***Ping/CheckConnections Test FAILED***")
        return console.good("Test passed: Ping/CheckConnections")

    def _report_latest_action(self, console: ScenarioConsole) -> None:
        with self.services.lineage_store.read_transaction() as snapshot:
            action = snapshot.most_recent_action()
        if action is None:
            console.echo("No actions recorded in the lineage store yet.")
        else:
            console.echo(
                f"Most recent action: {action.action_id} {action.action_name}"
                f" at {action.created_at}"
            )
