"""Sequential execution of selected scenarios."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pipeline_e2e_tester.configuration.runtime_settings import TargetEnvironment
from pipeline_e2e_tester.console_output import ScenarioConsole

from .catalog_models import E2ETestOptions, RunResult, ScenarioResult
from .registry import ScenarioRegistry, format_test_list
from .scenario_base import FatalRunError, ScenarioServices

logger = logging.getLogger(__name__)


def run_tests(
    registry: ScenarioRegistry,
    names: Iterable[str] | None,
    options: E2ETestOptions,
    environment: TargetEnvironment,
    services: ScenarioServices,
    *,
    console: ScenarioConsole | None = None,
) -> RunResult:
    """Run the selected scenarios one at a time, in registry order.

    Every selected scenario runs even after a failure. Only FatalRunError,
    raised when the endpoint is unreachable, stops the run.
    """
    console = console or ScenarioConsole()
    selection = registry.select(names)
    for name in selection.unresolved_names:
        console.echo(f"{name}: not found")
    if not selection.tests:
        console.echo("No tests to run.")
        return RunResult(results=())

    console.ugly(f"Running the following tests, POSTing to {environment.endpoint}:")
    for line in format_test_list(scenario.summary() for scenario in selection.tests):
        console.echo(line)

    results = []
    for scenario_cls in selection.tests:
        scenario = scenario_cls(services)
        try:
            passed = scenario.run(environment, options)
        except FatalRunError:
            raise
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("scenario %s raised an unexpected error", scenario_cls.name)
            passed = console.bad(f"***{scenario_cls.name} Test FAILED***: unexpected error")
        results.append(ScenarioResult(summary=scenario_cls.summary(), passed=passed))

    run_result = RunResult(results=tuple(results))
    if run_result.passed:
        console.good("All tests passed")
    else:
        console.bad(f"*** Tests FAILED:  {','.join(run_result.failed_names)} ***")
    return run_result
