"""Run execution use-case service."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from pipeline_e2e_tester.configuration import (
    Configuration,
    ConfigurationError,
    EnvironmentMismatchError,
    TargetEnvironment,
    check_environment,
    load_configuration,
    resolve_environment,
)
from pipeline_e2e_tester.console_output import ScenarioConsole
from pipeline_e2e_tester.lineage_verification import (
    LineageStore,
    LineageStoreError,
    SqlLineageStore,
)
from pipeline_e2e_tester.payload_production import FakePayloadProducer
from pipeline_e2e_tester.results_writing import (
    ResultsWritingError,
    RunMetadata,
    write_results_workbook,
)
from pipeline_e2e_tester.scenario_catalog import (
    E2ETestOptions,
    FatalRunError,
    PayloadSubmitter,
    ScenarioRegistry,
    ScenarioServices,
    run_tests,
)
from pipeline_e2e_tester.scenario_catalog.scenario_base import Waiter
from pipeline_e2e_tester.submission import ReportSubmitter
from pipeline_e2e_tester.wait_scheduling import PipelineWaiter

from .run_contracts import RunOutcome, RunRequest


class RunExecutionError(Exception):
    """Raised when a run use case cannot be completed."""


def execute_e2e_test_run(
    request: RunRequest,
    *,
    registry: ScenarioRegistry | None = None,
    submitter_factory: Callable[[], PayloadSubmitter] | None = None,
    lineage_store_factory: Callable[[str], LineageStore] | None = None,
    waiter: Waiter | None = None,
    console: ScenarioConsole | None = None,
) -> RunOutcome:
    """Check the environment, run the selected scenarios and optionally write the workbook."""
    resolved_registry = registry or ScenarioRegistry()
    resolved_submitter_factory = submitter_factory or ReportSubmitter
    resolved_lineage_store_factory = lineage_store_factory or SqlLineageStore

    configuration = _load_configuration(request.config_path)
    environment = _checked_environment(configuration, request)
    options = _build_options(request, configuration)
    try:
        options.working_dir.mkdir(parents=True, exist_ok=True)
        lineage_store = resolved_lineage_store_factory(configuration.lineage_store.url)
    except (OSError, LineageStoreError) as exc:
        raise RunExecutionError(str(exc)) from exc

    services = ScenarioServices(
        catalog=configuration.catalog,
        submitter=resolved_submitter_factory(),
        lineage_store=lineage_store,
        payloads=FakePayloadProducer(options.working_dir),
        fixtures_dir=configuration.payloads.fixtures_dir,
        max_report_items=configuration.run_defaults.max_report_items,
        waiter=waiter or PipelineWaiter(),
    )
    run_start = datetime.now(UTC)
    try:
        run_result = run_tests(
            resolved_registry,
            request.test_names,
            options,
            environment,
            services,
            console=console,
        )
    except FatalRunError as exc:
        raise RunExecutionError(str(exc)) from exc

    output_path = None
    if request.output_dir:
        output_path = _resolve_output_path(request.output_dir, run_start)
        run_metadata = RunMetadata(
            run_start=run_start,
            output_path=output_path.resolve(),
            environment=environment.name,
            endpoint=environment.endpoint,
            items=options.items,
            submits=options.submits,
        )
        try:
            write_results_workbook(run_result, run_metadata, output_path)
        except ResultsWritingError as exc:
            raise RunExecutionError(str(exc)) from exc
    return RunOutcome(
        run_result=run_result,
        environment=environment.name,
        output_path=output_path.resolve() if output_path else None,
    )


def _load_configuration(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc


def _checked_environment(configuration: Configuration, request: RunRequest) -> TargetEnvironment:
    try:
        environment = resolve_environment(configuration, request.env)
        check_environment(environment, configuration.lineage_store.url, request.key)
    except EnvironmentMismatchError as exc:
        raise RunExecutionError(str(exc)) from exc
    return environment


def _build_options(request: RunRequest, configuration: Configuration) -> E2ETestOptions:
    defaults = configuration.run_defaults
    try:
        return E2ETestOptions(
            items=defaults.items if request.items is None else request.items,
            submits=defaults.submits if request.submits is None else request.submits,
            working_dir=Path(request.working_dir) if request.working_dir else defaults.working_dir,
            env=request.env.strip().lower(),
            sftp_dir=Path(request.sftp_dir) if request.sftp_dir else defaults.sftp_dir,
            key=request.key,
            sender=request.sender,
        )
    except ConfigurationError as exc:
        raise RunExecutionError(str(exc)) from exc


def _resolve_output_path(output_dir: str, run_start: datetime) -> Path:
    timestamp = run_start.strftime("%Y%m%d-%H%M%S")
    return Path(output_dir) / f"e2e-results-{timestamp}.xlsx"
