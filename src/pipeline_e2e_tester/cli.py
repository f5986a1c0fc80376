"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from pipeline_e2e_tester.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from pipeline_e2e_tester.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_e2e_test_run,
)
from pipeline_e2e_tester.scenario_catalog import ScenarioRegistry, format_test_list
from pipeline_e2e_tester.submission import ReportSubmitter

ENVIRONMENT_HELP = (
    "Target environment from the configuration, e.g. local, test or staging. "
    "Every environment except local needs --key."
)


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pipeline-e2e-tester")
@click.option("--verbose", is_flag=True, default=False, help="Log debug diagnostics to stderr.")
def cli(verbose: bool) -> None:
    """End-to-end tests of a data ingestion pipeline, checked through lineage records."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="list")
def list_tests() -> None:
    """List available tests, then quit."""
    click.echo("Available options to --run <test1,test2> are:")
    for line in format_test_list(ScenarioRegistry().list_tests()):
        click.echo(line)


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON configuration file",
)
@click.option(
    "--run",
    "run_names",
    metavar="test1,test2",
    required=False,
    help="Names of tests to run. Default is to run all smoke tests.",
)
@click.option(
    "--items",
    type=click.IntRange(min=1),
    required=False,
    help="For tests involving fake data, rows per receiver getting data.",
)
@click.option(
    "--submits",
    type=click.IntRange(min=1),
    required=False,
    help="For tests involving multiple submits, do this many submissions.",
)
@click.option("--env", "env", default="local", show_default=True, help=ENVIRONMENT_HELP)
@click.option("--key", metavar="<secret>", required=False, help="Reports function access key")
@click.option(
    "--dir",
    "working_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Working directory for generated files.",
)
@click.option(
    "--sftp-dir",
    "sftp_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Folder where files were uploaded to the SFTP server.",
)
@click.option("--sender", required=False, help="Sender to use for the 'santaclaus' test.")
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Optional directory for storing the results workbook",
)
@click.pass_context
def run_tests(  # pylint: disable=too-many-arguments
    ctx: click.Context,
    config_path: str,
    run_names: str | None,
    items: int | None,
    submits: int | None,
    env: str,
    key: str | None,
    working_dir: str | None,
    sftp_dir: str | None,
    sender: str | None,
    output_dir: str | None,
) -> None:
    """Run tests against the pipeline and verify them through its lineage store."""
    test_names = tuple(run_names.split(",")) if run_names is not None else None
    try:
        outcome = execute_e2e_test_run(
            RunRequest(
                config_path=config_path,
                test_names=test_names,
                env=env,
                key=key,
                items=items,
                submits=submits,
                working_dir=working_dir,
                sftp_dir=sftp_dir,
                sender=sender,
                output_dir=output_dir,
            ),
            submitter_factory=ReportSubmitter,
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    if outcome.output_path is not None:
        click.echo(str(outcome.output_path))
    if not outcome.passed:
        ctx.exit(1)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        result = cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return result if isinstance(result, int) else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
