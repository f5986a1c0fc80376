"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "pipeline-e2e.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Test configuration template for pipeline-e2e-tester.
# Replace every <REQUIRED> placeholder before running list or run.
# Replace <OPTIONAL> placeholders only when your setup needs them.

# environments:
#   Omit this section to use the built-in local/test/staging/prod endpoints.
#   local:
#     endpoint: "http://localhost:7071/api/reports"
#     # The lineage store URL must contain one of these markers for the run to start.
#     database_markers: ["localhost", "postgresql"]
#     requires_key: false

lineage_store:
  # Provide either the SQLAlchemy URL itself or the environment variable holding it.
  # url: "<OPTIONAL>"
  url_env: "POSTGRES_URL"

catalog:
  organization: "<REQUIRED>"
  topic: "covid-19"
  receiving_states: "IG"
  # One fake row per state is sent by the santaclaus test.
  states:
    - "<OPTIONAL>"
  senders:
    - organization: "<REQUIRED>"
      name: "<REQUIRED>"
      format: "CSV"
  receivers:
    - organization: "<REQUIRED>"
      name: "<REQUIRED>"
      # batching: receiver has a timing policy; transport: receiver forwards data.
      batching: true
      transport: true
  # Sender used by each built-in test family, as "<name>" or "<organization>.<name>".
  roles:
    simple_report: "<REQUIRED>"
    strac: "<REQUIRED>"
    waters: "<REQUIRED>"
    empty: "<REQUIRED>"

payloads:
  # Directory holding too-many-columns.csv, not-a-csv-file.csv, completely-empty-file.csv
  # and otc-template.csv.
  fixtures_dir: "<OPTIONAL>"

run:
  items: 5
  submits: 5
  working_dir: "./build/csv_test_files"
  sftp_dir: "build/sftp"
  max_report_items: 10000
"""


def build_placeholder_configuration() -> str:
    """Build a YAML test configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder test configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Test configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
