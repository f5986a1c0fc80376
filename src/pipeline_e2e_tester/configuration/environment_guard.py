"""Startup checks that keep a run from operating against the wrong deployment."""

from __future__ import annotations

from .runtime_settings import Configuration, TargetEnvironment


class EnvironmentMismatchError(Exception):
    """Raised when the requested environment disagrees with the configured lineage store."""


def resolve_environment(configuration: Configuration, name: str) -> TargetEnvironment:
    """Return the configured environment called `name` (case-insensitive)."""
    environment = configuration.environments.get(name.strip().lower())
    if environment is None:
        known = ", ".join(sorted(configuration.environments))
        raise EnvironmentMismatchError(f"Unknown environment '{name}'. Known: {known}")
    return environment


def check_environment(
    environment: TargetEnvironment, lineage_store_url: str, key: str | None
) -> None:
    """Fail before any test runs when the environment cannot be targeted safely."""
    if not environment.enabled:
        raise EnvironmentMismatchError(
            f"Sorry, --env {environment.name} is not enabled for test runs."
        )
    if environment.requires_key and not (key or "").strip():
        raise EnvironmentMismatchError(
            f"Must specify --key <secret> to submit reports to --env {environment.name}"
        )
    if not any(marker in lineage_store_url for marker in environment.database_markers):
        raise EnvironmentMismatchError(
            f"Error: --env is {environment.name} but database is set to "
            f"{_redact_credentials(lineage_store_url)}"
        )


def _redact_credentials(url: str) -> str:
    scheme, separator, rest = url.partition("://")
    if not separator or "@" not in rest:
        return url
    return f"{scheme}://***@{rest.split('@', 1)[1]}"
