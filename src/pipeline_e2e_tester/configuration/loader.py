"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    Configuration,
    LineageStoreSettings,
    PayloadSettings,
    PipelineCatalog,
    ReceiverTarget,
    RunDefaults,
    SenderIdentity,
    TargetEnvironment,
)

DEFAULT_URL_ENV = "POSTGRES_URL"
SENDER_FORMATS = ("CSV", "HL7")
REQUIRED_SENDER_ROLES = ("simple_report", "strac", "waters", "empty")

_DEFAULT_ENVIRONMENTS: Mapping[str, Mapping[str, Any]] = {
    "local": {
        "endpoint": "http://localhost:7071/api/reports",
        "database_markers": ["localhost", "postgresql"],
        "requires_key": False,
    },
    "test": {
        "endpoint": "https://pdhtest-functionapp.azurewebsites.net/api/reports",
        "database_markers": ["pdhtest"],
    },
    "staging": {
        "endpoint": "https://pdhstaging-functionapp.azurewebsites.net/api/reports",
        "database_markers": ["pdhstaging"],
    },
    "prod": {
        "endpoint": "https://pdhprod-functionapp.azurewebsites.net/api/reports",
        "database_markers": ["pdhprod"],
        "enabled": False,
    },
}


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str, *, environ: Mapping[str, str] | None = None
) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    environ = os.environ if environ is None else environ
    base_path = path.parent
    return Configuration(
        path=path,
        environments=_parse_environments_section(parsed.get("environments")),
        lineage_store=_parse_lineage_store_section(parsed.get("lineage_store"), environ),
        catalog=_parse_catalog_section(parsed.get("catalog")),
        payloads=_parse_payloads_section(parsed.get("payloads"), base_path),
        run_defaults=_parse_run_section(parsed.get("run"), base_path),
    )


def _parse_environments_section(value: Any) -> dict[str, TargetEnvironment]:
    section = _DEFAULT_ENVIRONMENTS if value is None else _require_mapping(value, "environments")
    if not section:
        raise ConfigurationError("environments must define at least one environment.")
    environments: dict[str, TargetEnvironment] = {}
    for raw_name, raw_environment in section.items():
        name = _require_non_empty_string(raw_name, "environments key").lower()
        label = f"environments.{name}"
        entry = _require_mapping(raw_environment, label)
        markers = _normalize_string_sequence(
            entry.get("database_markers"), f"{label}.database_markers"
        )
        if not markers:
            raise ConfigurationError(f"{label}.database_markers must not be empty.")
        environments[name] = TargetEnvironment(
            name=name,
            endpoint=_require_non_empty_string(entry.get("endpoint"), f"{label}.endpoint"),
            database_markers=markers,
            requires_key=_optional_bool(
                entry.get("requires_key"), f"{label}.requires_key", default=name != "local"
            ),
            enabled=_optional_bool(entry.get("enabled"), f"{label}.enabled", default=True),
        )
    return environments


def _parse_lineage_store_section(value: Any, environ: Mapping[str, str]) -> LineageStoreSettings:
    section = {} if value is None else _require_mapping(value, "lineage_store")
    url = _optional_string(section.get("url"), "lineage_store.url")
    if url is None:
        url_env = _optional_string(section.get("url_env"), "lineage_store.url_env")
        url_env = url_env or DEFAULT_URL_ENV
        url = (environ.get(url_env) or "").strip() or None
        if url is None:
            raise ConfigurationError(
                f"Missing lineage store URL: set lineage_store.url or the {url_env} variable."
            )
    return LineageStoreSettings(url=url)


def _parse_catalog_section(value: Any) -> PipelineCatalog:
    section = _require_mapping(value, "catalog")
    organization = _require_non_empty_string(section.get("organization"), "catalog.organization")
    senders = tuple(
        _parse_sender(entry, index)
        for index, entry in enumerate(_require_sequence(section.get("senders"), "catalog.senders"))
    )
    receivers = tuple(
        _parse_receiver(entry, index)
        for index, entry in enumerate(
            _require_sequence(section.get("receivers"), "catalog.receivers")
        )
    )
    return PipelineCatalog(
        organization=organization,
        topic=_require_non_empty_string(section.get("topic", "covid-19"), "catalog.topic"),
        receiving_states=_require_non_empty_string(
            section.get("receiving_states", "IG"), "catalog.receiving_states"
        ),
        states=_normalize_string_sequence(section.get("states"), "catalog.states"),
        senders=senders,
        receivers=receivers,
        role_senders=_parse_roles(section.get("roles"), organization, senders),
    )


def _parse_sender(value: Any, index: int) -> SenderIdentity:
    label = f"catalog.senders[{index}]"
    entry = _require_mapping(value, label)
    sender_format = _require_non_empty_string(entry.get("format", "CSV"), f"{label}.format")
    if sender_format.upper() not in SENDER_FORMATS:
        raise ConfigurationError(f"{label}.format must be one of {', '.join(SENDER_FORMATS)}.")
    return SenderIdentity(
        organization_name=_require_non_empty_string(
            entry.get("organization"), f"{label}.organization"
        ),
        name=_require_non_empty_string(entry.get("name"), f"{label}.name"),
        format=sender_format.upper(),
    )


def _parse_receiver(value: Any, index: int) -> ReceiverTarget:
    label = f"catalog.receivers[{index}]"
    entry = _require_mapping(value, label)
    return ReceiverTarget(
        organization_name=_require_non_empty_string(
            entry.get("organization"), f"{label}.organization"
        ),
        name=_require_non_empty_string(entry.get("name"), f"{label}.name"),
        has_timing=_optional_bool(entry.get("batching"), f"{label}.batching", default=False),
        has_transport=_optional_bool(entry.get("transport"), f"{label}.transport", default=False),
    )


def _parse_roles(
    value: Any, organization: str, senders: Sequence[SenderIdentity]
) -> dict[str, SenderIdentity]:
    section = _require_mapping(value, "catalog.roles")
    senders_by_name = {sender.full_name: sender for sender in senders}
    roles: dict[str, SenderIdentity] = {}
    for role in REQUIRED_SENDER_ROLES:
        sender_name = _require_non_empty_string(section.get(role), f"catalog.roles.{role}")
        full_name = sender_name if "." in sender_name else f"{organization}.{sender_name}"
        sender = senders_by_name.get(full_name)
        if sender is None:
            raise ConfigurationError(
                f"catalog.roles.{role} '{full_name}' does not exist in catalog.senders."
            )
        roles[role] = sender
    return roles


def _parse_payloads_section(value: Any, base_path: Path) -> PayloadSettings:
    section = {} if value is None else _require_mapping(value, "payloads")
    fixtures_dir = _require_non_empty_string(
        section.get("fixtures_dir", "fixtures"), "payloads.fixtures_dir"
    )
    return PayloadSettings(fixtures_dir=_resolve_path(base_path, fixtures_dir))


def _parse_run_section(value: Any, base_path: Path) -> RunDefaults:
    section = {} if value is None else _require_mapping(value, "run")
    working_dir = _require_non_empty_string(
        section.get("working_dir", "./build/csv_test_files"), "run.working_dir"
    )
    sftp_dir = _require_non_empty_string(section.get("sftp_dir", "build/sftp"), "run.sftp_dir")
    return RunDefaults(
        items=_require_positive_int(section.get("items", 5), "run.items"),
        submits=_require_positive_int(section.get("submits", 5), "run.submits"),
        working_dir=_resolve_path(base_path, working_dir),
        sftp_dir=_resolve_path(base_path, sftp_dir),
        max_report_items=_require_positive_int(
            section.get("max_report_items", 10000), "run.max_report_items"
        ),
    )


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(item.strip() for item in value.split(",") if item.strip())
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_sequence(value: Any, section_name: str) -> Sequence[Any]:
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise ConfigurationError(f"{section_name} must be a list.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str, *, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be a boolean.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value
