"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

EXCLUDED_RECEIVER_MARKERS = ("FAIL", "BLOBSTORE", "QUALITY", "AS2", "OTC")


class CatalogLookupError(LookupError):
    """Raised when a scenario references a sender or receiver missing from the catalog."""


@dataclass(frozen=True)
class TargetEnvironment:
    """Deployment of the ingestion pipeline that submissions are POSTed to."""

    name: str
    endpoint: str
    database_markers: tuple[str, ...]
    requires_key: bool
    enabled: bool = True

    @property
    def is_local(self) -> bool:
        """Return True for the local deployment, whose batch cycle runs on the minute."""
        return self.name == "local"


@dataclass(frozen=True)
class LineageStoreSettings:
    """Connection settings for the persisted lineage graph."""

    url: str


@dataclass(frozen=True)
class SenderIdentity:
    """Configured sender used as the submission identity."""

    organization_name: str
    name: str
    format: str

    @property
    def full_name(self) -> str:
        return f"{self.organization_name}.{self.name}"


@dataclass(frozen=True)
class ReceiverTarget:
    """Configured destination that may batch and/or forward processed data."""

    organization_name: str
    name: str
    has_timing: bool
    has_transport: bool

    @property
    def full_name(self) -> str:
        return f"{self.organization_name}.{self.name}"


@dataclass(frozen=True)
class PipelineCatalog:  # pylint: disable=too-many-instance-attributes
    """Sender and receiver catalogs, keyed by organization and name."""

    organization: str
    topic: str
    receiving_states: str
    states: tuple[str, ...]
    senders: tuple[SenderIdentity, ...]
    receivers: tuple[ReceiverTarget, ...]
    role_senders: Mapping[str, SenderIdentity] = field(default_factory=dict)

    def find_sender(self, full_name: str) -> SenderIdentity | None:
        for sender in self.senders:
            if sender.full_name == full_name:
                return sender
        return None

    def find_receiver(self, organization_name: str, name: str) -> ReceiverTarget | None:
        for receiver in self.receivers:
            if receiver.organization_name == organization_name and receiver.name == name:
                return receiver
        return None

    def sender_for_role(self, role: str) -> SenderIdentity:
        """Return the sender configured for a scenario role such as 'strac'."""
        sender = self.role_senders.get(role)
        if sender is None:
            raise CatalogLookupError(f"No sender configured for role '{role}'.")
        return sender

    def require_receiver(self, name: str) -> ReceiverTarget:
        """Return a receiver of the test organization or raise CatalogLookupError."""
        receiver = self.find_receiver(self.organization, name)
        if receiver is None:
            raise CatalogLookupError(
                f"Unable to find receiver {name} for organization {self.organization}"
            )
        return receiver

    def all_good_receivers(self) -> tuple[ReceiverTarget, ...]:
        """Receivers of the test organization expected to accept and deliver data."""
        return tuple(
            receiver
            for receiver in self.receivers
            if receiver.organization_name == self.organization
            and not any(marker in receiver.name for marker in EXCLUDED_RECEIVER_MARKERS)
        )


@dataclass(frozen=True)
class PayloadSettings:
    """Location of canned input files used by the rejection scenarios."""

    fixtures_dir: Path


@dataclass(frozen=True)
class RunDefaults:
    """Default run options applied when the CLI does not override them."""

    items: int
    submits: int
    working_dir: Path
    sftp_dir: Path
    max_report_items: int


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    environments: Mapping[str, TargetEnvironment]
    lineage_store: LineageStoreSettings
    catalog: PipelineCatalog
    payloads: PayloadSettings
    run_defaults: RunDefaults
