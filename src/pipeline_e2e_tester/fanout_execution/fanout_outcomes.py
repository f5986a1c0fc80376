"""Fan-out execution domain entities."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class UnitFailure:
    """One submission of a wave that produced no usable identifier."""

    index: int
    reason: str

    @staticmethod
    def from_exception(index: int, error: Exception) -> UnitFailure:
        return UnitFailure(index=index, reason=str(error) or type(error).__name__)


@dataclass(frozen=True)
class CollectedIdentifiers:
    """Point-in-time copy of an IdentifierCollector."""

    identifiers: tuple[str, ...]
    failures: tuple[UnitFailure, ...]


class IdentifierCollector:
    """Append-only identifier list shared by concurrent submission workers.

    Every mutation and the final snapshot take the same lock, so readers never
    see a partially updated collection.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._identifiers: list[str] = []
        self._failures: list[UnitFailure] = []

    def append(self, identifier: str) -> None:
        with self._lock:
            self._identifiers.append(identifier)

    def record_failure(self, failure: UnitFailure) -> None:
        with self._lock:
            self._failures.append(failure)

    def snapshot(self) -> CollectedIdentifiers:
        with self._lock:
            return CollectedIdentifiers(
                identifiers=tuple(self._identifiers),
                failures=tuple(sorted(self._failures, key=lambda failure: failure.index)),
            )


@dataclass(frozen=True)
class FanoutOutcome:
    """Aggregate of one fan-out wave: submissions, stragglers and verification."""

    identifiers: tuple[str, ...]
    failures: tuple[UnitFailure, ...]
    unfinished: int
    verification_passed: bool

    @property
    def passed(self) -> bool:
        return not self.failures and self.unfinished == 0 and self.verification_passed
