"""Compare expected lineage counts with what the lineage store recorded."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from pipeline_e2e_tester.configuration.runtime_settings import ReceiverTarget
from pipeline_e2e_tester.console_output import ScenarioConsole

from .lineage_expectations import (
    LineageExpectation,
    build_expectations,
    build_merge_expectations,
)
from .lineage_store import LineageStore


@dataclass(frozen=True)
class StageCheck:
    """Observed descendant count for one (receiver, stage) expectation."""

    expectation: LineageExpectation
    actual_count: int | None

    @property
    def is_ok(self) -> bool:
        """A missing count is a mismatch, never zero."""
        if self.actual_count is None:
            return False
        return self.actual_count == self.expectation.expected_count

    @property
    def receiver_full_name(self) -> str:
        return self.expectation.receiver.full_name


@dataclass(frozen=True)
class LineageVerdict:
    """Every stage check made for one submission."""

    checks: tuple[StageCheck, ...]

    @property
    def passed(self) -> bool:
        return all(check.is_ok for check in self.checks)

    @property
    def mismatches(self) -> tuple[StageCheck, ...]:
        return tuple(check for check in self.checks if not check.is_ok)


class LineageVerifier:
    """Evaluates lineage expectations inside a single read transaction of the store."""

    def __init__(self, store: LineageStore) -> None:
        self._store = store

    def examine(
        self,
        submission_id: str,
        receivers: Sequence[ReceiverTarget],
        total_items: int,
        *,
        filter_by_org: bool = False,
    ) -> LineageVerdict:
        expectations = build_expectations(receivers, total_items)
        with self._store.read_transaction() as snapshot:
            checks = tuple(
                StageCheck(
                    expectation=expectation,
                    actual_count=snapshot.count_item_descendants(
                        submission_id,
                        expectation.receiver.name,
                        expectation.stage.value,
                        expectation.receiver.organization_name if filter_by_org else None,
                    ),
                )
                for expectation in expectations
            )
        return LineageVerdict(checks=checks)

    def examine_merge(
        self,
        submission_id: str,
        receivers: Sequence[ReceiverTarget],
        items_per_submission: int,
        submission_count: int,
    ) -> LineageVerdict:
        expectations = build_merge_expectations(receivers, items_per_submission, submission_count)
        with self._store.read_transaction() as snapshot:
            checks = tuple(
                StageCheck(
                    expectation=expectation,
                    actual_count=snapshot.count_report_descendants(
                        submission_id, expectation.receiver.name, expectation.stage.value
                    ),
                )
                for expectation in expectations
            )
        return LineageVerdict(checks=checks)

    def verify(
        self,
        submission_id: str,
        receivers: Sequence[ReceiverTarget],
        total_items: int,
        *,
        console: ScenarioConsole,
        filter_by_org: bool = False,
        silent: bool = False,
    ) -> bool:
        """Check item lineage for every receiver stage and report each result unless silent."""
        verdict = self.examine(submission_id, receivers, total_items, filter_by_org=filter_by_org)
        if not silent:
            for check in verdict.checks:
                _report(check, console, "{expected} item lineage records")
        return verdict.passed

    def verify_merge(
        self,
        submission_id: str,
        receivers: Sequence[ReceiverTarget],
        items_per_submission: int,
        submission_count: int,
        *,
        console: ScenarioConsole,
    ) -> bool:
        """Check that merged downstream reports carry the combined item count."""
        verdict = self.examine_merge(
            submission_id, receivers, items_per_submission, submission_count
        )
        for check in verdict.checks:
            _report(check, console, "sum(itemCount)={expected}")
        return verdict.passed


def _report(check: StageCheck, console: ScenarioConsole, expecting: str) -> None:
    stage = check.expectation.stage.value
    expected = expecting.format(expected=check.expectation.expected_count)
    if check.is_ok:
        console.good(
            f"Test passed: for {check.receiver_full_name} action {stage}: "
            f" Expecting {expected} and got {check.actual_count}"
        )
    else:
        console.bad(
            f"*** TEST FAILED*** for {check.receiver_full_name} action {stage}: "
            f" Expecting {expected} but got {check.actual_count}"
        )
