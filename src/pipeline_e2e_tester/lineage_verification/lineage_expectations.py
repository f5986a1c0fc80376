"""Expected lineage counts per receiver and pipeline stage."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from pipeline_e2e_tester.configuration.runtime_settings import ReceiverTarget


class PipelineStage(str, Enum):
    """Pipeline processing phase attributable to a receiver."""

    RECEIVE = "receive"
    BATCH = "batch"
    SEND = "send"


@dataclass(frozen=True)
class LineageExpectation:
    """Expected descendant count for one (receiver, stage) pair."""

    receiver: ReceiverTarget
    stage: PipelineStage
    expected_count: int


def stages_for(receiver: ReceiverTarget) -> tuple[PipelineStage, ...]:
    """Stages a receiver takes part in: always receive, then batch and send if configured."""
    return (PipelineStage.RECEIVE, *merge_stages_for(receiver))


def merge_stages_for(receiver: ReceiverTarget) -> tuple[PipelineStage, ...]:
    stages: list[PipelineStage] = []
    if receiver.has_timing:
        stages.append(PipelineStage.BATCH)
    if receiver.has_transport:
        stages.append(PipelineStage.SEND)
    return tuple(stages)


def expected_per_receiver(total_items: int, receiver_count: int) -> int:
    """Uniform fan-out share; the remainder of an uneven split is dropped."""
    if receiver_count <= 0:
        raise ValueError("At least one receiver is required to compute lineage expectations.")
    return total_items // receiver_count


def expected_merge_count(
    items_per_submission: int, submission_count: int, receiver_count: int
) -> int:
    return expected_per_receiver(items_per_submission * submission_count, receiver_count)


def build_expectations(
    receivers: Sequence[ReceiverTarget], total_items: int
) -> tuple[LineageExpectation, ...]:
    expected = expected_per_receiver(total_items, len(receivers))
    return tuple(
        LineageExpectation(receiver=receiver, stage=stage, expected_count=expected)
        for receiver in receivers
        for stage in stages_for(receiver)
    )


def build_merge_expectations(
    receivers: Sequence[ReceiverTarget], items_per_submission: int, submission_count: int
) -> tuple[LineageExpectation, ...]:
    expected = expected_merge_count(items_per_submission, submission_count, len(receivers))
    return tuple(
        LineageExpectation(receiver=receiver, stage=stage, expected_count=expected)
        for receiver in receivers
        for stage in merge_stages_for(receiver)
    )
