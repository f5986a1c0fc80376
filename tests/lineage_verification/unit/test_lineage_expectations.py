"""Lineage expectation tests."""

from __future__ import annotations

import pytest
from pipeline_e2e_tester.configuration.runtime_settings import ReceiverTarget
from pipeline_e2e_tester.lineage_verification import (
    PipelineStage,
    build_expectations,
    build_merge_expectations,
    expected_merge_count,
    expected_per_receiver,
    stages_for,
)


def _receiver(name: str, *, timing: bool, transport: bool) -> ReceiverTarget:
    return ReceiverTarget(
        organization_name="ignore", name=name, has_timing=timing, has_transport=transport
    )


def test_stages_follow_receiver_configuration() -> None:
    assert stages_for(_receiver("CSV", timing=True, transport=True)) == (
        PipelineStage.RECEIVE,
        PipelineStage.BATCH,
        PipelineStage.SEND,
    )
    assert stages_for(_receiver("HL7_NULL", timing=True, transport=False)) == (
        PipelineStage.RECEIVE,
        PipelineStage.BATCH,
    )
    assert stages_for(_receiver("QUALITY_PASS", timing=False, transport=False)) == (
        PipelineStage.RECEIVE,
    )


@pytest.mark.parametrize(
    ("total", "receivers", "expected"),
    [(25, 5, 5), (7, 3, 2), (2, 3, 0), (100, 1, 100)],
)
def test_expected_per_receiver_uses_integer_division(
    total: int, receivers: int, expected: int
) -> None:
    assert expected_per_receiver(total, receivers) == expected


def test_expected_per_receiver_requires_receivers() -> None:
    with pytest.raises(ValueError, match="At least one receiver"):
        expected_per_receiver(5, 0)


def test_merge_expectation_combines_every_submission() -> None:
    assert expected_merge_count(5, 5, 3) == 8


def test_build_expectations_covers_every_receiver_stage() -> None:
    receivers = (
        _receiver("CSV", timing=True, transport=True),
        _receiver("HL7", timing=False, transport=True),
    )

    expectations = build_expectations(receivers, 10)

    assert [(e.receiver.name, e.stage, e.expected_count) for e in expectations] == [
        ("CSV", PipelineStage.RECEIVE, 5),
        ("CSV", PipelineStage.BATCH, 5),
        ("CSV", PipelineStage.SEND, 5),
        ("HL7", PipelineStage.RECEIVE, 5),
        ("HL7", PipelineStage.SEND, 5),
    ]


def test_merge_expectations_skip_the_receive_stage() -> None:
    receivers = (
        _receiver("CSV", timing=True, transport=True),
        _receiver("REDOX", timing=False, transport=False),
    )

    expectations = build_merge_expectations(receivers, 5, 4)

    assert [(e.receiver.name, e.stage, e.expected_count) for e in expectations] == [
        ("CSV", PipelineStage.BATCH, 10),
        ("CSV", PipelineStage.SEND, 10),
    ]
