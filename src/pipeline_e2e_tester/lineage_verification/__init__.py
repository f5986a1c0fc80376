"""Lineage verification domain package."""

from .lineage_expectations import (
    LineageExpectation,
    PipelineStage,
    build_expectations,
    build_merge_expectations,
    expected_merge_count,
    expected_per_receiver,
    merge_stages_for,
    stages_for,
)
from .lineage_store import (
    ActionRecord,
    LineageSnapshot,
    LineageStore,
    LineageStoreError,
    SqlLineageSnapshot,
    SqlLineageStore,
)
from .lineage_verifier import LineageVerdict, LineageVerifier, StageCheck

__all__ = [
    "ActionRecord",
    "LineageExpectation",
    "LineageSnapshot",
    "LineageStore",
    "LineageStoreError",
    "LineageVerdict",
    "LineageVerifier",
    "PipelineStage",
    "SqlLineageSnapshot",
    "SqlLineageStore",
    "StageCheck",
    "build_expectations",
    "build_merge_expectations",
    "expected_merge_count",
    "expected_per_receiver",
    "merge_stages_for",
    "stages_for",
]
