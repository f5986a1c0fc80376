"""Payload production exports."""

from .fake_payloads import (
    CSV_COLUMNS,
    FakePayloadProducer,
    PayloadProductionError,
    fixture_path,
    substitute_text,
)

__all__ = [
    "CSV_COLUMNS",
    "FakePayloadProducer",
    "PayloadProductionError",
    "fixture_path",
    "substitute_text",
]
