"""Registered end-to-end scenarios."""

from .connectivity import Ping
from .delivery import (
    BadSftp,
    DbConnections,
    End2End,
    Hl7Null,
    Huge,
    InternationalContent,
    Merge,
    Strac,
    Waters,
)
from .discovery import SantaClaus
from .load import HammerTime, RepeatWaters, StracPack
from .rejection import BadCsv, Garbage, OtcProctored, QualityFilter, TooBig, TooManyCols

__all__ = [
    "BadCsv",
    "BadSftp",
    "DbConnections",
    "End2End",
    "Garbage",
    "HammerTime",
    "Hl7Null",
    "Huge",
    "InternationalContent",
    "Merge",
    "OtcProctored",
    "Ping",
    "QualityFilter",
    "RepeatWaters",
    "SantaClaus",
    "Strac",
    "StracPack",
    "TooBig",
    "TooManyCols",
    "Waters",
]
