"""Data models shared by indicators, strategies and the backtester."""

from core.models.ledger import EquityPoint, Position
from core.models.record import (
    RECORD_TYPES,
    DataKind,
    OhlcvField,
    OhlcvRecord,
    Record,
    SingleValueRecord,
    TickRecord,
)
from core.models.signal import Side, Signal

__all__ = [
    "DataKind",
    "EquityPoint",
    "OhlcvField",
    "OhlcvRecord",
    "Position",
    "RECORD_TYPES",
    "Record",
    "Side",
    "Signal",
    "SingleValueRecord",
    "TickRecord",
]
