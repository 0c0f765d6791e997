"""Record sources for backtesting.

A source is a lazy, forward-only iterable of records of a single
DataKind. Iterating a CsvRecordSource built on a path reopens the file;
one built on a stream consumes it.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Protocol, TextIO

from pydantic import ValidationError

from core.models import RECORD_TYPES, DataKind, Record, Side

logger = logging.getLogger(__name__)

_DELIMITER = re.compile(r"[,;\s]+")

_COLUMNS: dict[DataKind, tuple[str, ...]] = {
    DataKind.OHLCV: ("timestamp", "open", "high", "low", "close", "volume"),
    DataKind.TICK: ("timestamp", "price", "volume", "side"),
    DataKind.SINGLE_VALUE: ("timestamp", "value"),
}

# Tick side column: numeric codes or words
_TICK_SIDES: dict[str, Side] = {
    "0": Side.BUY,
    "1": Side.SELL,
    "2": Side.HOLD,
    "buy": Side.BUY,
    "sell": Side.SELL,
    "hold": Side.HOLD,
    "none": Side.HOLD,
}


class RecordSource(Protocol):
    """Protocol for record producers consumed by the engine."""

    @property
    def kind(self) -> DataKind: ...

    def __iter__(self) -> Iterator[Record]: ...


def parse_line(line: str, kind: DataKind) -> Record:
    """Parse one delimited line into a record of the given kind.

    Raises:
        ValueError: Wrong column count, unknown tick side, or a value that
            fails record validation.
    """
    fields = [f for f in _DELIMITER.split(line.strip()) if f]
    columns = _COLUMNS[kind]
    required = len(columns) - 1 if kind == DataKind.TICK else len(columns)
    if not required <= len(fields) <= len(columns):
        raise ValueError(f"expected {required} to {len(columns)} columns, got {len(fields)}")

    values: dict[str, object] = dict(zip(columns, fields))
    if "side" in values:
        side = _TICK_SIDES.get(str(values["side"]).lower())
        if side is None:
            raise ValueError(f"unknown tick side {values['side']!r}")
        values["side"] = side

    try:
        return RECORD_TYPES[kind].model_validate(values)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValueError(errors) from e


class CsvRecordSource:
    """Read records from delimited text (comma, semicolon or whitespace).

    Paths are read as bytes and decoded per line, so an undecodable line
    is malformed like any other. Malformed lines are logged and counted
    in ``skipped``; blank lines are ignored silently.
    """

    def __init__(
        self,
        source: str | Path | TextIO | BinaryIO,
        kind: DataKind,
        has_header: bool = True,
    ):
        self._source = source
        self._kind = kind
        self.has_header = has_header
        self.parsed = 0
        self.skipped = 0

    @property
    def kind(self) -> DataKind:
        return self._kind

    @property
    def name(self) -> str:
        if isinstance(self._source, (str, Path)):
            return str(self._source)
        return getattr(self._source, "name", "<stream>")

    def __iter__(self) -> Iterator[Record]:
        if isinstance(self._source, (str, Path)):
            with open(self._source, "rb") as f:
                yield from self._parse(f)
        else:
            yield from self._parse(self._source)

    def _parse(self, lines: Iterable[str | bytes]) -> Iterator[Record]:
        header_pending = self.has_header
        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            if header_pending:
                header_pending = False
                logger.debug(f"{self.name}:{lineno}: skipping header line: {line!r}")
                continue
            try:
                # UnicodeDecodeError is a ValueError
                text = line.decode("utf-8") if isinstance(line, bytes) else line
                record = parse_line(text, self._kind)
            except ValueError as e:
                self.skipped += 1
                logger.warning(f"{self.name}:{lineno}: skipping malformed line: {e}")
                continue
            self.parsed += 1
            yield record


def open_source(path: str, kind: DataKind, has_header: bool = True) -> CsvRecordSource:
    """Build a CSV source; ``-`` reads standard input."""
    if path == "-":
        return CsvRecordSource(getattr(sys.stdin, "buffer", sys.stdin), kind, has_header=has_header)
    return CsvRecordSource(Path(path), kind, has_header=has_header)


class ListRecordSource:
    """In-memory source over already parsed records."""

    def __init__(self, records: Iterable[Record], kind: DataKind):
        self._records = list(records)
        self._kind = kind

    @property
    def kind(self) -> DataKind:
        return self._kind

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
