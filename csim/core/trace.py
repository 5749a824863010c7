"""Valgrind trace decoding.

Each trace line looks like ``" L 7ff000398,8"``: an operation character,
a hexadecimal address and a decimal access size. Lines that do not fit
that shape, or carry an operation other than L/S/M, decode to OTHER
records so the replayer can skip them.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*(\S)\s*(?:0[xX])?([0-9a-fA-F]+)\s*,\s*(-?\d+)")


class UnreadableTraceError(OSError):
    """The trace file could not be opened or read."""


class OperationKind(Enum):
    LOAD = "L"
    STORE = "S"
    MODIFY = "M"
    OTHER = "?"

    @classmethod
    def from_char(cls, ch: str) -> "OperationKind":
        for kind in (cls.LOAD, cls.STORE, cls.MODIFY):
            if kind.value == ch:
                return kind
        return cls.OTHER


@dataclass(frozen=True)
class TraceRecord:
    op: OperationKind
    address: int = 0
    size: int = 0
    text: str = ""


def parse_line(line: str) -> Optional[TraceRecord]:
    """Decode one trace line. Blank lines give None."""
    text = line.strip()
    if not text:
        return None
    m = _LINE_RE.match(text)
    if m is None:
        logger.debug("malformed trace line: %r", text)
        return TraceRecord(OperationKind.OTHER, text=text)
    op_char, addr, size = m.groups()
    return TraceRecord(OperationKind.from_char(op_char), int(addr, 16), int(size), text)


def iter_trace(lines: Iterable[str]) -> Iterator[TraceRecord]:
    for line in lines:
        record = parse_line(line)
        if record is not None:
            yield record


def read_trace(path: str) -> Iterator[TraceRecord]:
    """Open `path` and lazily yield its records.

    The file is opened before the first record is requested, so a missing
    or unreadable trace raises UnreadableTraceError straight away.
    """
    try:
        fh = open(path, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise UnreadableTraceError(e.errno, f"cannot open trace file: {e.strerror}", path) from e
    return _records_from(fh, path)


def _records_from(fh, path: str) -> Iterator[TraceRecord]:
    with fh:
        try:
            yield from iter_trace(fh)
        except OSError as e:
            raise UnreadableTraceError(e.errno, f"error reading trace file: {e.strerror}", path) from e
