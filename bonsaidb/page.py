"""Fixed-size data page holding a run of serialized records."""

from __future__ import annotations

import struct
from collections.abc import Iterable

from bonsaidb.record import Record

PAGE_SIZE = 4096
"""Size in bytes of every page on disk."""

_HEADER = struct.Struct("<IH")
HEADER_SIZE = _HEADER.size
"""Bytes taken by the page id and record count at the start of a page."""

CAPACITY = (PAGE_SIZE - HEADER_SIZE) // Record.size()
"""Largest number of records one page can hold."""


class Page:
    """A page of records with a small header, serialized to ``PAGE_SIZE`` bytes."""

    def __init__(self, records: Iterable[Record] = (), page_id: int = 0) -> None:
        self.page_id = page_id
        self._chunks: list[bytes] = []
        for record in records:
            if not self.add_record(record):
                raise ValueError(f"a page holds at most {CAPACITY} records")

    def add_record(self, record: Record) -> bool:
        """Append ``record``; return False when the page has no room left."""
        if self.free_space < Record.size():
            return False
        self._chunks.append(record.serialize())
        return True

    def records(self) -> list[Record]:
        """Return the records stored in the page, in insertion order."""
        return [Record.deserialize(chunk) for chunk in self._chunks]

    @property
    def num_records(self) -> int:
        """Number of records in the page."""
        return len(self._chunks)

    @property
    def free_space(self) -> int:
        """Bytes still free for records."""
        return PAGE_SIZE - HEADER_SIZE - self.num_records * Record.size()

    def serialize(self) -> bytes:
        """Encode the page into exactly ``PAGE_SIZE`` bytes."""
        try:
            header = _HEADER.pack(self.page_id, self.num_records)
        except struct.error as exc:
            raise ValueError(f"page header out of range: {exc}") from exc
        body = header + b"".join(self._chunks)
        return body.ljust(PAGE_SIZE, b"\0")

    @classmethod
    def deserialize(cls, buffer: bytes | bytearray | memoryview) -> Page:
        """Decode a page from a buffer of exactly ``PAGE_SIZE`` bytes."""
        if len(buffer) != PAGE_SIZE:
            raise ValueError(f"page buffer must be {PAGE_SIZE} bytes, got {len(buffer)}")
        page_id, count = _HEADER.unpack_from(buffer, 0)
        if count > CAPACITY:
            raise ValueError(f"page claims {count} records; at most {CAPACITY} fit")
        page = cls(page_id=page_id)
        size = Record.size()
        end = HEADER_SIZE + count * size
        page._chunks = [
            bytes(buffer[start:start + size]) for start in range(HEADER_SIZE, end, size)
        ]
        return page