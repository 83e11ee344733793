"""Fixed-size customer record and its binary layout."""

from __future__ import annotations

import struct
from dataclasses import dataclass

NAME_SIZE = 50
"""Bytes reserved for the name field, including its terminating NUL."""

_LAYOUT = struct.Struct(f"<i{NAME_SIZE}sid")


@dataclass
class Record:
    """A row with an id, a name, an age and a balance."""

    id: int
    name: str = ""
    age: int = 0
    balance: float = 0.0

    def serialize(self) -> bytes:
        """Encode the record into exactly ``Record.size()`` bytes."""
        encoded = self.name.encode("utf-8")
        if len(encoded) >= NAME_SIZE:
            raise ValueError(
                f"name takes {len(encoded)} bytes; at most {NAME_SIZE - 1} fit"
            )
        try:
            return _LAYOUT.pack(self.id, encoded, self.age, self.balance)
        except struct.error as exc:
            raise ValueError(f"record field out of range: {exc}") from exc

    @classmethod
    def deserialize(cls, buffer: bytes | bytearray | memoryview, offset: int = 0) -> Record:
        """Decode a record that starts at ``offset`` in ``buffer``."""
        if offset < 0:
            raise ValueError("offset must not be negative")
        try:
            record_id, raw_name, age, balance = _LAYOUT.unpack_from(buffer, offset)
        except struct.error as exc:
            raise ValueError(f"buffer too short for a record at offset {offset}") from exc
        name = raw_name.split(b"\0", 1)[0].decode("utf-8", errors="replace")
        return cls(record_id, name, age, balance)

    @classmethod
    def size(cls) -> int:
        """Size in bytes of a serialized record."""
        return _LAYOUT.size