"""Page-addressed access to a single database file."""

from __future__ import annotations

import os
import struct
from pathlib import Path
from types import TracebackType

from bonsaidb.page import PAGE_SIZE, Page

_ROOT_ID = struct.Struct("<I")
_DEFAULT_ROOT_ID = 1


class PageNotFoundError(LookupError):
    """Raised when a page lies entirely beyond the end of the file."""


class FileManager:
    """Reads and writes fixed-size pages of a database file.

    Page 0 is a metadata page whose first four bytes hold the root page id
    of the index. A new or empty file is given a zeroed metadata page.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        try:
            self._file = open(self.path, "r+b")
        except FileNotFoundError:
            self._file = open(self.path, "w+b")
        if self._size() == 0:
            self._file.write(bytes(PAGE_SIZE))
            self._file.flush()

    def _size(self) -> int:
        return self._file.seek(0, os.SEEK_END)

    @staticmethod
    def _offset(page_id: int) -> int:
        if not 0 <= page_id < 2**32:
            raise ValueError(f"invalid page id {page_id}")
        return page_id * PAGE_SIZE

    def write_raw_page(self, page_id: int, buffer: bytes | bytearray) -> None:
        """Write a buffer of exactly ``PAGE_SIZE`` bytes at ``page_id``."""
        if len(buffer) != PAGE_SIZE:
            raise ValueError(f"page buffer must be {PAGE_SIZE} bytes, got {len(buffer)}")
        self._file.seek(self._offset(page_id))
        self._file.write(buffer)
        self._file.flush()

    def read_raw_page(self, page_id: int) -> bytes:
        """Read the page at ``page_id``, zero-filling a short final page."""
        self._file.seek(self._offset(page_id))
        data = self._file.read(PAGE_SIZE)
        if not data:
            raise PageNotFoundError(f"page {page_id} is beyond the end of {self.path}")
        return data.ljust(PAGE_SIZE, b"\0")

    def write_page(self, page_id: int, page: Page) -> None:
        """Serialize ``page`` and store it at ``page_id``."""
        self.write_raw_page(page_id, page.serialize())

    def read_page(self, page_id: int) -> Page:
        """Load and decode the data page at ``page_id``."""
        return Page.deserialize(self.read_raw_page(page_id))

    def read_root_page_id(self) -> int:
        """Return the index root page id kept in the metadata page."""
        self._file.seek(0)
        data = self._file.read(_ROOT_ID.size)
        if len(data) != _ROOT_ID.size:
            return _DEFAULT_ROOT_ID
        return _ROOT_ID.unpack(data)[0]

    def write_root_page_id(self, page_id: int) -> None:
        """Record ``page_id`` as the index root in the metadata page."""
        try:
            data = _ROOT_ID.pack(page_id)
        except struct.error as exc:
            raise ValueError(f"invalid page id {page_id}") from exc
        self._file.seek(0)
        self._file.write(data)
        self._file.flush()

    def allocate_page(self) -> int:
        """Append a zeroed page and return its id."""
        page_id = self._size() // PAGE_SIZE
        self._file.seek(self._offset(page_id))
        self._file.write(bytes(PAGE_SIZE))
        self._file.flush()
        return page_id

    def num_pages(self) -> int:
        """Number of whole pages in the file."""
        return self._size() // PAGE_SIZE

    def close(self) -> None:
        """Close the underlying file."""
        self._file.close()

    def __enter__(self) -> FileManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()