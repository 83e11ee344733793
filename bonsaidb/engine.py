"""Record storage with a B+ tree index over record ids."""

from __future__ import annotations

import logging
import os
import threading
from types import TracebackType

from bonsaidb.bplustree import BPlusTree
from bonsaidb.file_manager import FileManager, PageNotFoundError
from bonsaidb.page import Page
from bonsaidb.record import Record

logger = logging.getLogger(__name__)


class DatabaseEngine:
    """Stores records in data pages and indexes them by id.

    Records are appended to the current data page until it is full, after
    which a new page is allocated. All operations are serialized by a lock.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._fm = FileManager(path)
        self._index = BPlusTree(self._fm)
        self._next_data_page_id = self._fm.num_pages()
        self._lock = threading.Lock()

    def insert(self, record: Record) -> int:
        """Store ``record`` and index it; return the data page it went to."""
        with self._lock:
            page_id = self._next_data_page_id
            if page_id < self._fm.num_pages():
                page = self._fm.read_page(page_id)
            else:
                page = Page()

            if not page.add_record(record):
                page_id = self._fm.allocate_page()
                page = Page([record])
                self._next_data_page_id = page_id

            self._fm.write_page(page_id, page)
            self._index.insert(record.id, page_id)
            logger.info("record %d stored in data page %d", record.id, page_id)
            return page_id

    def find(self, record_id: int) -> Record | None:
        """Return the record with ``record_id``, or None."""
        with self._lock:
            page_id = self._index.search(record_id)
            if page_id is None:
                return None
            try:
                page = self._fm.read_page(page_id)
            except PageNotFoundError:
                return None
            return next((rec for rec in page.records() if rec.id == record_id), None)

    def remove(self, record_id: int) -> bool:
        """Remove ``record_id`` from the index; return False when absent.

        The record's bytes stay in its data page.
        """
        with self._lock:
            removed = self._index.remove(record_id)
        if removed:
            logger.info("record %d removed from the index", record_id)
        else:
            logger.info("record %d not found in the index", record_id)
        return removed

    def dump_all(self) -> list[Record]:
        """Every record in the data pages reachable from the index."""
        with self._lock:
            records: list[Record] = []
            for page_id in self._index.get_all_data_page_ids():
                try:
                    page = self._fm.read_page(page_id)
                except PageNotFoundError:
                    continue
                records.extend(page.records())
            return records

    def close(self) -> None:
        """Close the database file."""
        self._fm.close()

    def __enter__(self) -> DatabaseEngine:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()