"""
Thread-safe record collection shared by the extraction workers.
"""

import threading
from typing import List, Sequence

from ..models import Record


class RecordSet:
    """
    Unordered collection of records filled concurrently by extraction tasks.

    A single lock guards every merge and is held only for the append, never
    for extraction work. Once closed, the collection rejects further merges,
    so tasks that finish after the aggregation deadline cannot change the
    records handed to the writer.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: List[Record] = []
        self._closed = False
        self._merge_count = 0

    def merge(self, records: Sequence[Record]) -> bool:
        """
        Append one task's records.

        Args:
            records: Records produced by a single document

        Returns:
            True if the records were added, False if the set is already closed
        """
        with self._lock:
            if self._closed:
                return False
            self._records.extend(records)
            self._merge_count += 1
            return True

    def close(self) -> List[Record]:
        """Reject further merges and return a snapshot of the merged records."""
        with self._lock:
            self._closed = True
            return list(self._records)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def merge_count(self) -> int:
        """Number of merges accepted so far."""
        with self._lock:
            return self._merge_count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
