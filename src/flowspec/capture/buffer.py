import logging
import threading

from flowspec.capture.record import NormalizedRecord

logger = logging.getLogger(__name__)


class RecordBuffer:
    """Thread-safe buffer that accumulates records captured from live traffic until drained."""

    def __init__(self, max_size: int = 100_000) -> None:
        self.max_size = max_size
        self.dropped = 0
        self._records: list[NormalizedRecord] = []
        self._lock = threading.Lock()

    def add(self, record: NormalizedRecord) -> None:
        with self._lock:
            if len(self._records) >= self.max_size:
                if not self.dropped:
                    logger.warning("flowspec: record buffer full (%d), dropping new records", self.max_size)
                self.dropped += 1
                return
            self._records.append(record)

    def drain(self) -> list[NormalizedRecord]:
        """Hand over everything captured so far and start a fresh batch."""
        with self._lock:
            batch = self._records
            self._records = []
            self.dropped = 0
            return batch

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
