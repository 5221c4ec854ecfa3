from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from flowspec.capture.record import NormalizedRecord
from flowspec.inference.templater import PathTemplater


@dataclass
class OperationAccumulator:
    """Presence counts and status codes for one (templated path, method)."""

    method: str
    sample_count: int = 0
    header_counts: Counter = field(default_factory=Counter)
    query_counts: Counter = field(default_factory=Counter)
    status_codes: list[int] = field(default_factory=list)
    first_seen: datetime | None = None
    last_seen: datetime | None = None

    def add(self, record: NormalizedRecord) -> None:
        self.sample_count += 1
        self.header_counts.update(record.header_keys())
        self.query_counts.update(record.query_keys())
        self.status_codes.append(record.status)

        ts = record.timestamp
        if ts is not None:
            if self.first_seen is None or ts < self.first_seen:
                self.first_seen = ts
            if self.last_seen is None or ts > self.last_seen:
                self.last_seen = ts


@dataclass
class EndpointAccumulator:
    path: str
    operations: dict[str, OperationAccumulator] = field(default_factory=dict)

    @property
    def sample_count(self) -> int:
        return sum(op.sample_count for op in self.operations.values())

    def add(self, record: NormalizedRecord) -> None:
        op = self.operations.get(record.method)
        if op is None:
            op = self.operations[record.method] = OperationAccumulator(method=record.method)
        op.add(record)


def aggregate(
    records: Iterable[NormalizedRecord],
    templater: PathTemplater,
    min_endpoint_samples: int = 1,
) -> dict[str, EndpointAccumulator]:
    """Group buffered records by templated path and method, dropping endpoints with too few samples."""
    endpoints: dict[str, EndpointAccumulator] = {}

    for record in records:
        path = templater.template(record)
        endpoint = endpoints.get(path)
        if endpoint is None:
            endpoint = endpoints[path] = EndpointAccumulator(path=path)
        endpoint.add(record)

    return {
        path: endpoint
        for path, endpoint in endpoints.items()
        if endpoint.sample_count >= min_endpoint_samples
    }
