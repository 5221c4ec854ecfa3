from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType

from flowspec.capture.extractor import split_path

Shape = tuple[str, int]


def _freeze(values: Mapping[str, tuple[str, ...]] | None) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({
        key: (vals,) if isinstance(vals, str) else tuple(vals)
        for key, vals in (values or {}).items()
    })


@dataclass(frozen=True)
class NormalizedRecord:
    """One observed request/response pair, with the literal (untemplated) path."""

    method: str
    path: str
    status: int
    timestamp: datetime | None = None
    query: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    host: str = ""
    scheme: str = ""
    body_bytes: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", _freeze(self.query))
        object.__setattr__(self, "headers", _freeze(self.headers))
        # Naive timestamps are read as UTC so first/last seen stay comparable.
        if isinstance(self.timestamp, datetime) and self.timestamp.tzinfo is None:
            object.__setattr__(self, "timestamp", self.timestamp.replace(tzinfo=timezone.utc))

    def header_keys(self) -> frozenset[str]:
        return frozenset(key.lower() for key in self.headers)

    def query_keys(self) -> frozenset[str]:
        return frozenset(self.query)

    def segments(self) -> list[str]:
        return split_path(self.path)

    def shape(self) -> Shape:
        return (self.method, len(self.segments()))

    def is_well_formed(self) -> bool:
        return isinstance(self.method, str) and bool(self.method) and isinstance(self.path, str) and bool(self.path)
