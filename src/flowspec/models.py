from dataclasses import dataclass, field
from datetime import datetime

API_VERSION = "flowspec/v1alpha1"
KIND = "ServiceSpec"


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class ResponseSpec:
    status_codes: tuple[int, ...] = ()
    status_ranges: tuple[str, ...] = ()
    aggregation: str = "auto"

    def to_dict(self) -> dict:
        return {
            "statusCodes": list(self.status_codes),
            "statusRanges": list(self.status_ranges),
            "aggregation": self.aggregation,
        }


@dataclass(frozen=True)
class FieldSet:
    """Header and query keys, each sorted and free of duplicates."""

    headers: tuple[str, ...] = ()
    query: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"query": list(self.query), "headers": list(self.headers)}


@dataclass(frozen=True)
class SpecStats:
    support_count: int = 0
    first_seen: datetime | None = None
    last_seen: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "supportCount": self.support_count,
            "firstSeen": _isoformat(self.first_seen),
            "lastSeen": _isoformat(self.last_seen),
        }


@dataclass(frozen=True)
class OperationSpec:
    method: str
    responses: ResponseSpec = field(default_factory=ResponseSpec)
    required: FieldSet = field(default_factory=FieldSet)
    optional: FieldSet = field(default_factory=FieldSet)
    stats: SpecStats = field(default_factory=SpecStats)

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "responses": self.responses.to_dict(),
            "required": self.required.to_dict(),
            "optional": self.optional.to_dict(),
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True, eq=False)
class EndpointSpec:
    """A templated path and its operations; two endpoints are equal when their paths are."""

    path: str
    operations: tuple[OperationSpec, ...] = ()
    stats: SpecStats = field(default_factory=SpecStats)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EndpointSpec):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)

    def operation(self, method: str) -> OperationSpec | None:
        for op in self.operations:
            if op.method == method:
                return op
        return None

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "operations": [op.to_dict() for op in self.operations],
            "stats": self.stats.to_dict(),
        }


@dataclass(frozen=True)
class ServiceSpecMetadata:
    name: str
    version: str


@dataclass(frozen=True)
class ServiceSpec:
    """The contract document produced by one generation run."""

    metadata: ServiceSpecMetadata
    endpoints: tuple[EndpointSpec, ...] = ()
    api_version: str = API_VERSION
    kind: str = KIND

    def endpoint(self, path: str) -> EndpointSpec | None:
        for ep in self.endpoints:
            if ep.path == path:
                return ep
        return None

    def to_dict(self) -> dict:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": {"name": self.metadata.name, "version": self.metadata.version},
            "spec": {"endpoints": [ep.to_dict() for ep in self.endpoints]},
        }
