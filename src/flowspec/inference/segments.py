from dataclasses import dataclass, field

from flowspec.capture.record import NormalizedRecord, Shape


@dataclass
class PathSegmentAnalysis:
    """Value frequencies seen at one position of one path shape."""

    unique_values: dict[str, int] = field(default_factory=dict)
    total_count: int = 0
    is_limited: bool = False

    def add(self, value: str, max_unique_values: int) -> None:
        self.total_count += 1
        if self.is_limited:
            return
        if value in self.unique_values:
            self.unique_values[value] += 1
        elif len(self.unique_values) < max_unique_values:
            self.unique_values[value] = 1
        else:
            # Too many distinct values to keep; only the total is tracked from here on
            self.is_limited = True
            self.unique_values = {}

    @property
    def unique_count(self) -> int:
        return len(self.unique_values)


@dataclass
class ShapeStatistics:
    """All positions of one (method, segment count) shape."""

    shape: Shape
    record_count: int = 0
    positions: list[PathSegmentAnalysis] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.positions:
            self.positions = [PathSegmentAnalysis() for _ in range(self.shape[1])]


class SegmentStatistics:
    """
    First pass of generation: per-shape, per-position value tables.

    Records are grouped by shape, the pair of HTTP method and number of path
    segments, so that "/users/1" and "/users/1/orders" never share a position
    table. The collector only accumulates; templating decisions are taken
    after the whole source has been observed.
    """

    def __init__(self, max_unique_values: int = 10000) -> None:
        self.max_unique_values = max_unique_values
        self.shapes: dict[Shape, ShapeStatistics] = {}

    def observe(self, record: NormalizedRecord) -> Shape:
        shape = record.shape()
        segments = record.segments()

        stats = self.shapes.get(shape)
        if stats is None:
            stats = self.shapes[shape] = ShapeStatistics(shape=shape)

        stats.record_count += 1
        for analysis, segment in zip(stats.positions, segments):
            analysis.add(segment, self.max_unique_values)
        return shape

    def get(self, shape: Shape) -> ShapeStatistics | None:
        return self.shapes.get(shape)
