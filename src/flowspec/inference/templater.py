from flowspec.capture.extractor import is_numeric, is_uuid_like, join_path
from flowspec.capture.record import NormalizedRecord, Shape
from flowspec.inference.segments import PathSegmentAnalysis, SegmentStatistics

NUMERIC_PLACEHOLDER = "{num}"
UUID_PLACEHOLDER = "{id}"
GENERIC_PLACEHOLDER = "{var}"


def should_parameterize(analysis: PathSegmentAnalysis, min_sample_size: int, threshold: float) -> bool:
    """
    Decide whether a position holds identifiers rather than a literal.

    High uniqueness alone is not enough: a position needs ``min_sample_size``
    observations first. A single repeated value is always a literal.
    """
    if analysis.total_count < min_sample_size or analysis.total_count == 0:
        return False
    if analysis.is_limited:
        return True
    if analysis.unique_count < 2:
        return False
    return analysis.unique_count / analysis.total_count >= threshold


def placeholder_for(analysis: PathSegmentAnalysis) -> str:
    if analysis.is_limited or not analysis.unique_values:
        return GENERIC_PLACEHOLDER
    values = analysis.unique_values.keys()
    if all(is_numeric(value) for value in values):
        return NUMERIC_PLACEHOLDER
    if all(is_uuid_like(value) for value in values):
        return UUID_PLACEHOLDER
    return GENERIC_PLACEHOLDER


class PathTemplater:
    """Turns literal paths into templated paths using the collected segment statistics."""

    def __init__(self, statistics: SegmentStatistics, *, min_sample_size: int, threshold: float) -> None:
        self.statistics = statistics
        self.min_sample_size = min_sample_size
        self.threshold = threshold
        self._decisions: dict[Shape, list[str | None]] = {}

    def decisions(self, shape: Shape) -> list[str | None]:
        """Placeholder per position of a shape, None where the literal is kept."""
        if shape not in self._decisions:
            stats = self.statistics.get(shape)
            if stats is None:
                self._decisions[shape] = [None] * shape[1]
                return self._decisions[shape]
            self._decisions[shape] = [
                placeholder_for(analysis)
                if should_parameterize(analysis, self.min_sample_size, self.threshold)
                else None
                for analysis in stats.positions
            ]
        return self._decisions[shape]

    def template(self, record: NormalizedRecord) -> str:
        segments = record.segments()
        decisions = self.decisions(record.shape())
        return join_path(
            placeholder if placeholder is not None else segment
            for segment, placeholder in zip(segments, decisions)
        )
