import uuid

import pytest

from flowspec.capture.record import NormalizedRecord
from flowspec.inference.segments import PathSegmentAnalysis, SegmentStatistics
from flowspec.inference.templater import (
    GENERIC_PLACEHOLDER,
    NUMERIC_PLACEHOLDER,
    UUID_PLACEHOLDER,
    PathTemplater,
    placeholder_for,
    should_parameterize,
)


def _record(path: str, method: str = "GET") -> NormalizedRecord:
    return NormalizedRecord(method=method, path=path, status=200)


def _analysis(values: list[str], max_unique_values: int = 10000) -> PathSegmentAnalysis:
    analysis = PathSegmentAnalysis()
    for value in values:
        analysis.add(value, max_unique_values)
    return analysis


def _templater(paths: list[str], min_sample_size: int = 20, threshold: float = 0.8) -> PathTemplater:
    stats = SegmentStatistics()
    for path in paths:
        stats.observe(_record(path))
    return PathTemplater(stats, min_sample_size=min_sample_size, threshold=threshold)


# ---------------------------------------------------------------------------
# Segment statistics
# ---------------------------------------------------------------------------

class TestSegmentStatistics:
    def test_counts_values_per_position(self):
        stats = SegmentStatistics()
        stats.observe(_record("/api/users/1"))
        stats.observe(_record("/api/users/2"))
        stats.observe(_record("/api/users/2"))

        shape = stats.get(("GET", 3))
        assert shape.record_count == 3
        assert shape.positions[0].unique_values == {"api": 3}
        assert shape.positions[2].unique_values == {"1": 1, "2": 2}
        assert shape.positions[2].total_count == 3

    def test_method_is_part_of_shape(self):
        stats = SegmentStatistics()
        stats.observe(_record("/api/users", method="GET"))
        stats.observe(_record("/api/users", method="POST"))
        assert set(stats.shapes) == {("GET", 2), ("POST", 2)}

    def test_segment_count_is_part_of_shape(self):
        stats = SegmentStatistics()
        stats.observe(_record("/api/users"))
        stats.observe(_record("/api/users/1"))
        assert set(stats.shapes) == {("GET", 2), ("GET", 3)}

    def test_root_path_has_empty_shape(self):
        stats = SegmentStatistics()
        assert stats.observe(_record("/")) == ("GET", 0)
        assert stats.get(("GET", 0)).positions == []

    def test_unique_value_limit(self):
        analysis = _analysis(["a", "b", "c", "d"], max_unique_values=2)
        assert analysis.is_limited
        assert analysis.unique_values == {}
        assert analysis.total_count == 4

    def test_repeated_value_under_limit_not_limited(self):
        analysis = _analysis(["a", "b", "a", "b"], max_unique_values=2)
        assert not analysis.is_limited
        assert analysis.unique_values == {"a": 2, "b": 2}


# ---------------------------------------------------------------------------
# Parameterization rule
# ---------------------------------------------------------------------------

class TestShouldParameterize:
    def test_too_few_samples_never_parameterized(self):
        analysis = _analysis(["1", "2", "3"])
        assert not should_parameterize(analysis, min_sample_size=20, threshold=0.8)

    def test_high_cardinality_with_enough_samples(self):
        values = [f"u{i}" for i in range(21)] + ["u0", "u1", "u2", "u3"]
        analysis = _analysis(values)
        assert analysis.total_count == 25
        assert analysis.unique_count == 21
        assert should_parameterize(analysis, min_sample_size=20, threshold=0.8)

    def test_low_cardinality_kept_literal(self):
        analysis = _analysis(["orders", "items"] * 15)
        assert not should_parameterize(analysis, min_sample_size=20, threshold=0.8)

    def test_constant_value_kept_literal(self):
        analysis = _analysis(["api"])
        assert not should_parameterize(analysis, min_sample_size=1, threshold=0.8)

    def test_ratio_at_threshold_parameterized(self):
        analysis = _analysis(["1", "2", "3", "4", "4"])
        assert should_parameterize(analysis, min_sample_size=5, threshold=0.8)

    def test_limited_position_parameterized_with_enough_samples(self):
        analysis = _analysis([str(i) for i in range(30)], max_unique_values=5)
        assert should_parameterize(analysis, min_sample_size=20, threshold=0.8)
        assert not should_parameterize(analysis, min_sample_size=50, threshold=0.8)


class TestPlaceholderFor:
    def test_numeric(self):
        assert placeholder_for(_analysis(["1", "22", "333"])) == NUMERIC_PLACEHOLDER

    def test_uuid(self):
        values = [str(uuid.UUID(int=i)) for i in range(1, 4)]
        assert placeholder_for(_analysis(values)) == UUID_PLACEHOLDER

    @pytest.mark.parametrize("values", [
        ["a", "b", "c"],
        ["", "123", ""],
        ["123", "abc"],
        ["very-long-string-that-exceeds-normal-length-expectations", "another-one"],
    ])
    def test_generic(self, values):
        assert placeholder_for(_analysis(values)) == GENERIC_PLACEHOLDER

    def test_limited_is_generic(self):
        analysis = _analysis([str(i) for i in range(10)], max_unique_values=3)
        assert placeholder_for(analysis) == GENERIC_PLACEHOLDER


# ---------------------------------------------------------------------------
# Templating
# ---------------------------------------------------------------------------

class TestPathTemplater:
    def test_numeric_ids_templated(self):
        templater = _templater([f"/api/users/{i}" for i in range(25)])
        assert templater.template(_record("/api/users/7")) == "/api/users/{num}"

    def test_small_sample_keeps_literal(self):
        templater = _templater(["/api/users/1", "/api/users/2", "/api/users/3"])
        assert templater.template(_record("/api/users/1")) == "/api/users/1"

    def test_positions_decided_independently(self):
        paths = [f"/api/users/{i}/orders/{uuid.UUID(int=i)}" for i in range(1, 26)]
        templater = _templater(paths)
        assert templater.template(_record(paths[0])) == "/api/users/{num}/orders/{id}"

    def test_every_record_of_shape_gets_same_skeleton(self):
        paths = [f"/api/users/{i}" for i in range(24)] + ["/api/users/profile"]
        templater = _templater(paths)
        assert templater.template(_record("/api/users/profile")) == "/api/users/{var}"
        assert templater.template(_record("/api/users/3")) == "/api/users/{var}"

    def test_unseen_shape_kept_literal(self):
        templater = _templater([])
        assert templater.template(_record("/health/live")) == "/health/live"

    def test_root_path(self):
        templater = _templater(["/"])
        assert templater.template(_record("/")) == "/"
