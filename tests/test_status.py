import pytest

from flowspec.inference.status import aggregate_status_codes, status_ranges


class TestExactStrategy:
    def test_distinct_sorted_codes(self):
        result = aggregate_status_codes([500, 200, 404, 200], "exact")
        assert result.status_codes == (200, 404, 500)
        assert result.status_ranges == ()

    def test_keeps_codes_outside_known_classes(self):
        result = aggregate_status_codes([99, 200], "exact")
        assert result.status_codes == (99, 200)


class TestRangeStrategy:
    def test_classes_only(self):
        result = aggregate_status_codes([200, 201, 404, 500], "range")
        assert result.status_codes == ()
        assert result.status_ranges == ("2xx", "4xx", "5xx")

    def test_single_code_still_a_range(self):
        result = aggregate_status_codes([204], "range")
        assert result.status_codes == ()
        assert result.status_ranges == ("2xx",)

    def test_invalid_codes_have_no_class(self):
        result = aggregate_status_codes([99, 600, 200, 404], "range")
        assert result.status_ranges == ("2xx", "4xx")


class TestAutoStrategy:
    def test_same_class(self):
        result = aggregate_status_codes([200, 201, 204], "auto")
        assert result.status_ranges == ("2xx",)
        assert result.status_codes == ()

    def test_mixed_classes(self):
        result = aggregate_status_codes([200, 404], "auto")
        assert result.status_ranges == ("2xx", "4xx")
        assert result.status_codes == ()

    def test_single_code(self):
        result = aggregate_status_codes([200, 200], "auto")
        assert result.status_ranges == ("2xx",)
        assert result.status_codes == ()

    def test_records_strategy(self):
        assert aggregate_status_codes([200], "auto").aggregation == "auto"


class TestEdgeCases:
    @pytest.mark.parametrize("strategy", ["exact", "range", "auto"])
    def test_empty_input(self, strategy):
        result = aggregate_status_codes([], strategy)
        assert result.status_codes == ()
        assert result.status_ranges == ()

    def test_order_irrelevant(self):
        assert aggregate_status_codes([500, 404, 200], "range") == aggregate_status_codes([200, 500, 404], "range")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            aggregate_status_codes([200], "bucketed")

    def test_status_ranges_helper(self):
        assert status_ranges([503, 201, 502]) == ("2xx", "5xx")
