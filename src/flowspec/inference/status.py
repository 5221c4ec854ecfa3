from collections.abc import Iterable

from flowspec.capture.extractor import status_class
from flowspec.models import ResponseSpec


def status_ranges(codes: Iterable[int]) -> tuple[str, ...]:
    """Sorted class labels ("2xx", "4xx") of the codes; codes outside 100-599 have no class."""
    return tuple(sorted({label for label in map(status_class, codes) if label is not None}))


def aggregate_status_codes(codes: Iterable[int], strategy: str) -> ResponseSpec:
    """
    Collapse the status codes observed for one operation.

    ``exact`` keeps the distinct codes. ``range`` and ``auto`` both report
    only the classes present: a single class is still a range, since one
    observed class does not mean the exact codes were meant.
    """
    distinct = sorted(set(codes))
    if not distinct:
        return ResponseSpec(aggregation=strategy)

    if strategy == "exact":
        return ResponseSpec(status_codes=tuple(distinct), aggregation=strategy)
    if strategy in ("range", "auto"):
        return ResponseSpec(status_ranges=status_ranges(distinct), aggregation=strategy)
    raise ValueError(f"unknown status aggregation strategy: {strategy!r}")
