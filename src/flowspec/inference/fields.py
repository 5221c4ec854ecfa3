from collections.abc import Mapping


def infer_fields(
    counts: Mapping[str, int],
    total: int,
    threshold: float,
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """
    Split observed keys into (required, optional) by presence ratio.

    A key is required when it appears in at least ``threshold`` of the
    ``total`` samples; the comparison is inclusive, so a key present in
    exactly 95 of 100 records is required at the default 0.95.
    """
    if total <= 0:
        return (), tuple(sorted(counts))

    required = []
    optional = []
    for key, count in counts.items():
        if count / total >= threshold:
            required.append(key)
        else:
            optional.append(key)
    return tuple(sorted(required)), tuple(sorted(optional))
