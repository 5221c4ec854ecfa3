import logging
from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime, timezone

from flowspec.capture.extractor import normalize_headers, parse_query_string, strip_query
from flowspec.capture.record import NormalizedRecord

logger = logging.getLogger(__name__)

# Any finite, single-pass iterable of records; the engine iterates it exactly once.
RecordSource = Iterable[NormalizedRecord]


def parse_timestamp(value: object) -> datetime | None:
    """Accept datetimes, RFC3339 strings (with a trailing "Z") and epoch seconds; naive values are UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return _as_utc(datetime.fromisoformat(text))


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def record_from_dict(data: Mapping) -> NormalizedRecord:
    """
    Build a record from its plain-data form.

    Keys follow the normalized JSON shape: ``method``, ``path``, ``status``,
    ``timestamp``, ``query`` and ``headers`` (key -> list of values), plus
    optional ``host``, ``scheme`` and ``bodyBytes``. A query string left on
    the path is split off into ``query``. Missing method or path produce a
    record that the engine will skip as malformed.
    """
    method = str(data.get("method") or "").upper()
    raw_path = str(data.get("path") or "")
    path, query_string = strip_query(raw_path) if raw_path else ("", "")

    query = parse_query_string(query_string)
    for key, values in (data.get("query") or {}).items():
        values = values if isinstance(values, (list, tuple)) else (values,)
        query[key] = tuple(str(v) for v in values)

    try:
        status = int(data.get("status") or 0)
    except (TypeError, ValueError):
        logger.warning("flowspec: non-numeric status %r for %s %s", data.get("status"), method, path)
        status = 0

    try:
        timestamp = parse_timestamp(data.get("timestamp"))
    except (TypeError, ValueError):
        logger.warning("flowspec: unparsable timestamp %r for %s %s", data.get("timestamp"), method, path)
        timestamp = None

    return NormalizedRecord(
        method=method,
        path=path,
        status=status,
        timestamp=timestamp,
        query=query,
        headers=normalize_headers(data.get("headers") or {}),
        host=str(data.get("host") or ""),
        scheme=str(data.get("scheme") or ""),
        body_bytes=data.get("bodyBytes"),
    )


def records_from_dicts(items: Iterable[Mapping]) -> Iterator[NormalizedRecord]:
    """Lazily adapt a stream of plain-data records."""
    for item in items:
        yield record_from_dict(item)
