import re
from collections.abc import Iterable, Mapping
from urllib.parse import parse_qsl

_UUID_DASHED = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.I)
_UUID_COMPACT = re.compile(r"^[0-9a-f]{32}$", re.I)

# OTEL captures request headers as "http.request.header.{name}"
_OTEL_HEADER_PREFIX = "http.request.header."


def split_path(path: str) -> list[str]:
    """Split a path into its segments, ignoring one leading slash."""
    if path.startswith("/"):
        path = path[1:]
    if not path:
        return []
    return path.split("/")


def join_path(segments: Iterable[str]) -> str:
    return "/" + "/".join(segments)


def strip_query(target: str) -> tuple[str, str]:
    """Split a request target ("/a/b?x=1") into path and query string."""
    path, _, query = target.partition("?")
    return path or "/", query


def parse_query_string(query_string: str) -> dict[str, tuple[str, ...]]:
    """Return every query parameter with all of its values, keys as sent."""
    if not query_string:
        return {}
    params: dict[str, list[str]] = {}
    for key, value in parse_qsl(query_string, keep_blank_values=True):
        if key:
            params.setdefault(key, []).append(value)
    return {key: tuple(values) for key, values in params.items()}


def normalize_headers(headers: Mapping[str, object] | Iterable[tuple[str, str]]) -> dict[str, tuple[str, ...]]:
    """Lowercase header names and collect repeated headers into one value tuple."""
    items = headers.items() if isinstance(headers, Mapping) else headers
    normalized: dict[str, list[str]] = {}
    for name, value in items:
        values = value if isinstance(value, (list, tuple)) else (value,)
        normalized.setdefault(str(name).lower(), []).extend(str(v) for v in values)
    return {name: tuple(values) for name, values in normalized.items()}


def headers_from_span_attributes(attributes: Mapping[str, object]) -> dict[str, tuple[str, ...]]:
    """Recover request headers captured by OTEL instrumentation."""
    captured = {}
    for key, value in attributes.items():
        if not key.startswith(_OTEL_HEADER_PREFIX):
            continue
        name = key[len(_OTEL_HEADER_PREFIX):]
        # Older instrumentations store hyphens as underscores; names that kept a hyphen are left as captured.
        if "-" not in name:
            name = name.replace("_", "-")
        captured[name] = value
    return normalize_headers(captured)


def is_numeric(value: str) -> bool:
    return bool(value) and value.isascii() and value.isdigit()


def is_uuid_like(value: str) -> bool:
    return bool(_UUID_DASHED.match(value) or _UUID_COMPACT.match(value))


def status_class(code: int) -> str | None:
    """Return the "Nxx" class label for a status code, or None outside 100-599."""
    if 100 <= code <= 599:
        return f"{code // 100}xx"
    return None
