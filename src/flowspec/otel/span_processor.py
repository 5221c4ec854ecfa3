import logging
from datetime import datetime, timezone

from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor
from opentelemetry.trace import SpanKind

from flowspec.capture.buffer import RecordBuffer
from flowspec.capture.extractor import headers_from_span_attributes, parse_query_string
from flowspec.capture.record import NormalizedRecord

logger = logging.getLogger(__name__)

# Semantic convention keys: both old (v1.x) and new (v1.21+) conventions
_METHOD_KEYS = ("http.request.method", "http.method")
_STATUS_KEYS = ("http.response.status_code", "http.status_code")
_SCHEME_KEYS = ("url.scheme", "http.scheme")
_HOST_KEYS = ("server.address", "http.host")
_TARGET_KEY = "http.target"


def _extract_query_string(attributes: dict) -> str:
    """Extract query string from span attributes, handling both semconv versions."""
    # New semconv: url.query is just the query string
    query = attributes.get("url.query")
    if query:
        return str(query)

    # Old semconv: http.target is the full path+query (e.g. "/api/orders?page=1")
    target = attributes.get(_TARGET_KEY, "")
    if "?" in target:
        return target.split("?", 1)[1]

    return ""


def _extract_path(attributes: dict) -> str:
    """Extract the literal request path; http.route is ignored since templating is inferred."""
    path = attributes.get("url.path")
    if path:
        return str(path)

    target = attributes.get(_TARGET_KEY, "")
    return target.split("?", 1)[0] if target else "/"


def _get_attr(attributes: dict, *keys: str) -> str | None:
    """Return the first non-empty value found among the given attribute keys."""
    for key in keys:
        value = attributes.get(key)
        if value is not None:
            return str(value)
    return None


def record_from_span(span: ReadableSpan) -> NormalizedRecord | None:
    """Convert an HTTP server span into a record; other spans yield None."""
    if span.kind != SpanKind.SERVER:
        return None

    attributes = dict(span.attributes or {})

    method = _get_attr(attributes, *_METHOD_KEYS)
    if not method:
        return None

    status_code_raw = _get_attr(attributes, *_STATUS_KEYS)
    status_code = int(status_code_raw) if status_code_raw else 0

    timestamp = None
    if span.end_time:
        timestamp = datetime.fromtimestamp(span.end_time / 1e9, tz=timezone.utc)

    return NormalizedRecord(
        method=method.upper(),
        path=_extract_path(attributes),
        status=status_code,
        timestamp=timestamp,
        query=parse_query_string(_extract_query_string(attributes)),
        headers=headers_from_span_attributes(attributes),
        host=_get_attr(attributes, *_HOST_KEYS) or "",
        scheme=_get_attr(attributes, *_SCHEME_KEYS) or "",
    )


class FlowSpecSpanProcessor(SpanProcessor):
    """
    OpenTelemetry SpanProcessor that records HTTP server traffic for contract generation.

    Use this instead of the ASGI middleware when your service already has
    OpenTelemetry instrumentation in place.

    Usage::

        from opentelemetry.sdk.trace import TracerProvider
        from flowspec import generate_spec
        from flowspec.otel import FlowSpecSpanProcessor

        processor = FlowSpecSpanProcessor()
        provider = TracerProvider()
        provider.add_span_processor(processor)
        ...
        spec = generate_spec(processor.buffer.drain())

    Request headers only show up when OTEL is configured to capture them::

        OTEL_INSTRUMENTATION_HTTP_CAPTURE_HEADERS_SERVER_REQUEST=authorization,x-request-id
    """

    def __init__(self, buffer: RecordBuffer | None = None, *, buffer_max_size: int = 100_000) -> None:
        self.buffer = buffer if buffer is not None else RecordBuffer(max_size=buffer_max_size)

    def on_start(self, span, parent_context=None) -> None:
        pass  # Nothing to do at span start

    def on_end(self, span: ReadableSpan) -> None:
        try:
            record = record_from_span(span)
            if record is not None:
                self.buffer.add(record)
        except Exception:
            logger.warning("flowspec: failed to process span", exc_info=True)

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
