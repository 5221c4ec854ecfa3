from flowspec.otel.span_processor import FlowSpecSpanProcessor, record_from_span

__all__ = ["FlowSpecSpanProcessor", "record_from_span"]
