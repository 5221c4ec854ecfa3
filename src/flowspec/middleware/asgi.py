import logging
from datetime import datetime, timezone

from flowspec.capture.buffer import RecordBuffer
from flowspec.capture.extractor import normalize_headers, parse_query_string
from flowspec.capture.record import NormalizedRecord

logger = logging.getLogger(__name__)


class FlowSpecMiddleware:
    """ASGI middleware for FastAPI and Starlette applications that records served traffic."""

    def __init__(
        self,
        app,
        *,
        buffer: RecordBuffer | None = None,
        buffer_max_size: int = 100_000,
    ) -> None:
        self.app = app
        self.buffer = buffer if buffer is not None else RecordBuffer(max_size=buffer_max_size)

    async def __call__(self, scope, receive, send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        body_size: list[int] = [0]

        async def counting_receive():
            message = await receive()
            if message["type"] == "http.request":
                body_size[0] += len(message.get("body", b""))
            return message

        status_code: list[int] = [200]

        async def capturing_send(message):
            if message["type"] == "http.response.start":
                status_code[0] = message["status"]
            await send(message)

        await self.app(scope, counting_receive, capturing_send)

        try:
            self._record(scope, body_size[0], status_code[0])
        except Exception:
            logger.warning("flowspec: failed to record request", exc_info=True)

    def _record(self, scope: dict, body_size: int, status_code: int) -> None:
        headers = normalize_headers(
            (k.decode("latin-1"), v.decode("latin-1"))
            for k, v in scope.get("headers", [])
        )
        host = headers.get("host", ("",))[0]

        record = NormalizedRecord(
            method=scope.get("method", "GET").upper(),
            path=scope.get("path", "/"),
            status=status_code,
            timestamp=datetime.now(timezone.utc),
            query=parse_query_string(scope.get("query_string", b"").decode("latin-1")),
            headers=headers,
            host=host,
            scheme=scope.get("scheme", ""),
            body_bytes=body_size,
        )
        self.buffer.add(record)
