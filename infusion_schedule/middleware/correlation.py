"""Correlation ID middleware.

Tags every request with an ID that appears in each log line written while
the request is handled and is echoed back in the response headers, so a
nurse's report of a wrong schedule can be traced to the computation.

Pure ASGI rather than BaseHTTPMiddleware, so streaming and background
tasks are not wrapped in an extra task.
"""

import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from infusion_schedule.logging_config import correlation_id_ctx, get_logger

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"
_HEADER_KEY = CORRELATION_ID_HEADER.lower().encode()


class CorrelationIdMiddleware:
    """Reuse the caller's X-Correlation-ID or generate a UUID4."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        correlation_id = headers.get(_HEADER_KEY, b"").decode() or str(uuid.uuid4())
        token = correlation_id_ctx.set(correlation_id)

        method = scope.get("method", "")
        path = scope.get("path", "")
        status_code: int | None = None
        started = time.perf_counter()

        async def send_with_header(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status")
                message = {
                    **message,
                    "headers": [
                        *message.get("headers", []),
                        (_HEADER_KEY, correlation_id.encode()),
                    ],
                }
            await send(message)

        logger.info("Request started", method=method, path=path)
        try:
            await self.app(scope, receive, send_with_header)
        except Exception:
            logger.exception(
                "Request failed",
                method=method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            logger.info(
                "Request completed",
                method=method,
                path=path,
                status_code=status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
        finally:
            correlation_id_ctx.reset(token)
