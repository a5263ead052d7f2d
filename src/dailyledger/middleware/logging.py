"""Request ID injection and access logging middleware."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from dailyledger.core.logging import get_logger, set_request_id


class RequestIDMiddleware:
    """
    Give every HTTP request an ID and log its start and completion.

    An incoming ``X-Request-ID`` header is reused, otherwise a UUID is generated.
    The ID is bound into the structlog context and echoed back in the response.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        structlog.contextvars.clear_contextvars()
        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", str(uuid.uuid4()).encode()).decode()
        set_request_id(request_id)

        started = time.perf_counter()
        self.logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers

                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
