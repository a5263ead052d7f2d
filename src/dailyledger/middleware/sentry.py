"""Attach request and user context to Sentry events."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from dailyledger.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Tag the current Sentry scope with the request ID and the logged-in user.

    Must run inside RequestIDMiddleware and SessionMiddleware so both the
    request ID and the decoded session are available.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        sentry_sdk.set_tag("request_id", get_request_id())

        auth = scope.get("session", {}).get("auth") or {}
        user_id = auth.get("user_id") if isinstance(auth, dict) else None
        if user_id:
            sentry_sdk.set_user({"id": user_id})

        await self.app(scope, receive, send)
