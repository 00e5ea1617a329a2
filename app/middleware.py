"""Request body size guard.

Counts the bytes actually received, so chunked requests without a
``Content-Length`` header are limited too.
"""

from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.exceptions.custom import PayloadTooLargeError
from app.exceptions.handlers import payload_too_large_handler


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = scope["app"].state.settings.max_body_bytes

        declared = Headers(scope=scope).get("content-length", "")
        if declared.isascii() and declared.isdigit() and int(declared) > limit:
            await self._reject(scope, receive, send, int(declared), limit)
            return

        # Buffer while counting; the body is replayed to the app afterwards
        buffered: list[Message] = []
        size = 0
        while True:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            size += len(message.get("body", b""))
            if size > limit:
                await self._reject(scope, receive, send, size, limit)
                return
            if not message.get("more_body", False):
                break

        async def replay() -> Message:
            if buffered:
                return buffered.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(
        self, scope: Scope, receive: Receive, send: Send, size: int, limit: int
    ) -> None:
        request = Request(scope, receive)
        response = await payload_too_large_handler(
            request, PayloadTooLargeError(size, limit)
        )
        await response(scope, receive, send)
