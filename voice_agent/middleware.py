import logging
import re
from typing import Iterable

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from voice_agent.config import MAX_BODY_BYTES
from voice_agent.exceptions import PayloadTooLargeException

logger = logging.getLogger(__name__)

# helmet's default header set
SECURITY_HEADERS = {
    "Content-Security-Policy": (
        "default-src 'self';base-uri 'self';font-src 'self' https: data:;"
        "form-action 'self';frame-ancestors 'self';img-src 'self' data:;"
        "object-src 'none';script-src 'self';script-src-attr 'none';"
        "style-src 'self' https: 'unsafe-inline';upgrade-insecure-requests"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}


def origin_regex(patterns: Iterable[str]) -> str:
    """
    Turns origin patterns into one regex for CORSMiddleware.allow_origin_regex.

    "*" matches one or more DNS labels, so "https://*.netlify.app" accepts
    "https://preview-1.netlify.app" but not "https://netlify.app" itself.
    """
    label = r"[A-Za-z0-9-]+"
    alternatives = []
    for pattern in patterns:
        escaped = re.escape(pattern).replace(r"\*", rf"{label}(?:\.{label})*")
        alternatives.append(escaped)
    return "|".join(f"(?:{alt})" for alt in alternatives)


class SecurityHeadersMiddleware:
    def __init__(self, app: ASGIApp, headers: dict = None):
        self.app = app
        self.headers = headers if headers is not None else SECURITY_HEADERS

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers.items():
                    headers.setdefault(name, value)
            await send(message)

        await self.app(scope, receive, send_with_headers)


class BodySizeLimitMiddleware:
    """
    Rejects request bodies over ``max_body_size`` bytes with a 413.

    A declared Content-Length is checked up front. Streamed bodies are counted
    as they are read, and the read fails once the limit is crossed.
    """

    def __init__(self, app: ASGIApp, max_body_size: int = MAX_BODY_BYTES):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_body_size:
            exc = PayloadTooLargeException()
            response = JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise PayloadTooLargeException()
            return message

        await self.app(scope, limited_receive, send)


class CatchAllMiddleware:
    """
    Turns unhandled faults into a 500 {"error": "Server error"}.

    Registered innermost, so the 500 still passes through the security
    headers, compression and CORS layers. Faults raised after the response
    has started are re-raised for the server to deal with.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, tracking_send)
        except Exception:
            logger.exception("Server error")
            if response_started:
                raise
            response = JSONResponse(status_code=500, content={"error": "Server error"})
            await response(scope, receive, send)
