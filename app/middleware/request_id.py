"""Request ID middleware (raw ASGI).

A client-supplied request id is kept only if it is a short [A-Za-z0-9_-]
token; anything else is replaced with a fresh uuid4 hex so it cannot inject
into log lines. The id is echoed on the response.
"""

import uuid
from typing import Callable

from starlette.datastructures import Headers, MutableHeaders

from app.core.request_context import current_request_id
from app.core.tenant_validation import is_safe_token


def resolve_request_id(raw: str | None) -> str:
    candidate = raw.strip() if raw else None
    return candidate if is_safe_token(candidate) else uuid.uuid4().hex


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = resolve_request_id(Headers(scope=scope).get(header_name))
        token = current_request_id.set(request_id)

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[header_name] = request_id
            await send(message)

        try:
            await app(scope, receive, send_with_id)
        finally:
            current_request_id.reset(token)

    return asgi_app
