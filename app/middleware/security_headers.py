"""Security response headers (raw ASGI).

The API only serves JSON, so the CSP denies everything except on the
interactive docs pages, which need to load Swagger UI assets.
"""

from typing import Callable

from starlette.datastructures import MutableHeaders

API_HEADERS: dict[str, str] = {
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
}
DOCS_PATHS = ("/docs", "/redoc", "/openapi.json")


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None
) -> Callable:
    base = dict(API_HEADERS if headers is None else headers)
    docs = {k: v for k, v in base.items() if k != "Content-Security-Policy"}

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        extra = docs if scope["path"].startswith(DOCS_PATHS) else base

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                response_headers = MutableHeaders(scope=message)
                for name, value in extra.items():
                    response_headers.setdefault(name, value)
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
