"""Tenant context middleware (raw ASGI).

Puts a well-formed tenant header into current_tenant_id for log records and
PostgreSQL row-level security. Whether the tenant exists and is active is
decided later by the get_tenant_id dependency.
"""

from typing import Callable

from starlette.datastructures import Headers

from app.core.request_context import current_tenant_id
from app.core.tenant_validation import is_valid_tenant_id_format


def TenantContextMiddleware(app: Callable, header_name: str = "X-Tenant-ID") -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        raw = Headers(scope=scope).get(header_name)
        token = current_tenant_id.set(raw if is_valid_tenant_id_format(raw) else None)
        try:
            await app(scope, receive, send)
        finally:
            current_tenant_id.reset(token)

    return asgi_app
