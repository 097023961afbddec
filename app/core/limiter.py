"""SlowAPI limiter. Hierarchy writes are limited per tenant rather than per client IP."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.request_context import get_tenant_id


def tenant_or_address(request: Request) -> str:
    """Bucket by tenant when the tenant middleware accepted a header, else by address."""
    tenant_id = get_tenant_id()
    return f"tenant:{tenant_id}" if tenant_id else get_remote_address(request)


limiter = Limiter(key_func=tenant_or_address)

limit_writes = limiter.limit("120/minute")
