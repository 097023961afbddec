"""Request-scoped context (tenant ID, request ID).

Middleware sets these context variables at the start of each request.
get_db / get_db_transactional read the tenant for PostgreSQL SET LOCAL
app.current_tenant_id, and the logging filter stamps both on every record.
"""

from contextvars import ContextVar

current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)
current_request_id: ContextVar[str | None] = ContextVar(
    "current_request_id", default=None
)


def get_tenant_id() -> str | None:
    """Return the current tenant ID if set."""
    return current_tenant_id.get()


def get_request_id() -> str | None:
    return current_request_id.get()
