"""ASGI entry point: `uvicorn app.main:app`.

create_app() reads Settings when called, so tests can set the environment
and clear the get_settings cache before the app is built.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.api.v1.router import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan
from app.core.limiter import limiter
from app.middleware import (
    RequestIDMiddleware,
    SecurityHeadersMiddleware,
    TenantContextMiddleware,
)


def _add_middleware(app: FastAPI, settings: Settings) -> None:
    # Each add_middleware wraps the previous stack, so RequestID runs first
    # and every log line below it carries the request id.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=[settings.request_id_header],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(TenantContextMiddleware, header_name=settings.tenant_header_name)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Organizational Hierarchy API",
        summary="Org unit trees and multi-parent category graphs, per tenant.",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    register_exception_handlers(app)
    _add_middleware(app, settings)
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
