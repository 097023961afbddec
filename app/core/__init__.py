"""Core: config, lifespan, limiter and tenant context.

Single place for settings and request-scoped wiring.
"""

from app.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
