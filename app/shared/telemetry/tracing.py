"""Span helpers for use-case methods.

@traced opens a span per call and records a small allowlist of id-like
arguments. Hierarchy rejections (HierarchyException) are expected outcomes:
their error_code goes on the span but the span status stays unset.
"""

import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

from app.domain.exceptions import HierarchyException

RECORDED_ARGUMENTS = frozenset(
    {
        "category_id",
        "child_id",
        "org_unit_id",
        "parent_id",
        "relationship_id",
        "entity_category",
    }
)

_tracer = trace.get_tracer("app.hierarchy")


def _call_attributes(signature: inspect.Signature, args: tuple, kwargs: dict) -> dict[str, str]:
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return {}
    return {
        f"arg.{name}": str(value)
        for name, value in bound.arguments.items()
        if name in RECORDED_ARGUMENTS and value is not None
    }


@contextmanager
def _operation_span(name: str, attributes: dict[str, Any]) -> Iterator[Span]:
    with _tracer.start_as_current_span(
        name, record_exception=False, set_status_on_exception=False
    ) as span:
        span.set_attributes(attributes)
        try:
            yield span
        except HierarchyException as e:
            span.set_attribute("hierarchy.error_code", e.error_code)
            raise
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            raise


def traced(name: str | None = None, attributes: dict[str, Any] | None = None) -> Callable:
    """Wrap a sync or async function in a span named name (default module.qualname)."""

    def decorator(func: Callable) -> Callable:
        span_name = name or f"{func.__module__}.{func.__qualname__}"
        signature = inspect.signature(func)

        def span_for(args: tuple, kwargs: dict):
            return _operation_span(
                span_name, {**(attributes or {}), **_call_attributes(signature, args, kwargs)}
            )

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with span_for(args, kwargs):
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span_for(args, kwargs):
                return func(*args, **kwargs)

        return sync_wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set attributes on the active span, if it is being recorded."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attributes(attributes)
