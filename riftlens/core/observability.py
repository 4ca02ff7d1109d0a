"""Observability for riftlens.

Configures structlog once and provides tracing decorators that log entry,
duration and failures of service and adapter calls.
"""

import functools
import inspect
import logging
import re
import sys
import time
import traceback
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog
from pydantic import BaseModel
from structlog.contextvars import bind_contextvars, unbind_contextvars

from riftlens.config.settings import get_settings

structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer(),  # type: ignore[list-item]
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger("riftlens.trace")

F = TypeVar("F", bound=Callable[..., Any])

_SENSITIVE_KEY_RE = re.compile(r"(token|key|secret|password|authorization)", re.IGNORECASE)
_LEVELS = {"DEBUG": logging.DEBUG, "INFO": logging.INFO, "WARNING": logging.WARNING}


def configure_logging(level: str | None = None) -> int:
    """Route stdlib logging (the structlog backend) to stderr.

    ``level`` defaults to the LOG_LEVEL setting. Returns the numeric level applied.
    """
    name = (level or get_settings().log_level).upper()
    numeric = getattr(logging, name, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric)
    logging.getLogger("riftlens").setLevel(numeric)
    return numeric


def _serialize_value(value: Any, max_length: int = 500) -> Any:
    """Compact, log-safe representation of an argument or result."""
    if isinstance(value, BaseModel):
        text = value.model_dump_json()
    elif isinstance(value, list | tuple) and len(value) > 10:
        return f"<{type(value).__name__} len={len(value)}>"
    else:
        text = repr(value)
    if len(text) > max_length:
        return text[:max_length] + "..."
    return text


def _safe_kwargs(kwargs: dict[str, Any], max_length: int) -> dict[str, Any]:
    return {
        k: ("***" if _SENSITIVE_KEY_RE.search(k) else _serialize_value(v, max_length))
        for k, v in kwargs.items()
    }


def trace_call(
    *,
    capture_args: bool = True,
    capture_result: bool = False,
    max_arg_length: int = 500,
    log_level: str = "INFO",
    layer: str | None = None,
) -> Callable[[F], F]:
    """Decorator for function tracing.

    Logs entry (optionally with arguments), duration, optional result and any
    exception with its traceback, then re-raises. Works for sync and async
    callables and binds an ``execution_id`` context variable for correlation.

    Example:
        >>> @trace_call(layer="service")
        ... def analyze(match_id: str) -> dict:
        ...     return {"match_id": match_id}
    """
    level = _LEVELS.get(log_level.upper(), logging.INFO)

    def decorator(func: F) -> F:
        name = f"{func.__module__}.{func.__qualname__}"

        def _enter(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
            execution_id = f"{name}_{time.time_ns()}"
            bind_contextvars(execution_id=execution_id)
            logger.log(
                level,
                "call_start",
                function=name,
                layer=layer,
                args=[_serialize_value(a, max_arg_length) for a in args] if capture_args else None,
                kwargs=_safe_kwargs(kwargs, max_arg_length) if capture_args else None,
            )
            return execution_id

        def _success(start: float, result: Any) -> None:
            logger.log(
                level,
                "call_success",
                function=name,
                layer=layer,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
                result=_serialize_value(result, max_arg_length) if capture_result else None,
            )

        def _failure(start: float, exc: Exception) -> None:
            logger.error(
                "call_error",
                function=name,
                layer=layer,
                duration_ms=round((time.perf_counter() - start) * 1000, 3),
                error_type=type(exc).__name__,
                error_message=str(exc),
                traceback=traceback.format_exc(),
            )

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _enter(args, kwargs)
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _failure(start, e)
                    raise
                finally:
                    unbind_contextvars("execution_id")
                _success(start, result)
                return result

            return cast(F, async_wrapper)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _enter(args, kwargs)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failure(start, e)
                raise
            finally:
                unbind_contextvars("execution_id")
            _success(start, result)
            return result

        return cast(F, sync_wrapper)

    return decorator


# Convenience decorators with common configurations
def trace_service(func: F) -> F:
    """Decorator for core service entry points."""
    return trace_call(capture_args=False, log_level="DEBUG", layer="service")(func)


def trace_performance(func: F) -> F:
    """Decorator focused on performance monitoring."""
    return trace_call(capture_args=False, capture_result=False, log_level="DEBUG")(func)


def trace_adapter(func: F) -> F:
    """Decorator specifically for adapter layer functions."""
    return trace_call(capture_args=True, log_level="INFO", layer="adapter")(func)
