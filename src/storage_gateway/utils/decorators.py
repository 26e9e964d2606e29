"""Decorator utilities for cross-cutting concerns."""
import functools
import logging
import time
from typing import Any, Callable, TypeVar, cast

F = TypeVar('F', bound=Callable[..., Any])


def async_log_execution_time(func: F) -> F:
    """Log how long a service coroutine took.

    Timings go to the logger of the module defining ``func``, so they appear
    next to that operation's own log lines.
    """
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"{func.__qualname__} failed after {time.perf_counter() - start_time:.3f}s: {str(e)}")
            raise
        finally:
            logger.debug(f"{func.__qualname__} took {time.perf_counter() - start_time:.3f}s")
    return cast(F, wrapper)
