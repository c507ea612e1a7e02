"""
Retry logic with exponential backoff for transient database failures.
"""

import asyncio
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple = (OperationalError, asyncio.TimeoutError, ConnectionError)


def retry_with_backoff(
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    retry_on: tuple = TRANSIENT_ERRORS,
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay cap
        exponential_base: Multiplier for exponential backoff
        retry_on: Tuple of exceptions to retry on

    Usage:
        @retry_with_backoff(max_retries=3)
        async def write_rows(session, rows):
            ...
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            last_exception = None

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as exc:
                    last_exception = exc

                    if attempt < max_retries:
                        delay = min(base_delay * (exponential_base ** attempt), max_delay)
                        logger.debug(
                            "%s: Attempt %d/%d failed (%s), retrying in %.1fs",
                            func.__name__,
                            attempt + 1,
                            max_retries,
                            type(exc).__name__,
                            delay,
                        )
                        await asyncio.sleep(delay)
                    else:
                        logger.warning(
                            "%s: All %d attempts failed: %s",
                            func.__name__,
                            max_retries + 1,
                            last_exception,
                        )

            raise last_exception

        return wrapper

    return decorator


async def retry_async(
    func: Callable[..., Any],
    *args,
    max_retries: int = 3,
    base_delay: float = 0.5,
    **kwargs,
) -> Any:
    """
    Programmatic retry function (alternative to decorator).

    Usage:
        result = await retry_async(write_batch, session, batch, max_retries=3)
    """
    retry_decorator = retry_with_backoff(max_retries=max_retries, base_delay=base_delay)
    retried_func = retry_decorator(func)
    return await retried_func(*args, **kwargs)
