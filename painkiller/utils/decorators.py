import asyncio
import functools
import logging

logger = logging.getLogger(__name__)


def retry_on_exception(retries=3, delay=1.0, exceptions=(Exception,)):
    """Retry an async callable, re-raising the last error once attempts run out"""
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, retries + 1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    logger.warning(f"Attempt {attempt}/{retries} of {func.__name__} failed: {e}")
                    if attempt >= retries:
                        raise
                    await asyncio.sleep(delay)
        return wrapper
    return decorator
