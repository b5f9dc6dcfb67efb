"""
Degrade-to-empty policy for read paths.

Read endpoints keep the page shell alive when the data store is down: the
wrapped call returns its declared fallback instead of raising.
"""

import copy
import logging
from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

from pymongo.errors import PyMongoError

from stemforum.services.database import DatabaseUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATA_LAYER_ERRORS = (DatabaseUnavailableError, PyMongoError)


def degrade_to(fallback: Any):
    """
    Decorate an async data-layer call so failures return ``fallback``.

    A deep copy of the fallback is returned each time so callers may mutate it.

    Example:
        >>> @degrade_to({"views": 0})
        ... async def get_stats(article_id): ...
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except DATA_LAYER_ERRORS as e:
                logger.warning(
                    f"{func.__qualname__} degraded to fallback: {type(e).__name__}: {e}"
                )
                return copy.deepcopy(fallback)

        wrapper.fallback = fallback
        return wrapper

    return decorator
