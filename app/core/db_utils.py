"""
Database utilities for bounding store calls and mapping their failures
"""
import asyncio
import functools
import logging
from typing import Callable, Any, TypeVar, cast, Awaitable

from sqlalchemy import exc as sa_exc

from app.core.exceptions import StoreTimeoutError, StoreUnavailableError

logger = logging.getLogger(__name__)

# Define a type variable for the return type of the decorated function
T = TypeVar('T')

# Failures that mean the store itself is unreachable or broken
CONNECTION_ERRORS = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    ConnectionError,
    OSError,
)


async def _rollback_quietly(db: Any) -> None:
    if db is None:
        return
    try:
        await db.rollback()
    except sa_exc.SQLAlchemyError as e:
        logger.warning(f"Rollback after failed store call also failed: {str(e)}")


def with_store_guard(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Decorator for service methods that talk to the store.

    The bound service must expose ``db`` (an AsyncSession) and
    ``store_timeout`` (seconds, or None for no bound). The call is cut off
    after ``store_timeout``, any failure rolls the session back, and
    connection-level errors are re-raised as store errors.
    """
    @functools.wraps(func)
    async def wrapper(self: Any, *args: Any, **kwargs: Any) -> T:
        db = getattr(self, "db", None)
        timeout = getattr(self, "store_timeout", None)
        try:
            return await asyncio.wait_for(func(self, *args, **kwargs), timeout=timeout)
        except (asyncio.TimeoutError, sa_exc.TimeoutError):
            # asyncio.TimeoutError is an OSError subclass on 3.11+, so it is handled first
            logger.error(f"{func.__qualname__} exceeded store timeout of {timeout}s")
            await _rollback_quietly(db)
            raise StoreTimeoutError() from None
        except CONNECTION_ERRORS as e:
            logger.error(f"{func.__qualname__} failed, store unavailable: {str(e)}")
            await _rollback_quietly(db)
            raise StoreUnavailableError() from e
        except Exception:
            await _rollback_quietly(db)
            raise

    return cast(Callable[..., Awaitable[T]], wrapper)
