"""
Shared plumbing for the domain services.

Every public service method returns an output object instead of raising:
validation problems and domain errors become ``ok=False`` with a message,
anything unexpected is logged, rolled back and reported generically.
"""

import functools
import logging
from typing import Any, Awaitable, Callable, Type

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from food_delivery.schemas import validation_message
from food_delivery.services.exceptions import ServiceError

logger = logging.getLogger(__name__)


class BaseService:
    """Holds the request-scoped database session."""

    def __init__(self, db: AsyncSession):
        self.db = db


def handle_errors(output_cls: Type, failure_message: str):
    """
    Wrap a service method so it always answers with ``output_cls``.

    Domain checks run before any write, so only unexpected failures need a
    rollback.
    """
    def decorator(func: Callable[..., Awaitable[Any]]):
        @functools.wraps(func)
        async def wrapper(self: BaseService, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except ValidationError as e:
                return output_cls(ok=False, error=validation_message(e))
            except ServiceError as e:
                return output_cls(ok=False, error=str(e))
            except Exception as e:
                logger.exception(f"{type(self).__name__}.{func.__name__} failed: {e}")
                await self.db.rollback()
                return output_cls(ok=False, error=failure_message)
        return wrapper
    return decorator
