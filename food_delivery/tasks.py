"""
Celery Tasks
Background maintenance that runs outside the request cycle.
"""

import asyncio
import logging
import time
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from food_delivery.celery_worker import celery_app
from food_delivery.core.config import get_settings
from food_delivery.services.payments import PaymentsService

logger = logging.getLogger(__name__)


async def _expire_promotions() -> int:
    # Each task run owns its event loop, so it cannot share the app's pooled engine
    engine = create_async_engine(get_settings().database_url, poolclass=NullPool)
    session_maker = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as session:
            return await PaymentsService(session).check_promoted_restaurants()
    finally:
        await engine.dispose()


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=5,
    autoretry_for=(Exception,),
    retry_backoff=True
)
def expire_promoted_restaurants(self) -> dict:
    """
    Demote restaurants whose paid promotion has ended.
    Scheduled by Celery beat.

    Returns:
        dict: Number of restaurants demoted and timing
    """
    task_id = self.request.id
    start_time = time.time()

    try:
        expired = asyncio.run(_expire_promotions())
    except Exception as e:
        elapsed = round(time.time() - start_time, 3)
        logger.error(f"Task {task_id}: promotion expiry failed after {elapsed}s - {e}")
        # Celery will auto-retry based on configuration
        raise

    elapsed = round(time.time() - start_time, 3)
    logger.info(f"Task {task_id}: {expired} promotion(s) expired in {elapsed}s")
    return {
        'success': True,
        'expired': expired,
        'task_id': task_id,
        'processing_time_seconds': elapsed,
    }


@celery_app.task
def health_check() -> dict:
    """
    Simple health check task to verify Celery is working.
    """
    return {
        'status': 'healthy',
        'worker': 'celery',
        'timestamp': datetime.now().isoformat()
    }
