"""
Celery tasks for keyword analytics.

Tasks accept JSON-serializable arguments for compatibility with Celery's
JSON serialization.
"""

import structlog
from celery import Task

from trivia_service.config import settings
from trivia_service.monitoring.metrics import keyword_log_failures_total
from trivia_service.persistence.redis_client import RedisClient
from trivia_service.persistence.repository import KeywordRepository
from trivia_service.tasks.celery_app import celery_app

logger = structlog.get_logger(__name__)


class KeywordTask(Task):
    """
    Base task class holding the repository.

    The sync Redis pool is created once per worker process and reused
    across task invocations.
    """

    _repository = None

    @property
    def repository(self) -> KeywordRepository:
        """Get or initialize repository (singleton per worker)."""
        if self._repository is None:
            redis_client = RedisClient.get_sync_client(settings)
            self._repository = KeywordRepository(redis_client, settings)
        return self._repository


@celery_app.task(
    bind=True,
    base=KeywordTask,
    name="record_keyword",
    ignore_result=True,
)
def record_keyword_task(self: KeywordTask, keyword: str) -> bool:
    """
    Record one keyword request in the analytics store.

    Args:
        keyword: Keyword as submitted (trimmed by the repository)

    Returns:
        True if written. Failures are logged and counted, never retried.
    """
    recorded = self.repository.record_keyword(keyword)
    if not recorded and self.repository.redis is not None:
        keyword_log_failures_total.labels(dispatch="celery").inc()
        logger.warning("Keyword not recorded", task_id=self.request.id, keyword=keyword)
    return recorded
