"""
Celery application configuration for deferred keyword logging.

Used when KEYWORD_LOG_DISPATCH=celery: the API enqueues keyword records
and a worker writes them to Redis. Tasks are defined in keyword_tasks.py.
Keyword records are fire-and-forget, so no result backend is configured.
"""

from celery import Celery
from celery.signals import setup_logging

from trivia_service.config import settings
from trivia_service.logging_config import configure_logging

# Initialize Celery app
celery_app = Celery(
    "trivia_service",
    broker=settings.CELERY_BROKER_URL,
    include=["trivia_service.tasks.keyword_tasks"],
)

# Configure Celery
celery_app.conf.update(
    # Task execution
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,  # Hard limit (kills task)
    task_soft_time_limit=max(settings.CELERY_TASK_TIME_LIMIT - 5, 1),

    # Worker settings
    worker_prefetch_multiplier=4,  # Tasks are tiny Redis writes

    # Serialization
    task_serializer="json",
    accept_content=["json"],

    # Timezone (daily buckets use ANALYTICS_TIMEZONE, not this)
    timezone="UTC",
    enable_utc=True,

    # Results
    task_ignore_result=True,
)


@setup_logging.connect
def configure_worker_logging(**kwargs):
    """Use the service's structlog setup instead of Celery's default handlers."""
    configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
