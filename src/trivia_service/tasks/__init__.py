"""
Celery tasks for deferred keyword logging.

- celery_app.py: Celery application configuration (broker, serialization)
- keyword_tasks.py: Task definitions (record_keyword)
"""

from trivia_service.tasks.celery_app import celery_app
from trivia_service.tasks.keyword_tasks import record_keyword_task

__all__ = [
    "celery_app",
    "record_keyword_task",
]
