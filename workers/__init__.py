# =============================================================================
# workers/ - Celery Background Task Workers
# =============================================================================
# Celery configuration and task definitions for the publish pipeline, AI
# article generation and scheduled generations.
#
# Components:
# - celery_app.py: Celery application and lifecycle logging
# - tasks.py: Task definitions
# - config.py: Worker settings, queues and the beat schedule
#
# Usage:
#   # Start worker and beat
#   celery -A workers.celery_app worker -Q default,ai_tasks --loglevel=info
#   celery -A workers.celery_app beat --loglevel=info
#
#   # Submit task (from API)
#   from workers.tasks import publish_article
#   result = publish_article.delay(article_id)
# =============================================================================

from .celery_app import celery_app
from . import tasks

__all__ = [
    "celery_app",
    "tasks",
]
