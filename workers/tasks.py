# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Background tasks for the LLM-heavy parts of the CMS.
#
# Tasks:
# - publish_article: translation, AI summaries, TOC and search sync
# - generate_article: full AI article generation (saved as a draft)
# - run_scheduled_generations: beat task running due schedules
# =============================================================================

import logging
from typing import Any

from celery import current_task, shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing...") -> None:
    """
    Update task progress for polling.

    Args:
        current: Current step number
        total: Total steps
        message: Status message
    """
    if current_task and current_task.request.id:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100),
                "message": message,
            }
        )


# =============================================================================
# Publish Pipeline
# =============================================================================

@shared_task(bind=True, name="workers.tasks.publish_article")
def publish_article(self, article_id: str) -> dict[str, Any]:
    """
    Run the publish pipeline for an article.

    Per-language failures are logged and reported in failed_langs; the task
    itself only fails on unexpected errors.

    Returns:
        {success, article_id, translated_langs, failed_langs, indexed_langs}
    """
    from core.services.publish_service import PublishService

    logger.info(f"Publishing article {article_id}")
    update_progress(1, 2, "Translating and indexing...")
    result = PublishService.run_pipeline(article_id)
    update_progress(2, 2, "Done")
    return result


# =============================================================================
# Article Generation
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_article")
def generate_article(
    self,
    media_id: str,
    category_id: str,
    writer_id: str,
    image_prompt_pattern_id: str,
    pattern_id: str | None = None,
    target_audience: str | None = None,
) -> dict[str, Any]:
    """
    Generate a draft article.

    Progress is reported for every generation step.

    Returns:
        GenerationResult as a dict (article_id, slug, title, keyword...)
    """
    from agents.article_generator import ArticleGeneratorAgent

    logger.info(f"Generating article for tenant {media_id}, category {category_id}")
    result = ArticleGeneratorAgent().generate(
        media_id=media_id,
        category_id=category_id,
        writer_id=writer_id,
        image_prompt_pattern_id=image_prompt_pattern_id,
        pattern_id=pattern_id,
        target_audience=target_audience,
        progress=update_progress,
    )
    return result.to_dict()


@shared_task(bind=True, name="workers.tasks.run_scheduled_generations")
def run_scheduled_generations(self) -> dict[str, Any]:
    """
    Run every schedule due now.

    Returns:
        {executed, succeeded, failed, results}
    """
    from core.services.schedule_service import ScheduleService

    return ScheduleService.run_due_schedules()

