# =============================================================================
# core/services/schedule_service.py - Scheduled Generation Logic
# =============================================================================
# Schedules run the article generator on chosen weekdays at a time of day
# on a 5 minute grid. The cron endpoint and Celery beat call
# run_due_schedules() every 5 minutes:
#
#   now (UTC) -> schedule timezone -> weekday + time rounded to 5 minutes
#   -> match days_of_week / time_of_day
#   -> skip schedules executed in the last 10 minutes
#
# Each schedule runs independently; one failure never stops the others.
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from app.config import settings
from core.models.schedule import ScheduledGenerationCreate, ScheduledGenerationUpdate
from core.services.records import get_tenant_record, now_iso
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

ROUNDING_MINUTES = 5
RECENT_EXECUTION_WINDOW = timedelta(minutes=10)


# =============================================================================
# Time matching
# =============================================================================

def round_to_grid(moment: datetime, step: int = ROUNDING_MINUTES) -> datetime:
    """
    Round a datetime to the nearest `step` minutes.

    Rounding up past :55 carries into the next hour (and day):
    19:58 -> 20:00, 23:58 -> 00:00 of the next day.
    """
    moment = moment.replace(second=0, microsecond=0)
    remainder = moment.minute % step
    if remainder * 2 >= step:
        return moment + timedelta(minutes=step - remainder)
    return moment - timedelta(minutes=remainder)


def local_slot(now: datetime, tz_name: str | None) -> tuple[str, str]:
    """
    Weekday ("0" = Sunday) and "HH:MM" of now in a timezone, rounded.
    """
    local = round_to_grid(now.astimezone(ZoneInfo(tz_name or settings.SCHEDULE_DEFAULT_TIMEZONE)))
    weekday = str((local.weekday() + 1) % 7)
    return weekday, local.strftime("%H:%M")


def _parse_time(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def is_due(schedule: dict[str, Any], now: datetime) -> bool:
    """Whether an active schedule should run at now."""
    if not schedule.get("is_active"):
        return False

    weekday, time_of_day = local_slot(now, schedule.get("timezone"))
    if weekday not in (schedule.get("days_of_week") or []):
        return False
    if schedule.get("time_of_day") != time_of_day:
        return False

    last = _parse_time(schedule.get("last_executed_at"))
    if last and now - last < RECENT_EXECUTION_WINDOW:
        logger.info(f"Schedule {schedule.get('id')} ran at {last.isoformat()}, skipping")
        return False
    return True


class ScheduleService:
    """
    Service for scheduled generation CRUD and execution.
    """

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    @staticmethod
    def list_schedules(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(
            "scheduled_generations", filters={"media_id": media_id}, order_by="created_at", desc=True
        )

    @staticmethod
    def get_schedule(media_id: str, schedule_id: str) -> dict[str, Any]:
        return get_tenant_record("scheduled_generations", "schedule", schedule_id, media_id)

    @staticmethod
    def _check_references(media_id: str, data: dict[str, Any]) -> None:
        """Referenced category, writer and patterns must belong to the tenant."""
        references = (
            ("category_id", "categories", "category"),
            ("writer_id", "writers", "writer"),
            ("image_prompt_pattern_id", "image_prompt_patterns", "pattern"),
            ("pattern_id", "article_patterns", "pattern"),
        )
        for key, table, resource in references:
            if data.get(key):
                get_tenant_record(table, resource, data[key], media_id)

    @staticmethod
    def create_schedule(media_id: str, payload: ScheduledGenerationCreate) -> dict[str, Any]:
        data = payload.model_dump()
        ScheduleService._check_references(media_id, data)

        now = now_iso()
        data.update({"media_id": media_id, "last_executed_at": None, "created_at": now, "updated_at": now})
        schedule = SupabaseClient.insert("scheduled_generations", data)
        logger.info(f"Created schedule {schedule['id']} ({payload.time_of_day} {payload.timezone})")
        return schedule

    @staticmethod
    def update_schedule(media_id: str, schedule_id: str, payload: ScheduledGenerationUpdate) -> dict[str, Any]:
        ScheduleService.get_schedule(media_id, schedule_id)
        data = payload.model_dump(exclude_unset=True)
        ScheduleService._check_references(media_id, data)
        data["updated_at"] = now_iso()
        return SupabaseClient.update("scheduled_generations", schedule_id, data)

    @staticmethod
    def delete_schedule(media_id: str, schedule_id: str) -> None:
        ScheduleService.get_schedule(media_id, schedule_id)
        SupabaseClient.delete("scheduled_generations", schedule_id)
        logger.info(f"Deleted schedule {schedule_id}")

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    @staticmethod
    def due_schedules(now: datetime | None = None) -> list[dict[str, Any]]:
        """Active schedules of every tenant that should run now."""
        now = now or datetime.now(timezone.utc)
        active = SupabaseClient.fetch_many("scheduled_generations", filters={"is_active": True})
        due = [schedule for schedule in active if is_due(schedule, now)]
        logger.info(f"{len(due)} of {len(active)} active schedules are due")
        return due

    @staticmethod
    def run_schedule(schedule: dict[str, Any], generate: Callable[..., Any] | None = None) -> dict[str, Any]:
        """
        Run one schedule and record last_executed_at on success.

        Returns:
            {schedule_id, success, article_id, warning?} or {schedule_id, success, error}
        """
        if generate is None:
            from agents.article_generator import ArticleGeneratorAgent
            generate = ArticleGeneratorAgent().generate

        schedule_id = schedule["id"]
        try:
            result = generate(
                media_id=schedule["media_id"],
                category_id=schedule["category_id"],
                writer_id=schedule["writer_id"],
                image_prompt_pattern_id=schedule["image_prompt_pattern_id"],
                pattern_id=schedule.get("pattern_id"),
                target_audience=schedule.get("target_audience"),
            )
        except Exception as e:
            logger.error(f"Schedule {schedule_id} failed: {e}")
            return {"schedule_id": schedule_id, "success": False, "error": str(e)}

        logger.info(f"Schedule {schedule_id} generated article {result.article_id}")
        outcome = {"schedule_id": schedule_id, "success": True, "article_id": result.article_id}

        try:
            SupabaseClient.update("scheduled_generations", schedule_id, {"last_executed_at": now_iso()})
        except SupabaseClientError as e:
            logger.error(f"Schedule {schedule_id}: could not record last_executed_at: {e}")
            outcome["warning"] = f"last_executed_at not recorded: {e.message}"
        return outcome

    @staticmethod
    def run_due_schedules(
        now: datetime | None = None,
        generate: Callable[..., Any] | None = None,
    ) -> dict[str, Any]:
        """
        Run every due schedule.

        Returns:
            {executed, succeeded, failed, results}
        """
        results = [ScheduleService.run_schedule(s, generate) for s in ScheduleService.due_schedules(now)]
        succeeded = sum(1 for r in results if r["success"])
        logger.info(f"Scheduled generation: {succeeded} succeeded, {len(results) - succeeded} failed")
        return {
            "executed": len(results),
            "succeeded": succeeded,
            "failed": len(results) - succeeded,
            "results": results,
        }
