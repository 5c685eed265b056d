# =============================================================================
# app/routers/schedules.py - Scheduled Generation Endpoints
# =============================================================================
# Admin CRUD for generation schedules plus the cron entry point.
#
# The cron endpoint is called every 5 minutes by an external scheduler with
# "Authorization: Bearer <CRON_SECRET>". Celery beat runs the same logic in
# workers.tasks.run_scheduled_generations.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.dependencies import TenantDep, require_cron_secret
from core.models.schedule import ScheduledGenerationCreate, ScheduledGenerationUpdate
from core.services.schedule_service import ScheduleService

logger = logging.getLogger(__name__)

router = APIRouter()
cron_router = APIRouter()

ScheduleId = Annotated[str, Path(description="Schedule id")]


# =============================================================================
# Admin
# =============================================================================

@router.get("")
def list_schedules(ctx: TenantDep):
    return ScheduleService.list_schedules(ctx.media_id)


@router.get("/{schedule_id}")
def get_schedule(schedule_id: ScheduleId, ctx: TenantDep):
    return ScheduleService.get_schedule(ctx.media_id, schedule_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_schedule(payload: ScheduledGenerationCreate, ctx: TenantDep):
    """
    Create a schedule.

    Category, writer and patterns must belong to the tenant.
    """
    return ScheduleService.create_schedule(ctx.media_id, payload)


@router.put("/{schedule_id}")
def update_schedule(schedule_id: ScheduleId, payload: ScheduledGenerationUpdate, ctx: TenantDep):
    return ScheduleService.update_schedule(ctx.media_id, schedule_id, payload)


@router.delete("/{schedule_id}")
def delete_schedule(schedule_id: ScheduleId, ctx: TenantDep):
    ScheduleService.delete_schedule(ctx.media_id, schedule_id)
    return {"success": True, "message": "Schedule deleted"}


# =============================================================================
# Cron
# =============================================================================

@cron_router.get("/scheduled-articles", dependencies=[Depends(require_cron_secret)])
def run_scheduled_articles():
    """
    Run every schedule due now, across all tenants.

    Returns {executed, succeeded, failed, results}.
    """
    logger.info("Cron: running due schedules")
    return ScheduleService.run_due_schedules()
