# =============================================================================
# app/routers/tasks.py - Task Status Endpoints
# =============================================================================
# Status, result and cancellation of background tasks (publish pipeline,
# article generation, reindexing).
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel

from app.auth import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])

TaskId = Annotated[str, Path(description="Celery task ID")]

# Progress and message shown for states without progress metadata
_STATE_DEFAULTS: dict[str, tuple[int, str]] = {
    "PENDING": (0, "Waiting in queue..."),
    "STARTED": (0, "Starting..."),
    "SUCCESS": (100, "Complete"),
    "FAILURE": (0, "Failed"),
    "REVOKED": (0, "Cancelled"),
}


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    progress: int | None = None
    message: str | None = None
    result: Any = None
    error: str | None = None


def _async_result(task_id: str):
    from workers.celery_app import celery_app
    return celery_app.AsyncResult(task_id)


def build_status(task_id: str, result) -> TaskStatusResponse:
    """TaskStatusResponse for a Celery AsyncResult."""
    response = TaskStatusResponse(task_id=task_id, status=result.status)

    if result.status == "PROGRESS":
        info = result.info or {}
        response.progress = info.get("percent", 0)
        response.message = info.get("message", "Processing...")
        return response

    response.progress, response.message = _STATE_DEFAULTS.get(result.status, (None, None))
    if result.status == "SUCCESS":
        response.result = result.result
    elif result.status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
    return response


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
def get_task_status(task_id: TaskId):
    """
    Current state of a background task.

    PENDING, STARTED, PROGRESS (with percent and step message), SUCCESS
    (with result) or FAILURE (with error).
    """
    try:
        return build_status(task_id, _async_result(task_id))
    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get task status: {e}")


@router.get("/{task_id}/result")
def get_task_result(task_id: TaskId):
    """Result of a finished task; other states return their status only."""
    try:
        result = _async_result(task_id)
    except Exception as e:
        logger.error(f"Error getting task result: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to get task result: {e}")

    if result.status == "SUCCESS":
        return {"task_id": task_id, "status": "SUCCESS", "result": result.result}
    if result.status == "FAILURE":
        return {
            "task_id": task_id,
            "status": "FAILURE",
            "error": str(result.result) if result.result else "Unknown error",
        }
    return {"task_id": task_id, "status": result.status, "message": "Task not yet complete"}


@router.delete("/{task_id}")
def cancel_task(task_id: TaskId):
    """Revoke a task that has not finished yet."""
    try:
        result = _async_result(task_id)
        if result.status in ("SUCCESS", "FAILURE"):
            return {
                "task_id": task_id,
                "message": f"Task already {result.status.lower()}, cannot cancel",
                "cancelled": False,
            }
        result.revoke(terminate=True)
    except Exception as e:
        logger.error(f"Error cancelling task: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to cancel task: {e}")

    logger.info(f"Cancelled task {task_id}")
    return {"task_id": task_id, "message": "Task cancelled", "cancelled": True}
