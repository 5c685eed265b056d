# =============================================================================
# app/routers/writers.py - Writer Admin Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import TenantDep
from core.models.writer import WriterCreate, WriterUpdate
from core.services.writer_service import WriterService

router = APIRouter()

WriterId = Annotated[str, Path(description="Writer id")]


@router.get("")
def list_writers(ctx: TenantDep):
    return WriterService.list_writers(ctx.media_id)


@router.get("/{writer_id}")
def get_writer(writer_id: WriterId, ctx: TenantDep):
    return WriterService.get_writer(ctx.media_id, writer_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_writer(payload: WriterCreate, ctx: TenantDep):
    """Create a writer; the bio is translated to every language."""
    return WriterService.create_writer(ctx.media_id, payload)


@router.put("/{writer_id}")
def update_writer(writer_id: WriterId, payload: WriterUpdate, ctx: TenantDep):
    return WriterService.update_writer(ctx.media_id, writer_id, payload)


@router.delete("/{writer_id}")
def delete_writer(writer_id: WriterId, ctx: TenantDep):
    WriterService.delete_writer(ctx.media_id, writer_id)
    return {"success": True, "message": "Writer deleted"}
