# =============================================================================
# app/routers/tenants.py - Tenant Management Endpoints
# =============================================================================
# Tenants (media sites) and their members. Any authenticated user can
# create a tenant and becomes its owner; super admins see every tenant.
#
# domain_router exposes the public host -> media_id lookup used by the
# front end to pick the tenant of a request.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from app.dependencies import UserDep
from app.exceptions import TenantAccessDeniedError
from core.models.tenant import MemberRequest, TenantCreate, TenantUpdate
from core.services.tenant_service import TenantService

router = APIRouter()
domain_router = APIRouter()

MediaId = Annotated[str, Path(description="Tenant (media) id")]


@router.get("")
def list_tenants(user: UserDep):
    """Tenants the caller is a member of (all tenants for super admins)."""
    return TenantService.list_tenants(str(user.id), user.is_super_admin)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tenant(payload: TenantCreate, user: UserDep):
    """
    Create a tenant owned by the caller.

    409 when the slug or custom domain is already used.
    """
    return TenantService.create_tenant(payload, str(user.id), user.is_super_admin)


@router.get("/{media_id}")
def get_tenant(media_id: MediaId, user: UserDep):
    return TenantService.get_accessible_tenant(media_id, str(user.id), user.is_super_admin)


@router.put("/{media_id}")
def update_tenant(media_id: MediaId, payload: TenantUpdate, user: UserDep):
    TenantService.get_accessible_tenant(media_id, str(user.id), user.is_super_admin)
    return TenantService.update_tenant(media_id, payload)


@router.delete("/{media_id}")
def delete_tenant(media_id: MediaId, user: UserDep):
    """Delete a tenant. Super admins only."""
    if not user.is_super_admin:
        raise TenantAccessDeniedError(media_id)
    TenantService.delete_tenant(media_id)
    return {"success": True, "message": "Tenant deleted"}


@router.post("/{media_id}/members")
def add_member(media_id: MediaId, payload: MemberRequest, user: UserDep):
    TenantService.get_accessible_tenant(media_id, str(user.id), user.is_super_admin)
    return TenantService.add_member(media_id, payload.user_id)


@router.delete("/{media_id}/members/{user_id}")
def remove_member(
    media_id: MediaId,
    user_id: Annotated[str, Path(description="Member user id")],
    user: UserDep,
):
    """Remove a member. The owner cannot be removed."""
    TenantService.get_accessible_tenant(media_id, str(user.id), user.is_super_admin)
    return TenantService.remove_member(media_id, user_id)


# =============================================================================
# Domain resolution (public)
# =============================================================================

@domain_router.get("/domain-to-media-id")
def domain_to_media_id(
    domain: Annotated[str, Query(min_length=1, description="Request host, port allowed")],
):
    """Return {media_id} of the active tenant serving the host, or null."""
    return {"media_id": TenantService.resolve_domain(domain)}
