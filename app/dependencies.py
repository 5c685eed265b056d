# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependencies that resolve the tenant of a request.
#
# Admin routes:  Authorization: Bearer <jwt> + X-Media-Id -> TenantContext
# Public routes: X-Media-Id (active tenants only)         -> tenant dict
# Cron route:    Authorization: Bearer <CRON_SECRET>
# =============================================================================

import logging
from dataclasses import dataclass
from typing import Annotated, Any, Optional

from fastapi import Depends, Header, HTTPException, status

from app.auth import AuthUser, get_current_user
from app.config import settings
from app.exceptions import TenantNotFoundError, TenantRequiredError
from core.services.tenant_service import TenantService

logger = logging.getLogger(__name__)

MEDIA_ID_HEADER = "X-Media-Id"


@dataclass(frozen=True)
class TenantContext:
    """Tenant selected by an admin request and the caller acting on it."""
    media_id: str
    tenant: dict[str, Any]
    user: AuthUser


def get_tenant_context(
    user: Annotated[AuthUser, Depends(get_current_user)],
    x_media_id: Annotated[Optional[str], Header(alias=MEDIA_ID_HEADER)] = None,
) -> TenantContext:
    """
    Resolve the admin tenant of a request.

    Raises:
        TenantRequiredError: If X-Media-Id is missing (400)
        TenantNotFoundError: If the tenant does not exist (404)
        TenantAccessDeniedError: If the caller is not a member (403)
    """
    if not x_media_id:
        raise TenantRequiredError()
    tenant = TenantService.get_accessible_tenant(x_media_id, str(user.id), user.is_super_admin)
    return TenantContext(media_id=x_media_id, tenant=tenant, user=user)


def get_public_tenant(
    x_media_id: Annotated[Optional[str], Header(alias=MEDIA_ID_HEADER)] = None,
) -> dict[str, Any]:
    """
    Resolve the tenant of a public request.

    Raises:
        TenantRequiredError: If X-Media-Id is missing (400)
        TenantNotFoundError: If the tenant does not exist or is inactive (404)
    """
    if not x_media_id:
        raise TenantRequiredError()
    tenant = TenantService.get_tenant(x_media_id)
    if not tenant.get("is_active", True):
        raise TenantNotFoundError(x_media_id)
    return tenant


def require_cron_secret(
    authorization: Annotated[Optional[str], Header()] = None,
) -> None:
    """
    Accept only "Bearer <CRON_SECRET>". An empty CRON_SECRET rejects everything.

    Raises:
        HTTPException: 401 otherwise
    """
    expected = f"Bearer {settings.CRON_SECRET}"
    if not settings.CRON_SECRET or authorization != expected:
        logger.warning("Rejected cron request with invalid secret")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


# Type aliases for dependency injection
TenantDep = Annotated[TenantContext, Depends(get_tenant_context)]
PublicTenantDep = Annotated[dict[str, Any], Depends(get_public_tenant)]
UserDep = Annotated[AuthUser, Depends(get_current_user)]
