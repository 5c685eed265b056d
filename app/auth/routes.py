# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Signup/login happen client-side with Supabase Auth. These routes return
# who the token belongs to and which tenants the caller can manage.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from core.services.tenant_service import TenantService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Current user with the ids of the tenants they can manage.

    Raises:
        401: If not authenticated
    """
    tenants = TenantService.list_tenants(str(user.id), user.is_super_admin)
    return UserResponse(
        id=user.id,
        email=user.email,
        role=user.role,
        is_super_admin=user.is_super_admin,
        media_ids=[t["id"] for t in tenants],
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Check that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
        "is_super_admin": user.is_super_admin,
    }
