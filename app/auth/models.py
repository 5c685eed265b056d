# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for the caller identity carried by Supabase JWTs.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.config import settings

SUPER_ADMIN_ROLE = "super_admin"


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    role comes from app_metadata.role (or the top level role claim when it
    is not the Postgres role "authenticated").
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None

    @property
    def is_super_admin(self) -> bool:
        """Super admins see and manage every tenant."""
        if self.role == SUPER_ADMIN_ROLE:
            return True
        return bool(self.email) and self.email.lower() in settings.super_admin_emails_list


class UserResponse(BaseModel):
    """Response of GET /auth/me."""
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None
    is_super_admin: bool = False
    media_ids: list[str] = []
