# =============================================================================
# core/models/account.py - Admin Account Schemas
# =============================================================================
# Accounts are Supabase Auth users. Display name, logo and role live in the
# user metadata; tenant membership lives on the tenants (member_ids).
# =============================================================================

from typing import Literal

from pydantic import BaseModel, Field

AccountRole = Literal["admin", "editor"]


class AccountCreate(BaseModel):
    """
    Schema for creating an admin account.

    Example:
        {"email": "editor@example.com", "password": "s3cret-pass", "media_id": "m-1"}
    """
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    display_name: str = Field(default="")
    logo_url: str = Field(default="")
    role: AccountRole = "editor"
    media_id: str | None = Field(
        default=None,
        description="Tenant the account is added to as a member"
    )


class AccountUpdate(BaseModel):
    email: str | None = Field(default=None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str | None = Field(default=None, min_length=6)
    display_name: str | None = None
    logo_url: str | None = None
    role: AccountRole | None = None


class Account(BaseModel):
    """Account as returned by the admin API."""
    uid: str
    email: str
    display_name: str = ""
    logo_url: str = ""
    role: str = "editor"
    media_ids: list[str] = Field(default_factory=list)
    created_at: str | None = None
    last_sign_in_at: str | None = None
