# =============================================================================
# core/services/account_service.py - Admin Accounts
# =============================================================================
# Accounts are Supabase Auth users managed with the service role key
# (client.auth.admin). Display name, logo and role are stored in the user
# metadata; the tenants an account can manage are the tenants listing it in
# member_ids.
#
# Only super admins reach these operations (see app/routers/accounts.py).
# =============================================================================

import logging
from typing import Any

from app.exceptions import ResourceNotFoundError, ValidationFailedError
from core.models.account import AccountCreate, AccountUpdate
from core.services.tenant_service import TenantService
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

USERS_PER_PAGE = 1000


def _iso(value: Any) -> str | None:
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def account_from_user(user: Any, tenants: list[dict[str, Any]]) -> dict[str, Any]:
    """Account view of a Supabase Auth user and the tenants listing it."""
    metadata = getattr(user, "user_metadata", None) or {}
    uid = str(user.id)
    return {
        "uid": uid,
        "email": user.email or "",
        "display_name": metadata.get("display_name") or "",
        "logo_url": metadata.get("logo_url") or "",
        "role": metadata.get("role") or "editor",
        "media_ids": [t["id"] for t in tenants if uid in (t.get("member_ids") or [])],
        "created_at": _iso(getattr(user, "created_at", None)),
        "last_sign_in_at": _iso(getattr(user, "last_sign_in_at", None)),
    }


class AccountService:
    """
    Service for admin account management.
    """

    @staticmethod
    def _admin():
        return SupabaseClient.get_client().auth.admin

    @staticmethod
    def _tenants() -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many("tenants", columns="id,owner_id,member_ids")

    @staticmethod
    def list_accounts() -> list[dict[str, Any]]:
        try:
            users = AccountService._admin().list_users(page=1, per_page=USERS_PER_PAGE)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list users: {e}",
                code="AUTH_LIST_FAILED",
                suggestion="Check that SUPABASE_SERVICE_KEY is the service role key",
            )
        tenants = AccountService._tenants()
        return [account_from_user(user, tenants) for user in users]

    @staticmethod
    def get_account(uid: str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: If no user has this id
        """
        try:
            response = AccountService._admin().get_user_by_id(uid)
        except Exception as e:
            logger.warning(f"User lookup failed for {uid}: {e}")
            raise ResourceNotFoundError("account", uid)
        if not response or not response.user:
            raise ResourceNotFoundError("account", uid)
        return account_from_user(response.user, AccountService._tenants())

    @staticmethod
    def create_account(payload: AccountCreate) -> dict[str, Any]:
        """
        Create a confirmed user and add it to a tenant when media_id is given.

        Raises:
            TenantNotFoundError: If media_id does not exist
            SupabaseClientError: If Supabase Auth rejects the user
        """
        if payload.media_id:
            TenantService.get_tenant(payload.media_id)

        try:
            response = AccountService._admin().create_user({
                "email": payload.email,
                "password": payload.password,
                "email_confirm": True,
                "user_metadata": {
                    "display_name": payload.display_name,
                    "logo_url": payload.logo_url,
                    "role": payload.role,
                },
            })
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create user {payload.email}: {e}",
                code="AUTH_CREATE_FAILED",
                suggestion="The email may already be registered",
            )

        uid = str(response.user.id)
        if payload.media_id:
            TenantService.add_member(payload.media_id, uid)

        logger.info(f"Created account {uid} ({payload.email})")
        return account_from_user(response.user, AccountService._tenants())

    @staticmethod
    def update_account(uid: str, payload: AccountUpdate) -> dict[str, Any]:
        """Update email, password and profile metadata; unset fields are kept."""
        current = AccountService.get_account(uid)
        changes = payload.model_dump(exclude_unset=True)

        attributes: dict[str, Any] = {}
        for key in ("email", "password"):
            if changes.get(key):
                attributes[key] = changes[key]

        profile_keys = ("display_name", "logo_url", "role")
        if any(key in changes for key in profile_keys):
            attributes["user_metadata"] = {
                key: changes[key] if changes.get(key) is not None else current[key]
                for key in profile_keys
            }

        if not attributes:
            return current

        try:
            response = AccountService._admin().update_user_by_id(uid, attributes)
        except Exception as e:
            raise SupabaseClientError(message=f"Failed to update user {uid}: {e}", code="AUTH_UPDATE_FAILED")

        logger.info(f"Updated account {uid}: {sorted(attributes)}")
        return account_from_user(response.user, AccountService._tenants())

    @staticmethod
    def delete_account(uid: str) -> None:
        """
        Delete the user and remove it from every tenant it is a member of.

        Raises:
            ValidationFailedError: If the user owns a tenant
        """
        account = AccountService.get_account(uid)
        owned = [t["id"] for t in AccountService._tenants() if t.get("owner_id") == uid]
        if owned:
            raise ValidationFailedError(
                "The account owns tenants and cannot be deleted",
                suggestion="Delete the tenants or transfer their ownership first",
                details={"media_ids": owned},
            )

        for media_id in account["media_ids"]:
            TenantService.remove_member(media_id, uid)

        try:
            AccountService._admin().delete_user(uid)
        except Exception as e:
            raise SupabaseClientError(message=f"Failed to delete user {uid}: {e}", code="AUTH_DELETE_FAILED")
        logger.info(f"Deleted account {uid}")
