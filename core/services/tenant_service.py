# =============================================================================
# core/services/tenant_service.py - Tenant Business Logic
# =============================================================================
# Tenants (media sites) and their members, site settings and domain
# resolution. Access rules:
# - super admins see and manage every tenant
# - other users see the tenants they own or are a member of
# =============================================================================

import logging
from typing import Any

from app.exceptions import (
    DuplicateDomainError,
    DuplicateSlugError,
    TenantAccessDeniedError,
    TenantNotFoundError,
    ValidationFailedError,
)
from core.models.tenant import SiteSettingsUpdate, TenantCreate, TenantSettings, TenantUpdate
from core.services.records import now_iso
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def normalize_host(domain: str) -> str:
    """Lowercase a host and strip any port: "Blog.Example.com:3000" -> "blog.example.com"."""
    return (domain or "").strip().lower().split(":", 1)[0]


def is_member(tenant: dict[str, Any], user_id: str) -> bool:
    return tenant.get("owner_id") == user_id or user_id in (tenant.get("member_ids") or [])


class TenantService:
    """
    Service for tenant management operations.
    """

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    @staticmethod
    def get_tenant(media_id: str) -> dict[str, Any]:
        """
        Raises:
            TenantNotFoundError: If the tenant does not exist
        """
        tenant = SupabaseClient.fetch_by_id("tenants", media_id)
        if not tenant:
            raise TenantNotFoundError(media_id)
        return tenant

    @staticmethod
    def get_accessible_tenant(media_id: str, user_id: str, super_admin: bool = False) -> dict[str, Any]:
        """
        Raises:
            TenantNotFoundError: If the tenant does not exist
            TenantAccessDeniedError: If the user is not owner, member or super admin
        """
        tenant = TenantService.get_tenant(media_id)
        if not super_admin and not is_member(tenant, user_id):
            raise TenantAccessDeniedError(media_id)
        return tenant

    @staticmethod
    def list_tenants(user_id: str, super_admin: bool = False) -> list[dict[str, Any]]:
        if super_admin:
            return SupabaseClient.fetch_many("tenants", order_by="created_at", desc=True)
        return SupabaseClient.fetch_many(
            "tenants",
            contains={"member_ids": [user_id]},
            order_by="created_at",
            desc=True,
        )

    @staticmethod
    def _check_unique(slug: str | None, custom_domain: str | None, exclude_id: str | None = None) -> None:
        if slug:
            rows = SupabaseClient.fetch_many("tenants", filters={"slug": slug}, columns="id")
            if any(row["id"] != exclude_id for row in rows):
                raise DuplicateSlugError("tenant", slug)
        if custom_domain:
            rows = SupabaseClient.fetch_many("tenants", filters={"custom_domain": custom_domain}, columns="id")
            if any(row["id"] != exclude_id for row in rows):
                raise DuplicateDomainError(custom_domain)

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    @staticmethod
    def create_tenant(payload: TenantCreate, user_id: str, super_admin: bool = False) -> dict[str, Any]:
        """
        Create a tenant owned by the caller.

        Super admins may assign another owner with owner_id.

        Raises:
            DuplicateSlugError: If the slug is taken
            DuplicateDomainError: If the custom domain is taken
        """
        TenantService._check_unique(payload.slug, payload.custom_domain)

        owner_id = payload.owner_id if super_admin and payload.owner_id else user_id
        now = now_iso()
        data = {
            "name": payload.name,
            "slug": payload.slug,
            "custom_domain": payload.custom_domain,
            "client_id": payload.client_id,
            "owner_id": owner_id,
            "member_ids": [owner_id],
            "settings": payload.settings.model_dump(),
            "allow_indexing": False,
            "is_active": True,
            "created_at": now,
            "updated_at": now,
        }

        tenant = SupabaseClient.insert("tenants", data)
        logger.info(f"Created tenant {tenant['id']} ({payload.slug}) for {owner_id}")
        return tenant

    @staticmethod
    def update_tenant(media_id: str, payload: TenantUpdate) -> dict[str, Any]:
        TenantService.get_tenant(media_id)
        data = payload.model_dump(exclude_unset=True)
        TenantService._check_unique(data.get("slug"), data.get("custom_domain"), exclude_id=media_id)
        data["updated_at"] = now_iso()
        return SupabaseClient.update("tenants", media_id, data)

    @staticmethod
    def delete_tenant(media_id: str) -> None:
        TenantService.get_tenant(media_id)
        SupabaseClient.delete("tenants", media_id)
        logger.info(f"Deleted tenant {media_id}")

    @staticmethod
    def add_member(media_id: str, user_id: str) -> dict[str, Any]:
        tenant = TenantService.get_tenant(media_id)
        members = list(tenant.get("member_ids") or [])
        if user_id not in members:
            members.append(user_id)
        return SupabaseClient.update("tenants", media_id, {"member_ids": members, "updated_at": now_iso()})

    @staticmethod
    def remove_member(media_id: str, user_id: str) -> dict[str, Any]:
        """
        Raises:
            ValidationFailedError: If user_id is the owner
        """
        tenant = TenantService.get_tenant(media_id)
        if tenant.get("owner_id") == user_id:
            raise ValidationFailedError("The owner cannot be removed from the tenant")
        members = [m for m in tenant.get("member_ids") or [] if m != user_id]
        return SupabaseClient.update("tenants", media_id, {"member_ids": members, "updated_at": now_iso()})

    # -------------------------------------------------------------------------
    # Domain resolution
    # -------------------------------------------------------------------------

    @staticmethod
    def resolve_domain(domain: str) -> str | None:
        """
        Find the active tenant serving a host.

        Custom domains win; otherwise the first host label is matched
        against tenant slugs (blog.example.com -> "blog").

        Returns:
            media_id, or None when nothing matches
        """
        host = normalize_host(domain)
        if not host:
            return None

        matches = SupabaseClient.fetch_many(
            "tenants", filters={"custom_domain": host, "is_active": True}, columns="id", limit=1
        )
        if not matches:
            matches = SupabaseClient.fetch_many(
                "tenants", filters={"slug": host.split(".", 1)[0], "is_active": True}, columns="id", limit=1
            )

        media_id = matches[0]["id"] if matches else None
        logger.debug(f"Resolved domain {host} -> {media_id}")
        return media_id

    # -------------------------------------------------------------------------
    # Site settings
    # -------------------------------------------------------------------------

    @staticmethod
    def site_settings(tenant: dict[str, Any]) -> dict[str, Any]:
        site = TenantSettings.model_validate(tenant.get("settings") or {})
        return {
            "site_name": tenant.get("name") or "",
            "site_description": site.site_description,
            "logo_url": site.logos.square,
            "allow_indexing": bool(tenant.get("allow_indexing", False)),
        }

    @staticmethod
    def update_site_settings(tenant: dict[str, Any], payload: SiteSettingsUpdate) -> dict[str, Any]:
        """Update name, description, square logo and indexing flag."""
        site = TenantSettings.model_validate(tenant.get("settings") or {})
        changes = payload.model_dump(exclude_unset=True)

        if "site_description" in changes:
            site.site_description = changes["site_description"] or ""
        if "logo_url" in changes:
            site.logos.square = changes["logo_url"] or ""

        data: dict[str, Any] = {"settings": site.model_dump(), "updated_at": now_iso()}
        if changes.get("site_name"):
            data["name"] = changes["site_name"]
        if "allow_indexing" in changes:
            data["allow_indexing"] = bool(changes["allow_indexing"])

        updated = SupabaseClient.update("tenants", tenant["id"], data) or {**tenant, **data}
        return TenantService.site_settings(updated)
