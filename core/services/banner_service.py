# =============================================================================
# core/services/banner_service.py - Banner Block Business Logic
# =============================================================================
# Banners are ordered image blocks. New banners go to the end of the list
# and their placement must be offered by the tenant's layout.
# =============================================================================

import logging
from typing import Any

from agents.translator import TranslatorAgent
from app.exceptions import ResourceNotFoundError, ValidationFailedError
from core.models.banner import BannerCreate, BannerOrderUpdate, BannerUpdate
from core.models.theme import block_placements
from core.services.records import get_tenant_record, now_iso, translate_fields
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class BannerService:
    """
    Service for banner block operations.
    """

    @staticmethod
    def check_placement(tenant: dict[str, Any], placement: str) -> None:
        """
        Raises:
            ValidationFailedError: If the tenant layout does not offer the placement
        """
        layout = (tenant.get("theme") or {}).get("layout_theme")
        allowed = block_placements(layout)
        if placement not in allowed:
            raise ValidationFailedError(
                f"Placement '{placement}' is not available in this layout",
                suggestion=f"Use one of: {', '.join(allowed)}",
                details={"layout": layout, "allowed": allowed},
            )

    @staticmethod
    def list_banners(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many("banners", filters={"media_id": media_id}, order_by="order")

    @staticmethod
    def get_banner(media_id: str, banner_id: str) -> dict[str, Any]:
        return get_tenant_record("banners", "banner", banner_id, media_id)

    @staticmethod
    def create_banner(
        tenant: dict[str, Any],
        payload: BannerCreate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """Create a banner at the end of the tenant's list."""
        media_id = tenant["id"]
        BannerService.check_placement(tenant, payload.placement)

        banners = BannerService.list_banners(media_id)
        next_order = max((b.get("order") or 0 for b in banners), default=-1) + 1

        now = now_iso()
        data = {
            **payload.model_dump(),
            "order": next_order,
            "media_id": media_id,
            "created_at": now,
            "updated_at": now,
        }
        translate_fields(data, ["title"], translator, context="banner title")

        banner = SupabaseClient.insert("banners", data)
        logger.info(f"Created banner {banner['id']} at order {next_order}")
        return banner

    @staticmethod
    def update_banner(
        tenant: dict[str, Any],
        banner_id: str,
        payload: BannerUpdate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        BannerService.get_banner(tenant["id"], banner_id)
        data = payload.model_dump(exclude_unset=True)

        if "placement" in data:
            BannerService.check_placement(tenant, data["placement"])
        translate_fields(data, ["title"], translator, context="banner title")

        data["updated_at"] = now_iso()
        return SupabaseClient.update("banners", banner_id, data)

    @staticmethod
    def delete_banner(media_id: str, banner_id: str) -> None:
        BannerService.get_banner(media_id, banner_id)
        SupabaseClient.delete("banners", banner_id)
        logger.info(f"Deleted banner {banner_id}")

    @staticmethod
    def reorder(media_id: str, updates: list[BannerOrderUpdate]) -> int:
        """
        Apply a batch of order changes.

        All ids are checked before anything is written.

        Raises:
            ResourceNotFoundError: If an id is unknown or belongs to another tenant
        """
        owned = {b["id"] for b in BannerService.list_banners(media_id)}
        for update in updates:
            if update.id not in owned:
                raise ResourceNotFoundError("banner", update.id)

        now = now_iso()
        for update in updates:
            SupabaseClient.update("banners", update.id, {"order": update.order, "updated_at": now})

        logger.info(f"Reordered {len(updates)} banners in tenant {media_id}")
        return len(updates)
