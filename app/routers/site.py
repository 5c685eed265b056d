# =============================================================================
# app/routers/site.py - Site Settings and Theme Endpoints
# =============================================================================
# Site settings (name, description, logo, indexing) and the tenant theme.
#
#   router        -> /api/v1/admin/site
#   theme_router  -> /api/v1/admin/theme
# =============================================================================

import logging

from fastapi import APIRouter

from app.dependencies import TenantDep
from core.models.tenant import SiteSettings, SiteSettingsUpdate
from core.models.theme import ThemeUpdate
from core.services.tenant_service import TenantService
from core.services.theme_service import ThemeService

logger = logging.getLogger(__name__)

router = APIRouter()
theme_router = APIRouter()


# =============================================================================
# Site settings
# =============================================================================

@router.get("", response_model=SiteSettings)
def get_site_settings(ctx: TenantDep):
    return TenantService.site_settings(ctx.tenant)


@router.put("", response_model=SiteSettings)
def update_site_settings(payload: SiteSettingsUpdate, ctx: TenantDep):
    return TenantService.update_site_settings(ctx.tenant, payload)


# =============================================================================
# Theme
# =============================================================================

@theme_router.get("")
async def get_theme(ctx: TenantDep):
    """The tenant theme merged over the default theme."""
    return {"theme": ThemeService.get_theme(ctx.tenant)}


@theme_router.get("/layouts")
async def list_layouts(ctx: TenantDep):
    """Available layouts and the banner placements each one offers."""
    return {"layouts": ThemeService.list_layouts()}


@theme_router.put("")
def save_theme(payload: ThemeUpdate, ctx: TenantDep):
    """
    Validate, translate and store the theme.

    Every visible label is translated to the other languages; a failed
    translation keeps the original text.
    """
    return {"success": True, "theme": ThemeService.save_theme(ctx.tenant, payload.theme)}
