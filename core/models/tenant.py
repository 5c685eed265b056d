# =============================================================================
# core/models/tenant.py - Tenant (Media Site) Schemas
# =============================================================================
# A tenant is one media site. It is addressed by `media_id` (its row id),
# by its slug as a subdomain, or by a custom domain.
# =============================================================================

from pydantic import BaseModel, Field, field_validator


class TenantLogos(BaseModel):
    landscape: str = ""
    square: str = ""
    portrait: str = ""


class TenantSettings(BaseModel):
    """Site-level settings stored as JSON on the tenant."""
    site_description: str = ""
    logos: TenantLogos = Field(default_factory=TenantLogos)
    favicon_url: str = ""
    og_image_url: str = ""


def _normalize_domain(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


class TenantCreate(BaseModel):
    """
    Schema for creating a tenant.

    Example:
        {"name": "Tokyo Guide", "slug": "tokyo-guide", "custom_domain": "guide.example.com"}
    """
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=63, pattern=r"^[a-z0-9][a-z0-9-]*$")
    custom_domain: str | None = None
    client_id: str | None = None
    owner_id: str | None = Field(
        default=None,
        description="Owner user id (super admins only, defaults to the caller)"
    )
    settings: TenantSettings = Field(default_factory=TenantSettings)

    @field_validator("custom_domain")
    @classmethod
    def normalize_domain(cls, value: str | None) -> str | None:
        return _normalize_domain(value)


class TenantUpdate(BaseModel):
    """Schema for updating a tenant."""
    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=63, pattern=r"^[a-z0-9][a-z0-9-]*$")
    custom_domain: str | None = None
    client_id: str | None = None
    settings: TenantSettings | None = None
    allow_indexing: bool | None = None
    is_active: bool | None = None

    @field_validator("custom_domain")
    @classmethod
    def normalize_domain(cls, value: str | None) -> str | None:
        return _normalize_domain(value)


class MemberRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


class SiteSettingsUpdate(BaseModel):
    """PUT /admin/site body."""
    site_name: str | None = Field(default=None, min_length=1, max_length=200)
    site_description: str | None = None
    logo_url: str | None = None
    allow_indexing: bool | None = None


class SiteSettings(BaseModel):
    site_name: str
    site_description: str
    logo_url: str
    allow_indexing: bool
