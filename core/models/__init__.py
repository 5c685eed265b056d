# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - article.py: Article create/update, publish toggle, duplicate check
# - taxonomy.py: Category and tag schemas, AI tag generation result
# - writer.py: Writer (author profile) schemas
# - banner.py: Banner block schemas and batch reorder
# - page.py: Static pages and typed content blocks
# - media.py: Media library schemas
# - tenant.py: Tenant and site settings schemas
# - theme.py: Theme, layouts and the default theme
# - schedule.py: Scheduled generations and prompt patterns
# - editorial.py: Rewrite, target audience and inline image helpers
# - account.py: Admin accounts (Supabase Auth users)
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Article Models
# -----------------------------------------------------------------------------
from .article import (
    ARTICLE_LOCALIZED_FIELDS,
    ARTICLE_SOURCE_FIELDS,
    ArticleCreate,
    ArticleUpdate,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    DuplicateMatch,
    FAQItem,
    PublishToggle,
)

# -----------------------------------------------------------------------------
# Taxonomy Models - Categories and tags
# -----------------------------------------------------------------------------
from .taxonomy import (
    CategoryCreate,
    CategoryDescriptionRequest,
    CategoryUpdate,
    GeneratedTag,
    TagCreate,
    TagGenerationRequest,
    TagGenerationResult,
    TagGenerationSummary,
    TagUpdate,
)

# -----------------------------------------------------------------------------
# Writer, Banner and Page Models
# -----------------------------------------------------------------------------
from .writer import WriterCreate, WriterUpdate
from .banner import BannerCreate, BannerOrderUpdate, BannerReorderRequest, BannerUpdate
from .page import BlockType, ContentBlock, PageCreate, PageUpdate

# -----------------------------------------------------------------------------
# Media Models
# -----------------------------------------------------------------------------
from .media import ImageGenerateRequest, MediaAltUpdate, MediaType, MediaUsage

# -----------------------------------------------------------------------------
# Tenant and Theme Models
# -----------------------------------------------------------------------------
from .tenant import (
    MemberRequest,
    SiteSettings,
    SiteSettingsUpdate,
    TenantCreate,
    TenantLogos,
    TenantSettings,
    TenantUpdate,
)
from .theme import THEME_LAYOUTS, Theme, ThemeUpdate, block_placements, default_theme

# -----------------------------------------------------------------------------
# Schedule and Pattern Models
# -----------------------------------------------------------------------------
from .schedule import (
    ArticlePatternCreate,
    ArticlePatternUpdate,
    GenerationRequest,
    ImagePromptPatternCreate,
    ImagePromptPatternUpdate,
    ScheduledGenerationCreate,
    ScheduledGenerationUpdate,
)

# -----------------------------------------------------------------------------
# Editor Helper and Account Models
# -----------------------------------------------------------------------------
from .editorial import (
    InlineImage,
    InlineImagesRequest,
    InlineImagesResponse,
    RewriteRequest,
    RewriteResponse,
    SampleImageRequest,
    SampleImageResponse,
    StyleRewriteRequest,
    StyleRewriteResponse,
    TargetAudienceEntry,
    TargetAudienceRequest,
    TargetAudienceResponse,
    TitleDuplicateCheck,
)
from .account import Account, AccountCreate, AccountUpdate

__all__ = [
    # Article
    "ARTICLE_LOCALIZED_FIELDS",
    "ARTICLE_SOURCE_FIELDS",
    "ArticleCreate",
    "ArticleUpdate",
    "DuplicateCheckRequest",
    "DuplicateCheckResponse",
    "DuplicateMatch",
    "FAQItem",
    "PublishToggle",
    # Taxonomy
    "CategoryCreate",
    "CategoryDescriptionRequest",
    "CategoryUpdate",
    "GeneratedTag",
    "TagCreate",
    "TagGenerationRequest",
    "TagGenerationResult",
    "TagGenerationSummary",
    "TagUpdate",
    # Writer / Banner / Page
    "WriterCreate",
    "WriterUpdate",
    "BannerCreate",
    "BannerOrderUpdate",
    "BannerReorderRequest",
    "BannerUpdate",
    "BlockType",
    "ContentBlock",
    "PageCreate",
    "PageUpdate",
    # Media
    "ImageGenerateRequest",
    "MediaAltUpdate",
    "MediaType",
    "MediaUsage",
    # Tenant / Theme
    "MemberRequest",
    "SiteSettings",
    "SiteSettingsUpdate",
    "TenantCreate",
    "TenantLogos",
    "TenantSettings",
    "TenantUpdate",
    "THEME_LAYOUTS",
    "Theme",
    "ThemeUpdate",
    "block_placements",
    "default_theme",
    # Schedule / Pattern
    "ArticlePatternCreate",
    "ArticlePatternUpdate",
    "GenerationRequest",
    "ImagePromptPatternCreate",
    "ImagePromptPatternUpdate",
    "ScheduledGenerationCreate",
    "ScheduledGenerationUpdate",
    # Editor helpers / Accounts
    "InlineImage",
    "InlineImagesRequest",
    "InlineImagesResponse",
    "RewriteRequest",
    "RewriteResponse",
    "SampleImageRequest",
    "SampleImageResponse",
    "StyleRewriteRequest",
    "StyleRewriteResponse",
    "TargetAudienceEntry",
    "TargetAudienceRequest",
    "TargetAudienceResponse",
    "TitleDuplicateCheck",
    "Account",
    "AccountCreate",
    "AccountUpdate",
]
