# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================
# ScheduleService imports the article generator lazily, so importing this
# package never pulls in agents.article_generator.
# =============================================================================

from .storage_service import StorageService
from .publish_service import PublishService
from .article_service import ArticleService
from .category_service import CategoryService
from .tag_service import TagService
from .writer_service import WriterService
from .banner_service import BannerService
from .page_service import PageService
from .media_service import MediaService
from .tenant_service import TenantService
from .theme_service import ThemeService
from .stats_service import StatsService
from .schedule_service import ScheduleService
from .pattern_service import PatternService
from .public_service import PublicService
from .seo_service import SeoService
from .editorial_service import EditorialService
from .account_service import AccountService

__all__ = [
    "StorageService",
    "PublishService",
    "ArticleService",
    "CategoryService",
    "TagService",
    "WriterService",
    "BannerService",
    "PageService",
    "MediaService",
    "TenantService",
    "ThemeService",
    "StatsService",
    "ScheduleService",
    "PatternService",
    "PublicService",
    "SeoService",
    "EditorialService",
    "AccountService",
]
