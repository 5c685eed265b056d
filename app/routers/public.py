# =============================================================================
# app/routers/public.py - Public Localized Site API
# =============================================================================
# Read endpoints for the public site, mounted at /api/v1/public/{lang}.
# No authentication; the tenant comes from the X-Media-Id header and must
# be active. Fields fall back to Japanese when a translation is missing.
#
# seo_router serves sitemap and robots data at /api/v1/public.
# =============================================================================

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Path, Query

from app.dependencies import PublicTenantDep
from core.services.public_service import DEFAULT_PER_PAGE, PublicService
from core.services.seo_service import SeoService
from lib.i18n import validate_lang

router = APIRouter()
seo_router = APIRouter()


def get_lang(lang: Annotated[str, Path(description="ja | en | zh | ko")]) -> str:
    """
    Raises:
        UnsupportedLanguageError: 400 for unknown languages
    """
    return validate_lang(lang)


LangDep = Annotated[str, Depends(get_lang)]
PageQuery = Annotated[int, Query(ge=1, description="Page number")]
PerPageQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]


# =============================================================================
# Site
# =============================================================================

@router.get("/site")
async def get_site(lang: LangDep, tenant: PublicTenantDep):
    """Site name, description, logos, indexing flag and the localized theme."""
    return PublicService.site(tenant, lang)


# =============================================================================
# Articles
# =============================================================================

@router.get("/articles")
def list_articles(
    lang: LangDep,
    tenant: PublicTenantDep,
    category: Annotated[str | None, Query(description="Category slug")] = None,
    tag: Annotated[str | None, Query(description="Tag slug")] = None,
    sort: Annotated[Literal["latest", "popular"], Query()] = "latest",
    page: PageQuery = 1,
    per_page: PerPageQuery = DEFAULT_PER_PAGE,
):
    """Published articles, newest (or most viewed) first."""
    return PublicService.list_articles(tenant["id"], lang, category, tag, sort, page, per_page)


@router.get("/articles/{slug}")
def get_article(slug: str, lang: LangDep, tenant: PublicTenantDep):
    """
    Full article with table of contents, reading time, related articles and
    previous/next links.
    """
    return PublicService.get_article(tenant["id"], slug, lang)


@router.post("/articles/{slug}/view")
def increment_view(slug: str, lang: LangDep, tenant: PublicTenantDep):
    return {"view_count": PublicService.increment_view(tenant["id"], slug)}


# =============================================================================
# Taxonomy and writers
# =============================================================================

@router.get("/categories")
def list_categories(lang: LangDep, tenant: PublicTenantDep):
    return PublicService.list_categories(tenant["id"], lang)


@router.get("/categories/{slug}")
def get_category(slug: str, lang: LangDep, tenant: PublicTenantDep, page: PageQuery = 1):
    """Category with its published articles."""
    return PublicService.get_category(tenant["id"], slug, lang, page)


@router.get("/tags")
def list_tags(lang: LangDep, tenant: PublicTenantDep):
    return PublicService.list_tags(tenant["id"], lang)


@router.get("/tags/{slug}")
def get_tag(slug: str, lang: LangDep, tenant: PublicTenantDep, page: PageQuery = 1):
    return PublicService.get_tag(tenant["id"], slug, lang, page)


@router.get("/writers/{writer_id}")
def get_writer(writer_id: str, lang: LangDep, tenant: PublicTenantDep):
    """Writer profile with their published articles."""
    return PublicService.get_writer(tenant["id"], writer_id, lang)


# =============================================================================
# Banners, pages, search
# =============================================================================

@router.get("/banners")
def list_banners(lang: LangDep, tenant: PublicTenantDep):
    """Active banners in display order."""
    return PublicService.list_banners(tenant["id"], lang)


@router.get("/pages/{slug}")
def get_page(slug: str, lang: LangDep, tenant: PublicTenantDep):
    return PublicService.get_page(tenant["id"], slug, lang)


@router.get("/search")
def search(
    lang: LangDep,
    tenant: PublicTenantDep,
    q: Annotated[str, Query(description="Search query")] = "",
    category: Annotated[str | None, Query(description="Category slug")] = None,
    tag: Annotated[str | None, Query(description="Tag slug")] = None,
    page: PageQuery = 1,
    per_page: PerPageQuery = DEFAULT_PER_PAGE,
):
    """Full-text search over the language index."""
    return PublicService.search(tenant["id"], lang, q, category, tag, page, per_page)


# =============================================================================
# Sitemap and robots (language independent)
# =============================================================================

@seo_router.get("/sitemap")
def get_sitemap(tenant: PublicTenantDep):
    """
    Sitemap entries of the site: one per language for the home, article
    list, search, article, category and tag pages. Empty when the tenant
    does not allow indexing.
    """
    return SeoService.sitemap(tenant)


@seo_router.get("/robots")
async def get_robots(tenant: PublicTenantDep):
    """robots.txt rules; everything is disallowed when indexing is off."""
    return SeoService.robots(tenant)
