# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# Main entry point for the MediaCMS API. Configures the FastAPI application
# with middleware, exception handlers and routers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agents.llm import AgentError
from app.auth import routes as auth_routes
from app.config import settings
from app.exceptions import (
    MediaCMSException,
    backing_service_exception_handler,
    mediacms_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    accounts,
    articles,
    audiences,
    banners,
    categories,
    health,
    media,
    pages,
    patterns,
    public,
    schedules,
    site,
    stats,
    tags,
    tasks,
    tenants,
    translate,
    writers,
)
from lib.i18n import SUPPORTED_LANGS
from lib.search_client import SearchClient, SearchClientError
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
ADMIN_PREFIX = f"{API_PREFIX}/admin"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs the configuration the API starts with and creates missing
    search indices with their mappings.
    """
    logger.info(f"Starting MediaCMS API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    logger.info(f"Languages: {', '.join(SUPPORTED_LANGS)}; search: {settings.ELASTICSEARCH_URL}")

    if not SearchClient.prepare_indices():
        logger.warning("Search indices will be created on the first publish")

    yield

    logger.info("Shutting down MediaCMS API")


app = FastAPI(
    title="MediaCMS API",
    description="""
## Multi-tenant Localized Media CMS

Articles are written in Japanese and published in Japanese, English,
Chinese and Korean. Publishing translates every field with the LLM,
generates AI summaries and tables of contents and pushes the article to
the per-language search index.

### Tenancy

Every admin and public request selects a media site with the `X-Media-Id`
header. Resolve it from a host with `GET /api/v1/domain-to-media-id`.

### Surfaces

| Prefix | Use |
|--------|-----|
| `/api/v1/admin/*` | Authenticated admin (Supabase JWT) |
| `/api/v1/public/{lang}/*` | Public localized site |
| `/api/v1/cron/*` | External scheduler (`Bearer CRON_SECRET`) |
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Token verification and current user"},
        {"name": "Tenants", "description": "Media sites, members and domain lookup"},
        {"name": "Articles", "description": "Articles, publishing and editor AI helpers"},
        {"name": "Categories", "description": "Article categories"},
        {"name": "Tags", "description": "Article tags"},
        {"name": "Writers", "description": "Article authors"},
        {"name": "Blocks", "description": "Banner blocks placed by the layout"},
        {"name": "Pages", "description": "Static pages and content blocks"},
        {"name": "Media", "description": "Media library, uploads and AI images"},
        {"name": "Site", "description": "Site settings and theme"},
        {"name": "Translate", "description": "On-demand translation"},
        {"name": "Stats", "description": "Dashboard statistics"},
        {"name": "Generation", "description": "Prompt patterns, schedules and cron"},
        {"name": "Public", "description": "Public localized site API"},
        {"name": "Tasks", "description": "Track background task progress"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(MediaCMSException)
async def handle_mediacms_exception(request: Request, exc: MediaCMSException):
    """Handle custom MediaCMS exceptions."""
    return await mediacms_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle request body/query validation errors."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
@app.exception_handler(SearchClientError)
@app.exception_handler(AgentError)
async def handle_backing_service_error(request: Request, exc: Exception):
    """Handle database, search index and LLM failures."""
    logger.error(f"Backing service error on {request.url.path}: {exc}")
    return await backing_service_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Authentication and health
app.include_router(auth_routes.router, prefix=f"{API_PREFIX}/auth", tags=["Auth"])
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(tasks.router, prefix=f"{API_PREFIX}/tasks", tags=["Tasks"])

# Tenants
app.include_router(tenants.router, prefix=f"{ADMIN_PREFIX}/tenants", tags=["Tenants"])
app.include_router(tenants.domain_router, prefix=API_PREFIX, tags=["Tenants"])
app.include_router(accounts.router, prefix=f"{ADMIN_PREFIX}/accounts", tags=["Accounts"])

# Content admin
app.include_router(articles.router, prefix=f"{ADMIN_PREFIX}/articles", tags=["Articles"])
app.include_router(categories.router, prefix=f"{ADMIN_PREFIX}/categories", tags=["Categories"])
app.include_router(tags.router, prefix=f"{ADMIN_PREFIX}/tags", tags=["Tags"])
app.include_router(writers.router, prefix=f"{ADMIN_PREFIX}/writers", tags=["Writers"])
app.include_router(banners.router, prefix=f"{ADMIN_PREFIX}/blocks", tags=["Blocks"])
app.include_router(pages.router, prefix=f"{ADMIN_PREFIX}/pages", tags=["Pages"])
app.include_router(media.router, prefix=f"{ADMIN_PREFIX}/media", tags=["Media"])

# Site, theme, translation and stats
app.include_router(site.router, prefix=f"{ADMIN_PREFIX}/site", tags=["Site"])
app.include_router(site.theme_router, prefix=f"{ADMIN_PREFIX}/theme", tags=["Site"])
app.include_router(translate.router, prefix=f"{ADMIN_PREFIX}/translate", tags=["Translate"])
app.include_router(stats.router, prefix=f"{ADMIN_PREFIX}/stats", tags=["Stats"])

# AI generation
app.include_router(patterns.router, prefix=ADMIN_PREFIX, tags=["Generation"])
app.include_router(schedules.router, prefix=f"{ADMIN_PREFIX}/schedules", tags=["Generation"])
app.include_router(schedules.cron_router, prefix=f"{API_PREFIX}/cron", tags=["Generation"])
app.include_router(audiences.router, prefix=f"{ADMIN_PREFIX}/target-audience-history", tags=["Generation"])

# Public site
app.include_router(public.seo_router, prefix=f"{API_PREFIX}/public", tags=["Public"])
app.include_router(public.router, prefix=f"{API_PREFIX}/public/{{lang}}", tags=["Public"])


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "MediaCMS API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": f"{API_PREFIX}/health",
        "languages": list(SUPPORTED_LANGS),
    }
