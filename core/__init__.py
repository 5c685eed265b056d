# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic of the CMS:
# - models/: Pydantic schemas for data validation
# - services/: Tenant-scoped services over Supabase, Elasticsearch and storage
#
# Services raise app.exceptions errors but never import routers or Celery
# at module level, so they stay testable with a mocked SupabaseClient.
# =============================================================================
