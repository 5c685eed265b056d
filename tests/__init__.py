# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the media CMS API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_lib.py: Slugs, similarity, HTML, i18n, images and search records
# - test_agents.py: Translator, content writer and article generator parsing
# - test_services.py: Publish pipeline, tags, schedules, theme, tenants
# - test_public_service.py: Public read API
# - test_media_and_stats.py: Media library and dashboard statistics
# - test_api.py: HTTP routes, auth, tenancy headers and error mapping
#
# Run tests with: pytest
# =============================================================================
