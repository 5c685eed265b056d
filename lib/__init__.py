# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - search_client.py: Elasticsearch wrapper for the per-language article indexes
# - i18n.py: Supported languages and localized field resolution
# - html_utils.py: Headings, TOC, reading time and WordPress cleanup
# - similarity.py: Duplicate detection and tag name matching
# - images.py: WebP conversion and thumbnails
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.search_client import SearchClient, SearchClientError
from lib.i18n import SUPPORTED_LANGS, localize, validate_lang

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Search
    "SearchClient",
    "SearchClientError",
    # i18n
    "SUPPORTED_LANGS",
    "localize",
    "validate_lang",
]
