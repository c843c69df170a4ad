# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - files.py: Kind inference, filename sanitising, storage keys, dates
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.files import (
    attachment_filename,
    build_storage_key,
    infer_kind,
    normalize_published_at,
    safe_key_name,
    supported_extensions,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Files
    "attachment_filename",
    "build_storage_key",
    "infer_kind",
    "normalize_published_at",
    "safe_key_name",
    "supported_extensions",
]
