# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the portal's business logic:
# - models/: Pydantic schemas (viewer, records, API contracts)
# - services/: Visibility policy, listings, delivery, ingestion, admin
#
# Services take their Supabase wrapper and storage through the constructor
# and never reach for module-level clients. This keeps the logic testable
# with in-memory fakes.
# =============================================================================
