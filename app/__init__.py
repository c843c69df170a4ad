# =============================================================================
# app/ - Resource Portal HTTP Layer
# =============================================================================
# FastAPI application for the resource portal:
# - main.py: App instance, lifespan clients, error handlers
# - config.py: Settings from environment / .env
# - auth/: Token verification, identity resolution, admin gate, /me
# - routers/: Resource, board, admin and health endpoints
#
# Handlers only parse requests and shape responses. Access rules, listings,
# delivery and ingestion live in core/services.
# =============================================================================
