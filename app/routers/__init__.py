# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - resources.py: Resource listing and file URL delivery
# - boards.py: Board (category) listing
# - admin.py: Upload, replace, delete, display-title edit, member admin
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import resources
from . import boards
from . import admin

__all__ = [
    "health",
    "resources",
    "boards",
    "admin",
]
