# =============================================================================
# app/routers/boards.py - Board Endpoints
# =============================================================================
# Boards (categories) are static reference data; anyone may list them.
# =============================================================================

from fastapi import APIRouter

from app.dependencies import SupabaseDep
from core.models.resource import BoardListResponse, BoardSummary

router = APIRouter()


@router.get("/list", response_model=BoardListResponse)
async def list_boards(db: SupabaseDep):
    """List all boards, ordered by title."""
    boards = db.list_boards()
    return BoardListResponse(
        boards=[BoardSummary(slug=board.slug, title=board.title) for board in boards]
    )
