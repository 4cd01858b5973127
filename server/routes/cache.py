"""Cache management endpoint."""

from fastapi import APIRouter, Depends

from orchestrator.dispatcher import Dispatcher
from server.dependencies import get_dispatcher
from server.handlers import handle_cache_clear
from server.schemas.responses import CacheClearResponseDTO

router = APIRouter(prefix="/api", tags=["Cache"])


@router.delete("/cache", response_model=CacheClearResponseDTO)
async def clear_cache(dispatcher: Dispatcher = Depends(get_dispatcher)):
    """Drop every cached result."""
    _, body = handle_cache_clear(dispatcher)
    return CacheClearResponseDTO(**body)
