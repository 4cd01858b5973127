"""Health check endpoint."""

from fastapi import APIRouter

from server.handlers import handle_health
from server.schemas.responses import HealthResponseDTO

router = APIRouter(prefix="/api", tags=["Health"])


@router.get("/health", response_model=HealthResponseDTO)
async def health_check():
    """Health check endpoint."""
    _, body = handle_health()
    return HealthResponseDTO(**body)
