"""Query endpoint dispatching to the provider chain."""

import asyncio

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from orchestrator.dispatcher import Dispatcher
from server.dependencies import get_dispatcher
from server.handlers import handle_query
from server.schemas.responses import ErrorResponseDTO, QueryResponseDTO

router = APIRouter(prefix="/api", tags=["Query"])


@router.get(
    "/query",
    response_model=QueryResponseDTO,
    responses={400: {"model": ErrorResponseDTO}, 500: {"model": ErrorResponseDTO}},
)
async def query(
    q: str | None = Query(None, description="Query text"),
    provider: str | None = Query(None, description="Restrict to one provider by display name"),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    """Answer a query from the first provider that responds usefully."""
    # Retries sleep; keep them off the event loop.
    status_code, body = await asyncio.to_thread(handle_query, dispatcher, q, provider)
    return JSONResponse(status_code=status_code, content=body)
