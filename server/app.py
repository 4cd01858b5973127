"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from server.middleware import RequestIDMiddleware
from server.routes import cache, health, query
from utils.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup/shutdown logic."""
    logger.info("Query relay starting up")
    yield
    from server.dependencies import get_dispatcher

    instance = getattr(get_dispatcher, "_instance", None)
    if instance is not None:
        instance.fetcher.close()
    logger.info("Query relay shutting down")


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
        extra={"extra_fields": {"request_id": getattr(request.state, "request_id", "unknown")}},
    )
    return JSONResponse(
        status_code=500, content={"status": "error", "message": "Internal server error"}
    )


def create_app() -> FastAPI:
    """Factory function to create FastAPI application."""
    app = FastAPI(
        title="QueryRelay API",
        description="Resilient query dispatch across interchangeable upstream providers",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router)
    app.include_router(query.router)
    app.include_router(cache.router)

    return app
