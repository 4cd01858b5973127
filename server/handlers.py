"""Transport-independent handlers behind the HTTP routes.

Each handler returns (http_status, body) so any front end can serve it.
"""

from typing import Any

from models.normalized_result import utc_timestamp
from orchestrator.dispatch_types import QueryOptions
from orchestrator.dispatcher import Dispatcher
from orchestrator.errors import InvalidArgument
from utils.logger import get_logger

logger = get_logger(__name__)


def _error(message: str) -> dict[str, Any]:
    return {"status": "error", "message": message}


def handle_query(
    dispatcher: Dispatcher, query_text: str | None, provider: str | None = None
) -> tuple[int, dict[str, Any]]:
    if not query_text:
        return 400, _error("Query parameter is required")

    try:
        result = dispatcher.query(query_text, QueryOptions(specific_provider=provider or None))
    except InvalidArgument as e:
        return 400, _error(str(e))
    except Exception as e:
        logger.error(f"Error in query handler: {e}", exc_info=True)
        return 500, _error(str(e) or "Failed to process query")

    return 200, {"status": "success", "data": result.to_dict()}


def handle_cache_clear(dispatcher: Dispatcher) -> tuple[int, dict[str, Any]]:
    dispatcher.clear_cache()
    return 200, {"status": "success", "message": "Cache cleared successfully"}


def handle_health() -> tuple[int, dict[str, Any]]:
    return 200, {"status": "success", "message": "API is running", "timestamp": utc_timestamp()}
