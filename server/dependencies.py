"""FastAPI dependencies for dispatcher access."""

from config.config import Config
from utils.logger import get_logger

logger = get_logger(__name__)


def get_dispatcher():
    """Dependency to get the dispatcher instance (singleton pattern)."""
    from orchestrator.dispatcher import Dispatcher

    if not hasattr(get_dispatcher, "_instance"):
        config = Config()
        if not config.validate():
            raise RuntimeError("Invalid dispatch configuration")
        get_dispatcher._instance = Dispatcher.from_config(config)
        logger.info(f"Dispatcher initialized ({config.get_dispatch_info()})")
    return get_dispatcher._instance
