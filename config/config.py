import os
from pathlib import Path

from dotenv import load_dotenv

from utils.logger import get_logger

logger = get_logger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


class Config:
    """Configuration management for the dispatch service."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        env_path = Path(__file__).parent.parent / ".env"
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Server
        self.HOST = os.getenv("HOST", "127.0.0.1")
        self.PORT = int(os.getenv("PORT", "3000"))

        # Dispatch
        self.TIMEOUT_MS = int(os.getenv("DISPATCH_TIMEOUT_MS", "15000"))
        self.RETRY_COUNT = int(os.getenv("DISPATCH_RETRY_COUNT", "3"))

        # Cache
        self.CACHE_ENABLED = _env_bool("DISPATCH_CACHE_ENABLED", "true")
        self.CACHE_TTL_SECONDS = float(os.getenv("DISPATCH_CACHE_TTL_SECONDS", "3600"))
        self.CACHE_MAX_ENTRIES = _env_optional_int("DISPATCH_CACHE_MAX_ENTRIES")

        # Registry (None -> bundled config/provider_registry.yaml)
        self.PROVIDER_REGISTRY_PATH = os.getenv("PROVIDER_REGISTRY_PATH") or None

    def validate(self) -> bool:
        """
        Validate that the configured values are usable.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        problems = []
        if self.TIMEOUT_MS <= 0:
            problems.append("DISPATCH_TIMEOUT_MS must be positive")
        if self.RETRY_COUNT < 0:
            problems.append("DISPATCH_RETRY_COUNT must be zero or more")
        if self.CACHE_TTL_SECONDS <= 0:
            problems.append("DISPATCH_CACHE_TTL_SECONDS must be positive")
        if self.CACHE_MAX_ENTRIES is not None and self.CACHE_MAX_ENTRIES < 1:
            problems.append("DISPATCH_CACHE_MAX_ENTRIES must be at least 1 when set")
        if self.PROVIDER_REGISTRY_PATH and not Path(self.PROVIDER_REGISTRY_PATH).exists():
            problems.append(f"PROVIDER_REGISTRY_PATH not found: {self.PROVIDER_REGISTRY_PATH}")

        for problem in problems:
            logger.error(f"Invalid configuration: {problem}")
        return not problems

    def get_dispatch_info(self) -> str:
        cache = f"cache {self.CACHE_TTL_SECONDS:g}s" if self.CACHE_ENABLED else "cache off"
        return f"timeout {self.TIMEOUT_MS}ms, {self.RETRY_COUNT} retries, {cache}"
