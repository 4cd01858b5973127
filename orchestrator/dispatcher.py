"""
Dispatcher - sequential multi-provider query with retry, fallback and caching.

Providers are tried strictly in registry order. Each provider gets
retry_count + 1 fetch attempts with exponential backoff between them; the
first recognized response wins, is cached, and ends the call.
"""

import time
from typing import Any, Callable

from api.base_client import BaseFetchClient
from models.normalized_result import NormalizedResult
from orchestrator.dispatch_types import (
    AttemptError,
    AttemptOutcome,
    NextAction,
    ProviderDescriptor,
    QueryOptions,
)
from orchestrator.errors import AllProvidersFailed, InvalidArgument, NoUsableContent
from orchestrator.fallback_manager import FallbackManager
from orchestrator.provider_registry import ProviderRegistry, build_request_url
from orchestrator.response_normalizer import ResponseNormalizer
from utils.logger import get_logger
from utils.ttl_cache import InMemoryTTLCache

logger = get_logger(__name__)

DEFAULT_TIMEOUT_MS = 10000
DEFAULT_RETRY_COUNT = 2
DEFAULT_CACHE_TTL_S = 3600.0


class Dispatcher:
    """
    Fans a query out over an ordered provider registry.

    Example usage:
        dispatcher = Dispatcher(ProviderRegistry.default(), RequestsFetchClient(), cache_enabled=True)
        result = dispatcher.query("What is Python?")
        print(f"{result.metadata.source}: {result.content}")
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        fetcher: BaseFetchClient,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        retry_count: int = DEFAULT_RETRY_COUNT,
        cache_enabled: bool = False,
        cache_ttl_s: float | None = None,
        cache: InMemoryTTLCache | None = None,
        fallback_manager: FallbackManager | None = None,
        normalizer: ResponseNormalizer | None = None,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        """
        Initialize the dispatcher.

        Args:
            registry: Ordered providers to try
            fetcher: HTTP fetch capability
            timeout_ms: Per-attempt deadline
            retry_count: Default retries per provider (attempts = retries + 1)
            cache_enabled: Serve and populate the result cache
            cache_ttl_s: Lifetime of cache entries (defaults to the cache's own TTL)
            cache: Shared cache instance (a private one is created otherwise)
            fallback_manager: Retry/advance policy
            normalizer: Response shape recognizer
            sleep: Backoff sleeper, injectable for tests
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")
        if retry_count < 0:
            raise ValueError("retry_count must be zero or more")

        self.registry = registry
        self.fetcher = fetcher
        self.timeout_ms = timeout_ms
        self.retry_count = retry_count
        self.cache_enabled = cache_enabled
        if cache is None:
            cache = InMemoryTTLCache(
                ttl_seconds=cache_ttl_s if cache_ttl_s is not None else DEFAULT_CACHE_TTL_S
            )
        self.cache = cache
        self.cache_ttl_s = cache_ttl_s if cache_ttl_s is not None else cache.ttl_seconds
        self.fallback_manager = fallback_manager or FallbackManager()
        self.normalizer = normalizer or ResponseNormalizer()
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        config,
        fetcher: BaseFetchClient | None = None,
        registry: ProviderRegistry | None = None,
    ) -> "Dispatcher":
        """Build a dispatcher from a Config instance."""
        if fetcher is None:
            from api.http_client import RequestsFetchClient

            fetcher = RequestsFetchClient()
        if registry is None:
            registry = ProviderRegistry.from_yaml(config.PROVIDER_REGISTRY_PATH)

        cache = InMemoryTTLCache(
            ttl_seconds=config.CACHE_TTL_SECONDS, max_entries=config.CACHE_MAX_ENTRIES
        )
        return cls(
            registry,
            fetcher,
            timeout_ms=config.TIMEOUT_MS,
            retry_count=config.RETRY_COUNT,
            cache_enabled=config.CACHE_ENABLED,
            cache=cache,
        )

    @staticmethod
    def cache_key(text: str, specific_provider: str | None) -> str:
        return f"{text}:{specific_provider or 'all'}"

    def query(self, text: str, options: QueryOptions | None = None) -> NormalizedResult:
        """
        Return the first recognized answer from the providers.

        Args:
            text: Non-empty query text
            options: Per-call retry override and provider filter

        Returns:
            NormalizedResult tagged with the answering provider

        Raises:
            InvalidArgument: Empty or non-string text, or a negative retry override
            AllProvidersFailed: No provider produced usable content
        """
        if not isinstance(text, str) or not text:
            raise InvalidArgument("Query text must be a non-empty string")

        options = options or QueryOptions()
        effective_retry = self.retry_count if options.retry_count is None else options.retry_count
        if not isinstance(effective_retry, int) or effective_retry < 0:
            raise InvalidArgument("retry_count must be a non-negative integer")

        cache_key = self.cache_key(text, options.specific_provider)
        if self.cache_enabled:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for '{text[:50]}' ({cached.metadata.source})")
                return cached

        candidates = self._candidates(options.specific_provider)
        errors: list[AttemptError] = []

        provider_index = 0
        failed_attempts = 0
        while provider_index < len(candidates):
            provider = candidates[provider_index]
            outcome, result, message = self._attempt(provider, text)

            if outcome != AttemptOutcome.SUCCESS:
                errors.append(
                    AttemptError(
                        provider_name=provider.display_name,
                        attempt_number=failed_attempts + 1,
                        message=message,
                    )
                )
            if outcome == AttemptOutcome.FETCH_FAILED:
                failed_attempts += 1

            decision = self.fallback_manager.decide(
                outcome=outcome,
                failed_attempts=failed_attempts,
                retry_budget=effective_retry,
                remaining_providers=len(candidates) - provider_index - 1,
            )

            if decision.action == NextAction.SUCCEED:
                if self.cache_enabled:
                    self.cache.set(cache_key, result, self.cache_ttl_s)
                logger.info(
                    f"Query answered by {provider.display_name}",
                    extra={
                        "extra_fields": {
                            "provider": provider.display_name,
                            "attempt_errors": len(errors),
                        }
                    },
                )
                return result

            if decision.action == NextAction.RETRY_SAME_PROVIDER:
                logger.info(
                    f"Retrying {provider.display_name} in {decision.delay_s:g}s "
                    f"(attempt {failed_attempts + 1} of {effective_retry + 1})"
                )
                self._sleep(decision.delay_s)
                continue

            if outcome == AttemptOutcome.FETCH_FAILED:
                logger.warning(
                    f"Failed {provider.display_name} after {failed_attempts} attempts: {message}"
                )
            else:
                logger.warning(f"Skipping {provider.display_name}: {message}")

            provider_index += 1
            failed_attempts = 0

        failure = AllProvidersFailed(errors)
        logger.error(
            "All providers failed",
            extra={
                "extra_fields": {
                    "providers_tried": len(candidates),
                    "attempt_errors": [str(e) for e in errors],
                }
            },
        )
        raise failure

    def clear_cache(self) -> None:
        self.cache.clear()
        logger.info("Result cache cleared")

    def _candidates(self, specific_provider: str | None) -> tuple[ProviderDescriptor, ...]:
        if not specific_provider:
            return self.registry.list()

        candidates = self.registry.filter(specific_provider)
        if not candidates:
            logger.warning(
                f"Unknown provider '{specific_provider}'",
                extra={"extra_fields": {"known_providers": self.registry.names()}},
            )
        return candidates

    def _attempt(
        self, provider: ProviderDescriptor, text: str
    ) -> tuple[AttemptOutcome, NormalizedResult | None, str]:
        url = build_request_url(provider, text)
        try:
            body = self.fetcher.fetch_json(url, self.timeout_ms)
        except Exception as e:
            logger.info(
                f"Fetch from {provider.display_name} failed: {e}",
                extra={
                    "extra_fields": {
                        "provider": provider.display_name,
                        "error_code": getattr(e, "code", type(e).__name__),
                    }
                },
            )
            return AttemptOutcome.FETCH_FAILED, None, str(e)

        try:
            result = self.normalizer.normalize(body, provider.display_name)
        except NoUsableContent as e:
            return AttemptOutcome.NO_USABLE_CONTENT, None, str(e)

        return AttemptOutcome.SUCCESS, result, ""
