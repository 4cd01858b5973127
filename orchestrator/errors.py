"""Exception hierarchy for query dispatch."""

from typing import Any

from orchestrator.dispatch_types import AttemptError


class DispatchError(Exception):
    """Base class for every error raised by the dispatch layer."""


class InvalidArgument(DispatchError, ValueError):
    """Caller input rejected before any cache lookup or network activity."""


class ProviderFetchError(DispatchError):
    """
    A single fetch attempt failed.

    Codes: "timeout", "transport", "http_status", "content_type", "invalid_json".
    """

    def __init__(
        self,
        message: str,
        code: str = "transport",
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}


class NoUsableContent(DispatchError):
    """The provider answered but none of the recognized fields carried content."""


class AllProvidersFailed(DispatchError):
    """Every candidate provider was exhausted without a usable result."""

    def __init__(self, errors: list[AttemptError] | tuple[AttemptError, ...]):
        self.errors = tuple(errors)
        lines = "\n".join(str(e) for e in self.errors)
        super().__init__(f"All API attempts failed. Errors:\n{lines}")
