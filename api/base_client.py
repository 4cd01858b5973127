from abc import ABC, abstractmethod
from typing import Any


class BaseFetchClient(ABC):
    """
    Abstract base class for the HTTP fetch capability used by the dispatcher.
    Any client that can GET a URL and return parsed JSON within a deadline
    can be substituted.
    """

    @abstractmethod
    def fetch_json(self, url: str, timeout_ms: int) -> Any:
        """
        Perform a GET request and return the decoded JSON body.

        Args:
            url: Fully built request URL
            timeout_ms: Deadline from request start until the body is fully read

        Returns:
            The parsed JSON value

        Raises:
            ProviderFetchError: On transport failure, timeout, non-2xx status,
                non-JSON content type or undecodable body
        """
        pass

    def close(self) -> None:
        """Release pooled connections. Default implementation does nothing."""
        return None
