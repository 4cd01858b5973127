import json
import time
from typing import Any, Callable

import requests

from orchestrator.errors import ProviderFetchError
from utils.logger import get_logger

from .base_client import BaseFetchClient

logger = get_logger(__name__)

_CHUNK_SIZE = 8192
_EXCERPT_CHARS = 100


class RequestsFetchClient(BaseFetchClient):
    """
    Fetch client backed by a pooled requests.Session.

    Connect and each socket read are bounded by the timeout, and the total
    deadline is enforced once headers arrive and while the body streams, so
    an upstream that answers late or trickles bytes is cut off and the
    connection is closed.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        user_agent: str = "query-relay/1.0",
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the fetch client.

        Args:
            session: Optional pre-configured session (a new one is created otherwise)
            user_agent: User-Agent header for sessions created here
            clock: Monotonic time source used for the body deadline
        """
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = user_agent
        self.session = session
        self.session.headers.setdefault("Accept", "application/json")
        self._clock = clock

    def fetch_json(self, url: str, timeout_ms: int) -> Any:
        timeout_s = timeout_ms / 1000.0
        deadline = self._clock() + timeout_s

        try:
            response = self.session.get(url, timeout=timeout_s, stream=True)
        except requests.exceptions.Timeout as e:
            raise ProviderFetchError(
                f"Request timed out after {timeout_ms}ms", code="timeout", details={"url": url}
            ) from e
        except requests.exceptions.RequestException as e:
            raise ProviderFetchError(str(e), code="transport", details={"url": url}) from e

        try:
            body = self._read_body(response, deadline, timeout_ms)
        finally:
            response.close()

        content_type = response.headers.get("content-type")
        if not content_type or "application/json" not in content_type:
            text = body.decode(response.encoding or "utf-8", errors="replace")
            raise ProviderFetchError(
                f"Invalid content-type. Received: {content_type or 'unknown'}. "
                f"Response: {text[:_EXCERPT_CHARS]}",
                code="content_type",
                status_code=response.status_code,
                details={"excerpt": text[:_EXCERPT_CHARS]},
            )

        if not response.ok:
            try:
                payload = json.loads(body)
            except ValueError:
                payload = {}
            raise ProviderFetchError(
                f"HTTP error! status: {response.status_code}",
                code="http_status",
                status_code=response.status_code,
                details={"payload": payload},
            )

        try:
            payload = json.loads(body)
        except ValueError as e:
            raise ProviderFetchError(
                f"Response body is not valid JSON: {e}",
                code="invalid_json",
                status_code=response.status_code,
            ) from e
        logger.debug(f"Fetched {url} ({response.status_code}, {len(body)} bytes)")
        return payload

    def close(self) -> None:
        self.session.close()

    def _read_body(self, response: requests.Response, deadline: float, timeout_ms: int) -> bytes:
        chunks: list[bytes] = []
        # Connect and header reads are bounded separately by requests, so the
        # total deadline is checked once headers arrive and after every chunk.
        self._check_deadline(deadline, timeout_ms)
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                self._check_deadline(deadline, timeout_ms)
                chunks.append(chunk)
        except requests.exceptions.Timeout as e:
            raise ProviderFetchError(f"Request timed out after {timeout_ms}ms", code="timeout") from e
        except requests.exceptions.RequestException as e:
            raise ProviderFetchError(str(e), code="transport") from e
        return b"".join(chunks)

    def _check_deadline(self, deadline: float, timeout_ms: int) -> None:
        if self._clock() > deadline:
            raise ProviderFetchError(f"Request timed out after {timeout_ms}ms", code="timeout")
