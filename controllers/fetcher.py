import asyncio
import logging
from typing import Awaitable, Callable, Dict, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict

from controllers.errors import UpstreamUnreachable
from controllers.headers import REQUEST_HEADERS, copy_headers
from controllers.target import TargetDescriptor
from utils.settings import MAX_RETRIES, REQUEST_TIMEOUT, USER_AGENT

logger = logging.getLogger(__name__)

# Methods whose inbound body is never forwarded
BODYLESS_METHODS = {"GET", "HEAD"}

# Transport-level failures; an HTTP error status is a response, not one of these
RETRYABLE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, asyncio.TimeoutError)


class UpstreamRequest(BaseModel):
    """Everything needed to issue one upstream attempt."""

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: Dict[str, str]
    body: Optional[bytes] = None

    def build(self, client: httpx.AsyncClient) -> httpx.Request:
        # A new request per attempt: a sent body stream cannot be replayed
        return client.build_request(
            self.method,
            self.url,
            headers=dict(self.headers),
            content=self.body,
        )


def build_upstream_request(
    method: str,
    inbound_headers: Mapping[str, str],
    target: TargetDescriptor,
    body: Optional[bytes] = None,
) -> UpstreamRequest:
    headers = copy_headers(inbound_headers, REQUEST_HEADERS)
    headers["user-agent"] = USER_AGENT
    # Keep the client library from negotiating compression on its own
    headers.setdefault("accept-encoding", "identity")

    if method.upper() in BODYLESS_METHODS or not body:
        body = None

    return UpstreamRequest(method=method, url=target.url, headers=headers, body=body)


class UpstreamFetcher:
    """
    Sends an UpstreamRequest, retrying transport failures with exponential backoff.

    Attempts are strictly sequential. After attempt ``i`` (0-indexed) fails the
    fetcher sleeps ``2 ** i`` seconds, for at most ``max_retries`` retries.
    HTTP error statuses are returned to the caller, never retried.
    """

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.max_retries = max_retries
        self.timeout = timeout
        self.transport = transport
        self.sleep = sleep

    def create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self.transport,
        )

    async def fetch(self, client: httpx.AsyncClient, upstream_request: UpstreamRequest) -> httpx.Response:
        """Return the first response received; the caller owns (and must close) it."""
        last_error = None

        for attempt in range(self.max_retries + 1):
            try:
                request = upstream_request.build(client)
                return await asyncio.wait_for(client.send(request, stream=True), self.timeout)
            except RETRYABLE_ERRORS as e:
                last_error = e
                if attempt < self.max_retries:
                    delay = 2 ** attempt
                    logger.warning(
                        f"Attempt {attempt + 1} for {upstream_request.url} failed: "
                        f"{self._describe(e)}; retrying in {delay}s"
                    )
                    await self.sleep(delay)

        logger.error(f"Giving up on {upstream_request.url} after {self.max_retries + 1} attempts")
        raise UpstreamUnreachable(self._describe(last_error)) from last_error

    def _describe(self, error: Exception) -> str:
        if isinstance(error, asyncio.TimeoutError):
            return f"Upstream request timed out after {self.timeout:g}s"
        return str(error) or error.__class__.__name__
