import asyncio
import logging
from contextlib import AsyncExitStack
from typing import AsyncIterator, Dict, Mapping, Optional

import httpx
from fastapi import Response
from fastapi.responses import StreamingResponse

from controllers.headers import RESPONSE_HEADERS, copy_headers
from controllers.target import TargetDescriptor
from middleware.cors import get_cors_headers
from utils.filename import build_content_disposition, extract_filename

logger = logging.getLogger(__name__)


def normalize_headers(upstream_headers: Optional[Mapping[str, str]], target: TargetDescriptor) -> Dict[str, str]:
    """Headers sent to the client: the upstream allowlist plus range, filename and CORS headers."""
    headers = copy_headers(upstream_headers, RESPONSE_HEADERS) if upstream_headers is not None else {}

    # Download managers only split a file when they see this
    headers.setdefault("accept-ranges", "bytes")

    headers["content-disposition"] = build_content_disposition(extract_filename(target.url))
    headers.update(get_cors_headers())
    return headers


def preflight_response(target: TargetDescriptor) -> Response:
    return Response(status_code=200, headers=normalize_headers(None, target))


async def _relay(upstream: httpx.Response, resources: AsyncExitStack, chunk_size: int) -> AsyncIterator[bytes]:
    try:
        # Raw bytes: the body reaches the client exactly as the upstream encoded it
        async for chunk in upstream.aiter_raw(chunk_size):
            yield chunk
    except httpx.HTTPError as e:
        logger.warning(f"Upstream stream for {upstream.request.url} broke off: {e}")
        raise
    finally:
        # Shielded so a client disconnect cannot interrupt the cleanup
        await asyncio.shield(resources.aclose())


def relay_response(
    upstream: httpx.Response,
    resources: AsyncExitStack,
    target: TargetDescriptor,
    chunk_size: int,
) -> StreamingResponse:
    """
    Stream the upstream body to the client under normalized headers.

    ``resources`` holds the upstream response and its client; it is closed
    when the relay finishes, fails or is cancelled.
    """
    return StreamingResponse(
        _relay(upstream, resources, chunk_size),
        status_code=upstream.status_code,
        headers=normalize_headers(upstream.headers, target),
    )
