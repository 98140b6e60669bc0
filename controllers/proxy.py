import asyncio
import logging
from contextlib import AsyncExitStack

import httpx
from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from controllers.errors import ClientDisconnected, InternalError, MalformedEncoding, ProxyError, UpstreamError
from controllers.fetcher import BODYLESS_METHODS, UpstreamFetcher, UpstreamRequest, build_upstream_request
from controllers.normalizer import preflight_response, relay_response
from controllers.target import extract_target
from utils.settings import CHUNK_SIZE

logger = logging.getLogger(__name__)


def is_success(status_code: int) -> bool:
    return 200 <= status_code < 300 or status_code == 206


def get_encoded_target(request: Request) -> str:
    """The request path exactly as sent, minus its leading slash."""
    raw_path = request.scope.get("raw_path")
    if raw_path is not None:
        path = raw_path.decode("utf-8")
    else:
        path = request.scope["path"]
    return path[1:]


async def wait_for_disconnect(request: Request):
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def fetch_unless_disconnected(
    request: Request,
    fetcher: UpstreamFetcher,
    client: httpx.AsyncClient,
    upstream_request: UpstreamRequest,
):
    """
    Run the fetch (attempts and backoff sleeps) while watching the client.

    If the client disconnects first the fetch is cancelled and
    ClientDisconnected is raised. Only call this once the request body,
    if any, has been read: the watcher consumes the receive channel.
    """
    fetch_task = asyncio.ensure_future(fetcher.fetch(client, upstream_request))
    watcher = asyncio.ensure_future(wait_for_disconnect(request))
    try:
        done, _ = await asyncio.wait({fetch_task, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        watcher.cancel()
        if not fetch_task.done():
            fetch_task.cancel()

    if fetch_task in done:
        return fetch_task.result()

    await asyncio.gather(fetch_task, return_exceptions=True)
    logger.info(f"Client disconnected, abandoned fetch of {upstream_request.url}")
    raise ClientDisconnected()


def error_response(error: ProxyError) -> Response:
    if error.status_code >= 500:
        logger.error(error.render())
    return PlainTextResponse(error.render(), status_code=error.status_code)


async def fetch_and_return_proxy(request: Request, fetcher: UpstreamFetcher) -> Response:
    try:
        try:
            encoded = get_encoded_target(request)
        except UnicodeDecodeError:
            raise MalformedEncoding()

        target = extract_target(encoded)

        # CORS preflight never reaches the upstream
        if request.method == "OPTIONS":
            return preflight_response(target)

        body = None
        if request.method.upper() not in BODYLESS_METHODS:
            # Held in memory so every retry can resend it; only downloads stream end to end
            body = await request.body()
        upstream_request = build_upstream_request(request.method, request.headers, target, body)

        async with AsyncExitStack() as stack:
            client = await stack.enter_async_context(fetcher.create_client())
            upstream = await fetch_unless_disconnected(request, fetcher, client, upstream_request)
            stack.push_async_callback(upstream.aclose)

            if not is_success(upstream.status_code):
                raise UpstreamError(upstream.status_code, upstream.reason_phrase)

            logger.info(f"Relaying {upstream.status_code} from {target.url}")
            # The relay now owns the client and the upstream response
            return relay_response(upstream, stack.pop_all(), target, CHUNK_SIZE)
    except ProxyError as e:
        return error_response(e)
    except Exception as e:
        logger.exception(f"Unexpected failure proxying {request.url.path}")
        return error_response(InternalError(str(e) or e.__class__.__name__))
