from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from controllers.fetcher import UpstreamFetcher
from controllers.proxy import fetch_and_return_proxy
from utils.interface import get_interface

router = APIRouter()


def get_fetcher(request: Request) -> UpstreamFetcher:
    """The fetcher stored on ``app.state`` (tests put one there), else a default one."""
    fetcher = getattr(request.app.state, "fetcher", None)
    return fetcher or UpstreamFetcher()


class ProxyEndpoint:
    """
    Raw ASGI endpoint, so every HTTP method reaches it (a function route
    would be limited to a fixed method list).

    Exactly "/" serves the link generator page; any other path is proxied.
    """

    async def __call__(self, scope, receive, send):
        request = Request(scope, receive, send)
        if scope["path"] == "/":
            response = HTMLResponse(get_interface())
        else:
            response = await fetch_and_return_proxy(request, get_fetcher(request))
        await response(scope, receive, send)


router.add_route("/{target:path}", ProxyEndpoint(), include_in_schema=False)
