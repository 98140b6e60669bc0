from contextlib import AsyncExitStack

import httpx
import pytest

from controllers.normalizer import normalize_headers, preflight_response, relay_response
from controllers.target import TargetDescriptor
from tests.upstream import stream_response

TARGET = TargetDescriptor.from_url("https://a.com/media/clip.mp4")

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, HEAD, OPTIONS",
    "access-control-allow-headers": "Range, Content-Type",
    "access-control-expose-headers": "Content-Length, Content-Range, Accept-Ranges, Content-Disposition",
}


def test_only_allowlisted_upstream_headers_survive():
    upstream = httpx.Headers({
        "Content-Type": "video/mp4",
        "Content-Length": "100",
        "Content-Range": "bytes 0-99/1000",
        "ETag": "\"v1\"",
        "Last-Modified": "Sat, 01 Jan 2022 00:00:00 GMT",
        "Expires": "0",
        "Cache-Control": "max-age=60",
        "Set-Cookie": "tracking=1",
        "Server": "origin/1.0",
        "Content-Disposition": "inline; filename=\"x.bin\"",
    })
    headers = normalize_headers(upstream, TARGET)

    assert headers["content-type"] == "video/mp4"
    assert headers["content-length"] == "100"
    assert headers["content-range"] == "bytes 0-99/1000"
    assert headers["etag"] == "\"v1\""
    assert headers["cache-control"] == "max-age=60"
    assert "set-cookie" not in headers
    assert "server" not in headers
    assert headers["content-disposition"] == "attachment; filename=\"clip.mp4\"; filename*=UTF-8''clip.mp4"


def test_accept_ranges_defaults_to_bytes():
    assert normalize_headers(httpx.Headers({}), TARGET)["accept-ranges"] == "bytes"


def test_upstream_accept_ranges_is_kept():
    assert normalize_headers(httpx.Headers({"Accept-Ranges": "none"}), TARGET)["accept-ranges"] == "none"


def test_cors_headers_are_always_set():
    headers = normalize_headers(httpx.Headers({"Access-Control-Allow-Origin": "https://evil.example"}), TARGET)
    for name, value in CORS.items():
        assert headers[name] == value


def test_preflight_has_computed_headers_and_no_body():
    response = preflight_response(TARGET)
    assert response.status_code == 200
    assert response.body == b""
    assert response.headers["accept-ranges"] == "bytes"
    assert response.headers["content-disposition"].startswith("attachment; filename=\"clip.mp4\"")
    for name, value in CORS.items():
        assert response.headers[name] == value


@pytest.mark.anyio
async def test_relay_streams_raw_body_and_releases_resources():
    released = []

    async def release():
        released.append(True)

    resources = AsyncExitStack()
    resources.push_async_callback(release)
    upstream = stream_response(206, b"abcdef", {"Content-Range": "bytes 0-5/10"})

    response = relay_response(upstream, resources, TARGET, chunk_size=2)
    assert response.status_code == 206
    assert response.headers["content-range"] == "bytes 0-5/10"
    assert released == []

    body = b"".join([chunk async for chunk in response.body_iterator])
    assert body == b"abcdef"
    assert released == [True]
