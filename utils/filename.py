import logging
import re
import time
from typing import Callable, Optional
from urllib.parse import parse_qs, urlsplit

from utils.url import percent_decode, percent_encode_component

logger = logging.getLogger(__name__)

# Query parameters that commonly carry the real file name, highest priority first
FILENAME_QUERY_PARAMS = ("filename", "file", "name", "download")

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_UNSAFE_HOST_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
# Anything that cannot sit inside the quoted legacy filename parameter
_UNSAFE_LEGACY_CHARS = re.compile(r'[^\x20-\x7e]|["\\]')


def _now_ms() -> int:
    return int(time.time() * 1000)


def _has_extension(name: Optional[str]) -> bool:
    return bool(name) and "." in name


def extract_filename(url: str, now_ms: Optional[Callable[[], int]] = None) -> str:
    """
    Derive a download filename for the given target URL.

    Tries the last path segment first, then the well-known filename query
    parameters. The candidate is sanitized and percent-decoded. When nothing
    usable is found a name is generated from the hostname and the current
    time in milliseconds. Never raises.
    """
    clock = now_ms or _now_ms
    try:
        parts = urlsplit(url)
        segments = [segment for segment in parts.path.split("/") if segment]
        filename = segments[-1] if segments else None

        if not _has_extension(filename):
            params = parse_qs(parts.query)
            for param in FILENAME_QUERY_PARAMS:
                values = params.get(param)
                if values and "." in values[0]:
                    filename = values[0]
                    break

        if filename:
            filename = _UNSAFE_CHARS.sub("_", filename)
            filename = percent_decode(filename)

        if not _has_extension(filename):
            hostname = _UNSAFE_HOST_CHARS.sub("_", parts.hostname or "")
            filename = f"download_{hostname}_{clock()}"

        return filename
    except ValueError as e:
        logger.error(f"Error extracting filename from {url!r}: {e}")
        return f"download_{clock()}"


def build_content_disposition(filename: str) -> str:
    """Content-Disposition value with both the legacy and the RFC 5987 filename."""
    legacy = _UNSAFE_LEGACY_CHARS.sub("_", filename)
    return f"attachment; filename=\"{legacy}\"; filename*=UTF-8''{percent_encode_component(filename)}"
