from typing import Dict, Iterable, Mapping

# Client headers forwarded to the upstream server
REQUEST_HEADERS = (
    "range",
    "user-agent",
    "accept",
    "accept-encoding",
    "cache-control",
    "if-modified-since",
    "if-none-match",
)

# Upstream headers forwarded to the client
RESPONSE_HEADERS = (
    "content-type",
    "content-length",
    "content-range",
    "content-encoding",
    "accept-ranges",
    "last-modified",
    "etag",
    "cache-control",
    "expires",
)


def copy_headers(source: Mapping[str, str], names: Iterable[str]) -> Dict[str, str]:
    """
    Copy the named headers from a case-insensitive header mapping.

    Missing and empty headers are skipped. Keys of the result are lowercase.
    """
    copied = {}
    for name in names:
        value = source.get(name)
        if value:
            copied[name] = value
    return copied
