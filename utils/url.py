import re
from urllib.parse import quote, unquote

# A "%" that does not start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

# Characters encodeURIComponent leaves alone besides letters, digits and "-_.~"
_COMPONENT_SAFE = "!*'()"


def percent_decode(value: str) -> str:
    """
    Decode percent escapes the way a browser's decodeURIComponent does.

    Raises ValueError for a stray "%" or for escapes that are not valid UTF-8.
    "+" is kept as is.
    """
    match = _BAD_ESCAPE.search(value)
    if match:
        raise ValueError(f"malformed percent escape at position {match.start()}")
    return unquote(value, encoding="utf-8", errors="strict")


def percent_encode_component(value: str) -> str:
    """Percent-encode a string as a single URI component (RFC 3986 unreserved kept)."""
    return quote(value, safe=_COMPONENT_SAFE)
