from urllib.parse import urlsplit
from pydantic import BaseModel, ConfigDict

from controllers.errors import InternalError, MalformedEncoding, MissingTarget, UnsupportedScheme
from utils.url import percent_decode

ALLOWED_PREFIXES = ("http://", "https://")


class TargetDescriptor(BaseModel):
    """The absolute URL a request is forwarded to."""

    model_config = ConfigDict(frozen=True)

    url: str
    scheme: str
    host: str
    path: str
    query: str

    @classmethod
    def from_url(cls, url: str) -> "TargetDescriptor":
        parts = urlsplit(url)
        return cls(
            url=url,
            scheme=parts.scheme,
            host=parts.netloc,
            path=parts.path,
            query=parts.query,
        )


def extract_target(encoded: str) -> TargetDescriptor:
    """
    Turn the request path (without its leading slash) into a TargetDescriptor.

    No DNS lookup or address filtering happens here: any http(s) URL is accepted.
    """
    if not encoded:
        raise MissingTarget()

    try:
        decoded = percent_decode(encoded)
    except ValueError:
        raise MalformedEncoding()

    if not decoded.startswith(ALLOWED_PREFIXES):
        raise UnsupportedScheme()

    try:
        return TargetDescriptor.from_url(decoded)
    except ValueError as e:
        # e.g. an unbalanced IPv6 bracket in the host
        raise InternalError(f"Invalid URL: {e}")
