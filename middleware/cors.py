from typing import Dict
import os
from dotenv import load_dotenv

load_dotenv()

ALLOW_METHODS = "GET, HEAD, OPTIONS"
ALLOW_HEADERS = "Range, Content-Type"
EXPOSE_HEADERS = "Content-Length, Content-Range, Accept-Ranges, Content-Disposition"


def get_allowed_origin() -> str:
    """
    Get the allowed origin from environment variables.
    Falls back to any origin if not set.
    """
    return os.getenv("ALLOWED_ORIGIN", "*").strip() or "*"


def get_cors_headers() -> Dict[str, str]:
    return {
        "access-control-allow-origin": get_allowed_origin(),
        "access-control-allow-methods": ALLOW_METHODS,
        "access-control-allow-headers": ALLOW_HEADERS,
        "access-control-expose-headers": EXPOSE_HEADERS,
    }


def setup_cors(app):
    """
    Make every response readable cross-origin, including plain-text errors.
    Proxied responses already carry the full CORS header set.
    """
    @app.middleware("http")
    async def add_allow_origin(request, call_next):
        response = await call_next(request)
        if "access-control-allow-origin" not in response.headers:
            response.headers["access-control-allow-origin"] = get_allowed_origin()
        return response
