import logging
import os
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


# Upstream fetch policy
MAX_RETRIES = _get_int("PROXY_MAX_RETRIES", 3)
REQUEST_TIMEOUT = _get_float("PROXY_TIMEOUT_SECONDS", 30.0)
USER_AGENT = os.getenv("PROXY_USER_AGENT", "Cloudflare-Download-Link-Stabilizer/1.0")
CHUNK_SIZE = _get_int("PROXY_CHUNK_SIZE", 64 * 1024)

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _get_int("PORT", 8000)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
