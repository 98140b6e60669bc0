import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from handlers.proxy import router as proxy_router
from middleware.cors import setup_cors
from middleware.request_logging import setup_request_logging
from utils.settings import HOST, LOG_LEVEL, MAX_RETRIES, PORT, REQUEST_TIMEOUT

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

APP_NAME = "download-proxy"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{APP_NAME} starting (retries={MAX_RETRIES}, timeout={REQUEST_TIMEOUT:g}s)")
    try:
        yield
    finally:
        logger.info(f"{APP_NAME} shutting down")


# Every path except "/" is a proxied target, so the generated docs routes are disabled
app = FastAPI(
    title="Download Link Stabilizer",
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

setup_cors(app)
setup_request_logging(app)

app.include_router(proxy_router)


def run():
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
