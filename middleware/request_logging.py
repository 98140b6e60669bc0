import logging

logger = logging.getLogger("download_proxy.access")


def setup_request_logging(app):
    @app.middleware("http")
    async def log_requests(request, call_next):
        logger.info(f"Received request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.info(f"Response status code: {response.status_code} for {request.method} {request.url.path}")
        return response
