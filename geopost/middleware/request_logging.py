from fastapi import Request
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("geopost")

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # Get request details
        path = request.url.path
        query_string = request.url.query
        method = request.method

        logger.info(f"Request: {method} {path} {query_string}")

        response = await call_next(request)

        process_time = time.time() - start_time

        # Flag auth failures separately so they stand out in the logs
        if response.status_code in (401, 403):
            logger.warning(f"Denied: {response.status_code} on {method} {path}")

        logger.info(f"Response: {response.status_code} in {process_time:.4f}s")

        return response
