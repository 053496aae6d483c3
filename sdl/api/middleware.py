"""
Request Logging Middleware
--------------------------
Derives a RequestLogger for every inbound request once its outcome is known.

  - response sent   → info_json_payload with the handler latency
  - handler raised  → error() with status 500, then the exception continues
                      to the app's error handler untouched
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from sdl.models.schemas import HTTPRequestFields
from sdl.services.logger import Logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger: Logger):
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        t_start = time.monotonic()

        try:
            response = await call_next(request)
        except Exception as exc:
            request_logger = self.logger.new_request_logger(
                HTTPRequestFields(request=request, status=500)
            )
            request_logger.error(exc)
            raise

        latency = time.monotonic() - t_start
        request_logger = self.logger.new_request_logger(
            HTTPRequestFields(request=request, status=response.status_code)
        )
        request_logger.info_json_payload({"latency": f"{latency:.6f}s"})
        return response
