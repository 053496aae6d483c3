"""
App factory — a FastAPI service wired for Cloud Logging
FastAPI + stdlib logging | one Logger per process, one RequestLogger per request
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sdl.api.middleware import RequestLoggingMiddleware
from sdl.services.logger import Logger


def create_app(logger: Logger | None = None) -> FastAPI:
    """
    Build the app around `logger`, or around one configured from the
    environment (SDL_LOGGING_LEVEL, SDL_SERVICE_NAME, SDL_VERSION).
    """
    if logger is None:
        logger = Logger.from_settings()

    service = logger.service_context.service

    app = FastAPI(
        title=service or "sdl",
        version=logger.service_context.version or "0.1.0",
        docs_url=None,
        redoc_url=None,
    )
    app.state.logger = logger
    app.add_middleware(RequestLoggingMiddleware, logger=logger)

    # The middleware has already logged the error; only the response is shaped here.
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": "An unexpected error occurred."},
        )

    @app.get("/health")
    async def health():
        return {"status": "ok", "service": service}

    return app
