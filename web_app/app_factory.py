"""FastAPI application factory."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .api.routes import envelope
from .middleware.logging import LoggingMiddleware
from shortlinks.common.logging_config import get_logger
from shortlinks.errors import ResponseCode, UrlRecordError, http_status_for


def create_app(
    service_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: Service instance (may be set later by the lifespan)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Shortlinks",
        description="URL shortening record service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    logger = get_logger("web")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origin_list,
        allow_credentials="*" not in config.cors_origin_list,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(LoggingMiddleware)

    @app.exception_handler(UrlRecordError)
    async def url_record_error_handler(request: Request, exc: UrlRecordError):
        status_code = http_status_for(exc)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.code.value} {exc.message}")
        return envelope(status_code, exc.code, exc.detail)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        issues = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", "Invalid value"),
            }
            for error in exc.errors()
        ]
        return envelope(400, ResponseCode.INVALID_INPUT, issues)

    app.include_router(api_router, prefix="/api", tags=["API"])

    return app
