"""
FastAPI Application.

Main entry point for the TuneSearch proxy API.
"""

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tunesearch.config import get_settings
from tunesearch.utils.logging import setup_logging, get_logger
from tunesearch.utils.exceptions import TuneSearchError, UnknownError
from tunesearch.api.deps import close_services
from tunesearch.api.metrics import PrometheusMiddleware, set_app_info
from tunesearch.api.routes import youtube_router, soundcloud_router, health_router


logger = get_logger(__name__)


def _error_body(message: str, status: int) -> dict:
    return {"error": {"message": message, "status": status}}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    settings = get_settings()
    setup_logging(level=settings.logging.level)

    logger.info(
        f"Starting TuneSearch API v{settings.version} "
        f"({settings.environment}) on {settings.api.host}:{settings.api.port}"
    )
    logger.info(f"Health check available at http://{settings.api.host}:{settings.api.port}/health")

    if not settings.youtube.api_key:
        logger.warning(
            "YouTube API key not configured. Set TUNESEARCH_YOUTUBE_API_KEY "
            "(or YOU_TUBE_API_KEY); searches will fail until it is set."
        )

    yield

    logger.info("Shutting down TuneSearch API")
    await close_services()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title="TuneSearch API",
        description="""
        Search proxy for YouTube music videos, with a legacy SoundCloud variant.

        ## Endpoints

        - `GET /api/youtube/search` - Search videos (first page)
        - `GET /api/youtube/next` - Continue with a page token
        - `GET /api/soundcloud/search` - Legacy SoundCloud search
        - `GET /health` - Health check
        """,
        version=settings.version,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # CORS: everything in development, configured origins otherwise
    cors_origins = settings.api.cors_origins if settings.environment == "production" else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=settings.environment == "production",
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    # Request timing + access log
    @app.middleware("http")
    async def add_timing_header(request: Request, call_next):
        start_time = datetime.now()
        response = await call_next(request)
        process_time = (datetime.now() - start_time).total_seconds() * 1000
        response.headers["X-Process-Time-Ms"] = str(int(process_time))
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({process_time:.0f}ms)"
        )
        return response

    app.add_middleware(PrometheusMiddleware)
    set_app_info(version=settings.version, environment=settings.environment)

    # Exception handlers
    @app.exception_handler(TuneSearchError)
    async def tunesearch_error_handler(request: Request, exc: TuneSearchError):
        if isinstance(exc, UnknownError):
            logger.error(f"Unclassified upstream failure: {exc.message} | {exc.details}")
        else:
            logger.warning(f"{exc.code} on {request.url.path}: {exc.message}")
        is_production = settings.environment == "production"
        return JSONResponse(status_code=exc.status, content=exc.to_dict(safe=is_production))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse(status_code=400, content=_error_body(message, 400))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=_error_body(message, exc.status_code))

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception: {exc}")
        return JSONResponse(status_code=500, content=_error_body("Internal Server Error", 500))

    app.include_router(youtube_router)
    app.include_router(soundcloud_router)
    app.include_router(health_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "tunesearch.api.app:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.environment == "development",
        log_level="info",
    )
