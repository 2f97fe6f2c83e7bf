import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitsocial.api.v1.api import api_router, tags_metadata
from fitsocial.config import settings
from fitsocial.core.exceptions import AppException

logger = logging.getLogger("fitsocial")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events.

    Startup checks the database and connects the cache; the cache is
    optional and the app keeps serving without it. Shutdown closes both.
    """
    logger.info(
        f"Starting {settings.app_name} (Environment: {settings.environment})"
    )

    try:
        from fitsocial.database import engine

        async with engine.begin() as conn:
            await conn.exec_driver_sql("SELECT 1")
        logger.info("Database connection established")
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        raise

    try:
        from fitsocial.core.cache import init_cache

        await init_cache()
        logger.info("Cache system initialized")
    except Exception as e:
        logger.warning(f"Cache initialization failed: {e}")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")

    try:
        from fitsocial.core.cache import cleanup_cache

        await cleanup_cache()
    except Exception as e:
        logger.warning(f"Cache cleanup error: {e}")

    try:
        from fitsocial.database import engine

        await engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning(f"Database cleanup error: {e}")


def create_app() -> FastAPI:
    """Application factory."""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Social backbone for a fitness community",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware for tracing
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)

        return response

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "details": exc.details,
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.debug else "Something went wrong",
                "details": {},
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    @app.get("/health")
    async def health_check():
        from fitsocial.core.cache import cache_manager

        return {
            "status": "healthy",
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "cache": {
                "connected": cache_manager.redis_client is not None,
                **cache_manager.get_stats(),
            },
            "timestamp": time.time(),
        }

    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to {settings.app_name}!",
            "docs_url": "/docs",
            "version": settings.app_version,
        }

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
