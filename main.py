import logging
from contextlib import asynccontextmanager
from typing import Optional

import requests
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shortlink_app.analytics.geo import GeoLocator
from shortlink_app.api.v1 import urls, redirect
from shortlink_app.cache.factory import CacheBackend, CacheFactory
from shortlink_app.config import Settings, settings as default_settings
from shortlink_app.database.connection import Database
from shortlink_app.exceptions import ShortLinkError
from shortlink_app.log_config import setup_logging


logger = logging.getLogger("shortlink_app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open shared resources at startup, close them on shutdown"""
    settings: Settings = app.state.settings

    database = Database(settings.database_url, echo=settings.debug)
    database.create_tables()
    app.state.database = database

    app.state.cache = CacheFactory.create(CacheBackend(settings.cache_backend), settings)
    app.state.geolocator = GeoLocator(
        session=requests.Session(),
        base_url=settings.geo_api_url,
        timeout=settings.geo_timeout,
        fallback_ip=settings.geo_fallback_ip
    )
    logger.info("%s %s started (%s)", settings.app_name, settings.app_version, settings.environment)

    try:
        yield
    finally:
        app.state.geolocator.close()
        app.state.cache.close()
        database.dispose()
        logger.info("%s stopped", settings.app_name)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema errors are client errors: 400 with the error list"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())}
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


async def service_exception_handler(request: Request, exc: ShortLinkError):
    logger.error("Service error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app; resources are opened by the lifespan"""
    settings = settings or default_settings
    setup_logging(settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="A URL shortener with expiring links and visit analytics",
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_allowed_origin],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(ShortLinkError, service_exception_handler)

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "redoc": "/redoc"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": settings.environment}

    ######## Include routers (redirect last, /{short_id} is a catch-all)
    app.include_router(urls.router)
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
