"""
FastAPI dependencies for dependency injection.

Shared resources (database, cache, geolocator, settings) are built by the
app's lifespan and kept on `app.state`; these providers hand them to routes.
Tests swap any of them through `app.dependency_overrides`.
"""

from typing import Iterator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from shortlink_app.analytics.geo import GeoLocator
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.config import Settings
from shortlink_app.services.url_service import URLService
from shortlink_app.services.validation import is_valid_short_id


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """One session per request, closed when the response is done"""
    yield from request.app.state.database.sessions()


def get_cache(request: Request) -> CacheStrategy:
    return request.app.state.cache


def get_geolocator(request: Request) -> GeoLocator:
    return request.app.state.geolocator


def valid_short_id(short_id: str) -> str:
    """
    Path parameter guard for short identifiers.

    Runs before the service (and its session) is resolved, so malformed
    ids never reach the database.
    """
    if not is_valid_short_id(short_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid short id"
        )
    return short_id


def get_url_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    cache: CacheStrategy = Depends(get_cache)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    Controllers depend on the service; the service depends on
    infrastructure (db, cache).
    """
    return URLService(db=db, settings=settings, cache=cache)
