from pathlib import Path

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, RedirectResponse
from shortlink_app.analytics.device import classify_device
from shortlink_app.analytics.geo import GeoLocator
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_geolocator, get_url_service, valid_short_id

router = APIRouter(tags=["redirect"])

GONE_PAGE = Path(__file__).resolve().parents[2] / "static" / "gone.html"


def gone_response() -> FileResponse:
    """Static page shown for missing or expired links"""
    return FileResponse(GONE_PAGE, status_code=status.HTTP_410_GONE, media_type="text/html")


@router.get("/{short_id}", response_model=None)
async def redirect_to_original(
    request: Request,
    short_id: str = Depends(valid_short_id),
    url_service: URLService = Depends(get_url_service),
    geolocator: GeoLocator = Depends(get_geolocator)
):
    """
    Redirect to the original URL.

    Flow:
    1. Look the link up (cache, then database); expired links are deleted
    2. Classify the visitor's device and country
    3. Increment hits and log the visit (one transaction)
    4. 302 to the original URL
    """
    target = await url_service.get_active_target(short_id)
    if not target:
        return gone_response()

    device = classify_device(request.headers.get("user-agent"))
    client_ip = request.client.host if request.client else None
    # requests is blocking, keep it off the event loop
    country = await run_in_threadpool(geolocator.lookup_country, client_ip)

    hits = await url_service.record_hit(short_id, device, country)
    if hits is None:
        # Deleted between the lookup and the increment
        return gone_response()

    return RedirectResponse(url=target.original, status_code=status.HTTP_302_FOUND)
