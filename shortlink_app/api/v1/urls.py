from fastapi import APIRouter, Depends, HTTPException, status
from shortlink_app.config import Settings
from shortlink_app.schemas.url import ShortenRequest, ShortenResponse, URLStats
from shortlink_app.services.qr import generate_qr_code
from shortlink_app.services.url_service import URLService
from shortlink_app.dependencies import get_settings, get_url_service, valid_short_id

router = APIRouter(tags=["urls"])


@router.post(
    "/encurtar",
    response_model=ShortenResponse,
    response_model_exclude_none=True
)
async def create_short_url(
    payload: ShortenRequest,
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """Shorten a URL; the link stops working `link_ttl_seconds` later"""
    url = await url_service.create_short_url(
        payload.url,
        device=payload.device,
        country=payload.country
    )
    short_url = url_service.short_url_for(url.short)

    return ShortenResponse(
        short_url=short_url,
        qr_code=generate_qr_code(short_url) if settings.qr_code_enabled else None
    )


@router.get(
    "/stats/{short_id}",
    response_model=URLStats,
    response_model_exclude_none=True
)
async def get_url_stats(
    short_id: str = Depends(valid_short_id),
    url_service: URLService = Depends(get_url_service),
    settings: Settings = Depends(get_settings)
):
    """Hit count plus visits grouped by device and country"""
    stats = await url_service.get_url_stats(short_id)
    if not stats:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short URL not found"
        )

    if settings.qr_code_enabled:
        stats.qr_code = generate_qr_code(url_service.short_url_for(short_id))
    return stats
