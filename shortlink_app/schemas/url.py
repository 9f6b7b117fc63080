from pydantic import BaseModel, HttpUrl, Field, ConfigDict, TypeAdapter, ValidationError, field_validator
from typing import Dict, Optional
from datetime import datetime


_http_url = TypeAdapter(HttpUrl)


class ShortenRequest(BaseModel):
    url: str = Field(..., description="The original URL to be shortened")
    device: Optional[str] = Field(None, max_length=255, description="Creator's device hint")
    country: Optional[str] = Field(None, max_length=255, description="Creator's country hint")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://www.python.org/downloads/",
                "device": "Windows",
                "country": "Brazil"
            }
        }
    )

    @field_validator("url")
    @classmethod
    def must_be_http_url(cls, value: str) -> str:
        """Validate as HttpUrl but keep the URL exactly as submitted"""
        try:
            _http_url.validate_python(value)
        except ValidationError as e:
            raise ValueError(e.errors()[0]["msg"]) from None
        return value


class ShortenResponse(BaseModel):
    """Serialized with camelCase keys: {"shortUrl": ..., "qrCode": ...}"""
    short_url: str = Field(..., serialization_alias="shortUrl")
    qr_code: Optional[str] = Field(None, serialization_alias="qrCode")


class LinkTarget(BaseModel):
    """What a redirect needs to know about a link (also the cached form)"""
    original: str
    expires_at: datetime


class URLStats(BaseModel):
    short: str
    original: str
    hits: int
    expires_at: datetime
    devices: Dict[str, int] = Field(default_factory=dict)
    countries: Dict[str, int] = Field(default_factory=dict)
    qr_code: Optional[str] = Field(None, serialization_alias="qrCode")

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)
