"""
Visit analytics: device classification and IP geolocation.
"""

from .device import Device, classify_device
from .geo import GeoLocator, normalize_lookup_ip, parse_country, UNKNOWN_COUNTRY

__all__ = [
    "Device",
    "classify_device",
    "GeoLocator",
    "normalize_lookup_ip",
    "parse_country",
    "UNKNOWN_COUNTRY",
]
