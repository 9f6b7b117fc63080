"""
Device classification from User-Agent strings.

Plain substring matching, no user-agent database. Order matters:
Android user agents also say "Linux", and iOS ones say "like Mac OS X".
"""

from enum import Enum
from typing import Optional


class Device(str, Enum):
    """Device categories stored on visits"""
    WINDOWS = "Windows"
    LINUX = "Linux"
    ANDROID = "Android"
    IOS = "iOS"
    MACOS = "MacOS"
    UNKNOWN = "Unknown"


# Checked top to bottom, first match wins
_DEVICE_MARKERS = (
    (Device.WINDOWS, ("windows",)),
    (Device.ANDROID, ("android",)),
    (Device.LINUX, ("linux",)),
    (Device.IOS, ("iphone", "ipad", "ipod", "ios")),
    (Device.MACOS, ("macintosh", "mac os")),
)


def classify_device(user_agent: Optional[str]) -> Device:
    """
    Map a User-Agent header to a device category.

    Examples:
        >>> classify_device("Mozilla/5.0 (Linux; Android 14; Pixel 8)")
        <Device.ANDROID: 'Android'>
        >>> classify_device("curl/8.4.0")
        <Device.UNKNOWN: 'Unknown'>
    """
    if not user_agent:
        return Device.UNKNOWN

    lowered = user_agent.lower()
    for device, markers in _DEVICE_MARKERS:
        if any(marker in lowered for marker in markers):
            return device

    return Device.UNKNOWN
