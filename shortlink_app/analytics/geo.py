"""
Country lookup for visitor IP addresses.

The lookup itself goes to an ip-api.com compatible HTTP endpoint. Everything
that can be decided without the network (which address to ask about, how to
read the answer) lives in pure functions so it can be tested offline.
"""

import ipaddress
import logging
from typing import Any, Optional

import requests


logger = logging.getLogger(__name__)

UNKNOWN_COUNTRY = "Unknown"


def normalize_lookup_ip(ip: Optional[str], fallback_ip: str) -> str:
    """
    Pick the address to geolocate.

    Loopback, unspecified and unparsable addresses can't be located, so
    they're swapped for `fallback_ip` (local development traffic).
    """
    if not ip:
        return fallback_ip

    try:
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return fallback_ip

    mapped = getattr(address, "ipv4_mapped", None)
    if mapped is not None:
        address = mapped

    if address.is_loopback or address.is_unspecified:
        return fallback_ip

    return str(address)


def parse_country(payload: Any) -> str:
    """Read the country name out of an ip-api.com JSON response"""
    if not isinstance(payload, dict):
        return UNKNOWN_COUNTRY
    if payload.get("status") != "success":
        return UNKNOWN_COUNTRY

    country = payload.get("country")
    if not isinstance(country, str) or not country.strip():
        return UNKNOWN_COUNTRY
    return country.strip()


class GeoLocator:
    """
    Resolves IP addresses to country names over HTTP.

    Failures never propagate: any network or decoding problem yields
    "Unknown" so a redirect is never blocked by the lookup.

    Args:
        session: requests session (owned by the app, closed on shutdown)
        base_url: Lookup endpoint, the IP is appended as a path segment
        timeout: Per-request timeout in seconds
        fallback_ip: Address used instead of loopback clients
    """

    def __init__(
        self,
        session: requests.Session,
        base_url: str,
        timeout: float = 3.0,
        fallback_ip: str = "177.37.0.1"
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.fallback_ip = fallback_ip

    def lookup_country(self, ip: Optional[str]) -> str:
        """Blocking lookup; call from a threadpool in async code"""
        lookup_ip = normalize_lookup_ip(ip, self.fallback_ip)

        try:
            response = self.session.get(
                f"{self.base_url}/{lookup_ip}",
                params={"fields": "status,country"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Country lookup failed for %s: %s", lookup_ip, e)
            return UNKNOWN_COUNTRY

        return parse_country(payload)

    def close(self) -> None:
        self.session.close()
