"""
Database models for the short link service.

`urls` holds the links themselves; `visits` is an append-only log of
redirects used for the stats aggregates.
"""

from .url import URL
from .visit import Visit

__all__ = ["URL", "Visit"]
