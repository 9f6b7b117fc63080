import logging
import math
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from shortlink_app.analytics.device import Device
from shortlink_app.cache.strategies import CacheStrategy
from shortlink_app.clock import as_utc, utcnow
from shortlink_app.config import Settings
from shortlink_app.exceptions import ShortCodeGenerationError
from shortlink_app.models.url import URL
from shortlink_app.models.visit import Visit
from shortlink_app.schemas.url import LinkTarget, URLStats
from shortlink_app.services.short_code import RandomShortCodeGenerator


logger = logging.getLogger(__name__)


class URLService:
    """
    Short link service with dependency injection for the session and cache.

    - The database session and cache strategy are injected (not created internally)
    - The clock is injectable so expiry can be tested without sleeping
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        cache: Optional[CacheStrategy] = None,
        clock: Callable[[], datetime] = utcnow
    ):
        """
        Args:
            db: Database session
            settings: Application settings (TTL, base URL, retry budget)
            cache: Cache strategy for redirect lookups (optional)
            clock: Returns the current time as an aware UTC datetime
        """
        self.db = db
        self.settings = settings
        self.cache = cache
        self.clock = clock
        self.short_code_generator = RandomShortCodeGenerator(
            length=settings.short_id_length,
            max_retries=settings.max_retries
        )

    @staticmethod
    def _cache_key(short: str) -> str:
        return f"link:{short}"

    def short_url_for(self, short: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{short}"

    async def create_short_url(
        self,
        long_url: str,
        device: Optional[str] = None,
        country: Optional[str] = None
    ) -> URL:
        """Create a new short link that expires `link_ttl_seconds` from now

        The existence check in the generator narrows the collision window;
        the unique index closes it. A commit that loses the race is rolled
        back and retried with a fresh code.
        """
        expires_at = self.clock() + timedelta(seconds=self.settings.link_ttl_seconds)

        for _ in range(self.settings.max_retries):
            url = URL(
                original=long_url,
                short=self.short_code_generator.generate(self.db),
                expires_at=expires_at,
                hits=0,
                user_agent=device,
                user_region=country,
            )
            self.db.add(url)

            try:
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                logger.warning("Short code %s was taken concurrently, retrying", url.short)
                continue
            except SQLAlchemyError:
                self.db.rollback()
                raise

            logger.info("Created short link %s (expires %s)", url.short, expires_at.isoformat())
            await self._cache_target(url.short, LinkTarget(original=url.original, expires_at=expires_at))
            return url

        raise ShortCodeGenerationError(
            f"Could not store a unique short code after {self.settings.max_retries} attempts"
        )

    async def get_active_target(self, short: str) -> Optional[LinkTarget]:
        """
        Look up where a short link points, enforcing expiry.

        Flow:
        1. Check cache first
        2. On a miss, query the database and populate the cache
        3. If the link has expired, delete it and report it as gone

        Returns:
            The link target, or None if the link is missing or expired
        """
        target = None
        if self.cache:
            cached = await self.cache.get(self._cache_key(short))
            if cached:
                target = LinkTarget.model_validate_json(cached)

        from_db = target is None
        if from_db:
            url = self.db.query(URL).populate_existing().filter(URL.short == short).first()
            if not url:
                return None
            target = LinkTarget(original=url.original, expires_at=as_utc(url.expires_at))

        if as_utc(target.expires_at) < self.clock():
            await self.expire(short)
            return None

        if from_db:
            await self._cache_target(short, target)

        return target

    async def expire(self, short: str) -> None:
        """Delete an expired link and drop it from the cache"""
        try:
            deleted = self.db.query(URL).filter(URL.short == short).delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        if self.cache:
            await self.cache.delete(self._cache_key(short))

        if deleted:
            logger.info("Deleted expired short link %s", short)

    async def record_hit(self, short: str, device: Device, country: str) -> Optional[int]:
        """
        Count one redirect and log the visit, in a single transaction.

        The counter goes up in one UPDATE ... RETURNING statement, so
        concurrent redirects never lose increments.

        Returns:
            The new hit count, or None if the link disappeared meanwhile
        """
        statement = (
            update(URL)
            .where(URL.short == short)
            .values(hits=URL.hits + 1)
            .returning(URL.hits)
            .execution_options(synchronize_session=False)
        )

        try:
            hits = self.db.execute(statement).scalar_one_or_none()
            if hits is None:
                self.db.rollback()
                return None

            self.db.add(Visit(short=short, device=Device(device).value, country=country))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        logger.debug("Short link %s now has %d hits", short, hits)
        return hits

    async def get_url_stats(self, short: str) -> Optional[URLStats]:
        """Stored record plus visit counts grouped by device and by country"""
        url = self.db.query(URL).populate_existing().filter(URL.short == short).first()

        if not url:
            return None

        devices = (
            self.db.query(Visit.device, func.count(Visit.id))
            .filter(Visit.short == short)
            .group_by(Visit.device)
            .all()
        )
        countries = (
            self.db.query(Visit.country, func.count(Visit.id))
            .filter(Visit.short == short)
            .group_by(Visit.country)
            .all()
        )

        return URLStats(
            short=url.short,
            original=url.original,
            hits=url.hits,
            expires_at=as_utc(url.expires_at),
            devices={device: count for device, count in devices},
            countries={country: count for country, count in countries},
        )

    async def _cache_target(self, short: str, target: LinkTarget) -> None:
        """Cache a link for no longer than it has left to live"""
        if not self.cache:
            return

        remaining = (as_utc(target.expires_at) - self.clock()).total_seconds()
        ttl = min(self.settings.cache_ttl, math.ceil(remaining))
        if ttl <= 0:
            return

        await self.cache.set(self._cache_key(short), target.model_dump_json(), ttl=ttl)
