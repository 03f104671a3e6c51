import logging
import re
from typing import List, Optional, Set

from sqlalchemy.orm import Session

from alias_app.cache.strategies import CacheStrategy
from alias_app.config import settings
from alias_app.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from alias_app.models.alias import Alias, CanonicalURL
from alias_app.repositories.alias_repository import AliasRepository
from alias_app.schemas.alias import OwnerStats, SLUG_PATTERN, TopAlias
from alias_app.services.alias_factory import AliasStrategyFactory
from alias_app.services.alias_strategies import AliasStrategy
from alias_app.services.visit_recorder import VisitRecorder
from alias_app.utils.url_normalizer import is_absolute_http_url, normalize

logger = logging.getLogger(__name__)

_SLUG_RE = re.compile(SLUG_PATTERN)
TOP_ALIASES_LIMIT = 5
STALE_ENTRY_TTL = 5  # seconds a cache entry may outlive a failed invalidation


def cache_key(alias: str) -> str:
    return f"url:{alias}"


class AliasService:
    """
    Alias service with dependency injection for cache and visit counting.

    - Creation: normalize -> canonical find-or-create -> alias -> warm cache
    - Resolution: cache first, database on miss, visits counted on both paths
    - Rename/delete overwrite or drop the cache entry in the same call
    """

    def __init__(
        self,
        db: Session,
        cache: CacheStrategy,
        visit_recorder: Optional[VisitRecorder] = None,
        strategy: Optional[AliasStrategy] = None,
        anonymous_owner_id: Optional[str] = None,
    ):
        """
        Args:
            db: Request-scoped database session
            cache: Cache strategy for alias -> URL lookups
            visit_recorder: Visit counter (its own sessions)
            strategy: Alias generation strategy (default from settings)
            anonymous_owner_id: Sentinel for requests without an owner
        """
        self.db = db
        self.repository = AliasRepository(db)
        self.cache = cache
        self.visit_recorder = visit_recorder or VisitRecorder()
        self.strategy = strategy or AliasStrategyFactory.create_strategy()
        self.anonymous_owner_id = anonymous_owner_id or settings.anonymous_owner_id

    async def shorten(
        self,
        original_url: str,
        custom_slug: Optional[str] = None,
        owner_id: Optional[str] = None,
    ) -> Alias:
        """
        Create (or reuse) an alias for a URL.

        Raises:
            ValidationError: URL is not an absolute http(s) URL, or bad slug
            UnauthorizedError: Anonymous custom slug while that is disabled
            ConflictError: Slug taken, or no free alias could be generated
        """
        owner_id = owner_id or self.anonymous_owner_id

        normalized_url = normalize(original_url)
        if not is_absolute_http_url(normalized_url):
            raise ValidationError(f"'{original_url}' is not a valid URL")

        if custom_slug:
            self._validate_slug(custom_slug)
            if self.is_anonymous(owner_id) and not settings.allow_anonymous_custom_slugs:
                raise UnauthorizedError("Custom aliases require an authenticated owner")

        canonical = self.repository.get_or_create_canonical(normalized_url)

        if custom_slug:
            record = self._create_custom_alias(canonical, owner_id, custom_slug)
        else:
            record = await self._create_default_alias(canonical, owner_id)

        await self._warm_cache(record.alias, canonical.url)
        return record

    def _create_custom_alias(self, canonical: CanonicalURL, owner_id: str, slug: str) -> Alias:
        existing = self.repository.find_by_alias(slug)
        if existing is not None:
            if self._belongs_to(existing, owner_id, canonical.id):
                return existing
            raise ConflictError(f"Alias '{slug}' is already in use")

        record = Alias(
            alias=slug,
            owner_id=owner_id,
            canonical_url_id=canonical.id,
            is_custom=True,
        )
        return self.repository.insert_unique(record)

    async def _create_default_alias(self, canonical: CanonicalURL, owner_id: str) -> Alias:
        """
        Generated alias for (owner, canonical URL).

        An owner keeps a single generated alias per URL: shortening again
        returns it, or renames it when the generated value changed
        (for instance after an alias_length change).
        """
        rejected: Set[str] = set()

        def is_taken(candidate: str) -> bool:
            if candidate in rejected:
                return True
            existing = self.repository.find_by_alias(candidate)
            return existing is not None and not self._belongs_to(existing, owner_id, canonical.id)

        previous = self.repository.find_default_alias(owner_id, canonical.id)
        if previous is not None and len(previous.alias) == self.strategy.length:
            return previous

        for attempt in range(settings.max_insert_retries):
            slug = self.strategy.generate(canonical.url, owner_id, is_taken)

            current = self.repository.find_by_alias(slug)
            if current is not None:
                if self._belongs_to(current, owner_id, canonical.id):
                    return current
                # Inserted by someone else since the existence check
                rejected.add(slug)
                continue

            try:
                if previous is not None:
                    old_slug = previous.alias
                    record = self.repository.rename(previous, slug)
                    await self._invalidate(old_slug)
                    logger.info(f"Default alias '{old_slug}' renamed to '{slug}'")
                    return record

                record = Alias(
                    alias=slug,
                    owner_id=owner_id,
                    canonical_url_id=canonical.id,
                    is_custom=False,
                )
                return self.repository.insert_unique(record)
            except ConflictError:
                # Another request inserted the same candidate first; if it was
                # shortening this same (owner, URL) pair, its row is ours too
                winner = self.repository.find_by_alias(slug)
                if winner is not None and self._belongs_to(winner, owner_id, canonical.id):
                    return winner
                rejected.add(slug)
                logger.info(f"Alias '{slug}' taken concurrently, retry {attempt + 1}")

                previous = self.repository.find_default_alias(owner_id, canonical.id)
                if previous is not None and len(previous.alias) == self.strategy.length:
                    return previous

        raise ConflictError(
            f"Could not create an alias after {settings.max_insert_retries} attempts"
        )

    async def resolve(self, alias: str) -> str:
        """
        Resolve an alias to its target URL using the Cache-Aside pattern.

        Flow:
        1. Cache hit -> dispatch visit increment in background, return
        2. Cache miss -> database lookup (NotFoundError if missing)
        3. Warm cache, count the visit, return

        Raises:
            NotFoundError: Unknown alias
            UnavailableError: Database unreachable
        """
        cached_url = await self.cache.get(cache_key(alias))
        if cached_url:
            self.visit_recorder.dispatch(alias)
            return cached_url

        record = self.repository.find_by_alias(alias)
        if record is None:
            raise NotFoundError(f"Alias '{alias}' not found")

        target_url = record.canonical_url
        await self._warm_cache(alias, target_url)
        self.visit_recorder.record(alias)
        return target_url

    async def get_alias(self, alias: str) -> Alias:
        record = self.repository.find_by_alias(alias)
        if record is None:
            raise NotFoundError(f"Alias '{alias}' not found")
        return record

    async def rename(self, alias: str, new_slug: str, owner_id: Optional[str]) -> Alias:
        """
        Change an alias value; the old cache entry is dropped and the new
        one written before returning.
        """
        record = self._owned_alias(alias, owner_id)
        self._validate_slug(new_slug)

        if new_slug == record.alias:
            return record

        if self.repository.find_by_alias(new_slug) is not None:
            raise ConflictError(f"Alias '{new_slug}' is already in use")

        target_url = record.canonical_url
        # A renamed alias is an explicit choice, no longer the generated one
        record.is_custom = True
        record = self.repository.rename(record, new_slug)

        await self._invalidate(alias)
        await self._warm_cache(new_slug, target_url)
        return record

    async def delete(self, alias: str, owner_id: Optional[str]) -> None:
        record = self._owned_alias(alias, owner_id)
        self.repository.delete(record)
        await self._invalidate(alias)

    async def list_aliases(self, owner_id: Optional[str]) -> List[Alias]:
        owner_id = self._require_owner(owner_id)
        return self.repository.list_for_owner(owner_id)

    async def owner_stats(self, owner_id: Optional[str]) -> OwnerStats:
        aliases = await self.list_aliases(owner_id)
        top = sorted(aliases, key=lambda record: record.visit_count, reverse=True)
        return OwnerStats(
            total_aliases=len(aliases),
            total_visits=sum(record.visit_count for record in aliases),
            top_aliases=[TopAlias.model_validate(record) for record in top[:TOP_ALIASES_LIMIT]],
        )

    def is_anonymous(self, owner_id: Optional[str]) -> bool:
        return not owner_id or owner_id == self.anonymous_owner_id

    def _require_owner(self, owner_id: Optional[str]) -> str:
        if self.is_anonymous(owner_id):
            raise UnauthorizedError("This operation requires an authenticated owner")
        return owner_id

    def _owned_alias(self, alias: str, owner_id: Optional[str]) -> Alias:
        owner_id = self._require_owner(owner_id)
        record = self.repository.find_by_alias(alias)
        if record is None or record.owner_id != owner_id:
            raise NotFoundError(f"Alias '{alias}' not found")
        return record

    @staticmethod
    def _belongs_to(record: Alias, owner_id: str, canonical_url_id: int) -> bool:
        return record.owner_id == owner_id and record.canonical_url_id == canonical_url_id

    @staticmethod
    def _validate_slug(slug: str) -> None:
        if not _SLUG_RE.fullmatch(slug):
            raise ValidationError(
                "Alias can only contain letters, numbers, underscores, and hyphens"
            )

    async def _warm_cache(self, alias: str, target_url: str) -> None:
        await self.cache.set(cache_key(alias), target_url, ttl=settings.cache_ttl)

    async def _invalidate(self, alias: str) -> None:
        key = cache_key(alias)
        if await self.cache.delete(key):
            return

        # delete() also reports False on backend errors
        stale_url = await self.cache.get(key)
        if stale_url is not None:
            logger.warning(
                f"Could not drop cache entry '{key}', expiring it in {STALE_ENTRY_TTL}s"
            )
            await self.cache.set(key, stale_url, ttl=STALE_ENTRY_TTL)
