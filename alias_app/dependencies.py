"""
FastAPI dependencies for dependency injection.

Provides singleton instances of the cache and visit recorder, the caller's
owner identity, and a request-scoped AliasService.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from alias_app.cache.factory import CacheFactory, CacheBackend
from alias_app.cache.strategies import CacheStrategy
from alias_app.config import settings
from alias_app.database.connection import get_db
from alias_app.services.visit_recorder import VisitRecorder


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get cache instance (singleton).

    Factory gets config from settings internally.
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


@lru_cache()
def get_visit_recorder() -> VisitRecorder:
    """Get visit recorder (singleton, so pending tasks can be drained on shutdown)."""
    return VisitRecorder()


def get_owner_id(x_owner_id: Optional[str] = Header(None)) -> str:
    """
    Owner identity of the caller.

    The identity provider in front of this service forwards an opaque
    owner id; requests without one act as the anonymous owner.
    """
    return x_owner_id or settings.anonymous_owner_id


def get_alias_service(
    db: Session = Depends(get_db),
    cache: CacheStrategy = Depends(get_cache),
    visit_recorder: VisitRecorder = Depends(get_visit_recorder),
):
    """
    Get AliasService with all dependencies injected.

    Controller depends on service, service depends on infrastructure.
    """
    from alias_app.services.alias_service import AliasService
    return AliasService(db=db, cache=cache, visit_recorder=visit_recorder)
