"""
Explicit repository for canonical URLs and aliases.

Uniqueness is enforced by the database's unique indexes; this module turns
their violations into ConflictError and read failures into UnavailableError
so the service never deals with driver exceptions directly.
"""

import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from alias_app.exceptions import ConflictError, UnavailableError
from alias_app.models.alias import Alias, CanonicalURL

logger = logging.getLogger(__name__)


class AliasRepository:
    """Point lookups and unique-constrained writes for aliases"""

    def __init__(self, db: Session):
        self.db = db

    def _read(self, query_fn):
        try:
            return query_fn()
        except SQLAlchemyError as e:
            logger.error(f"Store lookup failed: {e}")
            self.db.rollback()
            raise UnavailableError("Alias store is unavailable") from e

    def find_by_alias(self, alias: str) -> Optional[Alias]:
        # visit_count is bumped from other sessions, so always reload
        return self._read(
            lambda: self.db.query(Alias).filter(Alias.alias == alias)
            .populate_existing()
            .first()
        )

    def find_canonical(self, url: str) -> Optional[CanonicalURL]:
        return self._read(
            lambda: self.db.query(CanonicalURL).filter(CanonicalURL.url == url).first()
        )

    def find_default_alias(self, owner_id: str, canonical_url_id: int) -> Optional[Alias]:
        """The generated (non-custom) alias an owner holds for a canonical URL"""
        return self._read(
            lambda: self.db.query(Alias).filter(
                Alias.owner_id == owner_id,
                Alias.canonical_url_id == canonical_url_id,
                Alias.is_custom == False,  # noqa: E712
            ).order_by(Alias.id).first()
        )

    def list_for_owner(self, owner_id: str) -> List[Alias]:
        return self._read(
            lambda: self.db.query(Alias)
            .filter(Alias.owner_id == owner_id)
            .populate_existing()
            .order_by(Alias.created_at.desc(), Alias.id.desc())
            .all()
        )

    def get_or_create_canonical(self, url: str) -> CanonicalURL:
        """
        Find the canonical record for a normalized URL, creating it if new.

        Two requests racing to create the same URL both end up with the
        single row that won the unique index.
        """
        canonical = self.find_canonical(url)
        if canonical:
            return canonical

        canonical = CanonicalURL(url=url)
        self.db.add(canonical)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.find_canonical(url)
            if existing is None:
                raise
            return existing
        self.db.refresh(canonical)
        return canonical

    def insert_unique(self, record: Alias) -> Alias:
        """
        Insert an alias row.

        Raises:
            ConflictError: If the alias value is already taken
        """
        self.db.add(record)
        self._commit_unique(record.alias)
        self.db.refresh(record)
        return record

    def rename(self, record: Alias, new_alias: str) -> Alias:
        """
        Change an alias value in place.

        Raises:
            ConflictError: If the new value is already taken
        """
        record.alias = new_alias
        self._commit_unique(new_alias)
        self.db.refresh(record)
        return record

    def delete(self, record: Alias) -> None:
        self.db.delete(record)
        self.db.commit()

    def increment_visits(self, alias: str) -> int:
        """Atomic visit_count + 1. Returns number of rows touched."""
        result = self.db.execute(
            update(Alias)
            .where(Alias.alias == alias)
            .values(visit_count=Alias.visit_count + 1)
        )
        self.db.commit()
        return result.rowcount

    def _commit_unique(self, alias: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.info(f"Alias '{alias}' lost a unique-constraint race")
            raise ConflictError(f"Alias '{alias}' is already in use") from e
