from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from alias_app.database.connection import Base


class CanonicalURL(Base):
    """
    Deduplicated, normalized target URL.

    Created the first time a normalized URL is seen and never mutated.
    Many aliases may point at one canonical record.
    """
    __tablename__ = "canonical_urls"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # unique=True creates the index that enforces deduplication
    url = Column(String, unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    aliases = relationship("Alias", back_populates="canonical")


class Alias(Base):
    """
    Public short identifier pointing at a canonical URL.

    The alias value is globally unique regardless of owner; the unique
    index is what settles concurrent inserts of the same candidate.
    """
    __tablename__ = "aliases"
    __table_args__ = (
        CheckConstraint("visit_count >= 0", name="ck_aliases_visit_count"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    alias = Column(String, unique=True, nullable=False, index=True)
    owner_id = Column(String, nullable=False, index=True)
    canonical_url_id = Column(Integer, ForeignKey("canonical_urls.id"), nullable=False, index=True)
    # False for the generated per-(owner, URL) alias, True for chosen slugs
    is_custom = Column(Boolean, nullable=False, default=False)
    visit_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    canonical = relationship("CanonicalURL", back_populates="aliases", lazy="joined")

    @property
    def canonical_url(self) -> str:
        """Target URL of this alias"""
        return self.canonical.url
