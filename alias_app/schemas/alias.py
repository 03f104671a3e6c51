from pydantic import BaseModel, Field, computed_field, ConfigDict
from typing import List, Optional
from datetime import datetime
from alias_app.config import settings

SLUG_PATTERN = r"^[A-Za-z0-9_-]+$"


class AliasCreate(BaseModel):
    # Plain str: "example.com" is accepted and normalized by the service
    original_url: str = Field(..., min_length=1, description="The URL to be shortened")
    custom_slug: Optional[str] = Field(
        None,
        pattern=SLUG_PATTERN,
        description="Letters, numbers, underscores and hyphens only"
    )


class AliasUpdate(BaseModel):
    slug: str = Field(..., pattern=SLUG_PATTERN, description="New alias value")


class AliasResponse(BaseModel):
    """Response schema that serializes the SQLAlchemy Alias model

    - from_attributes=True reads straight from the model
    - canonical_url comes from the model property (joined canonical record)
    """
    alias: str
    canonical_url: str
    owner_id: str
    is_custom: bool
    visit_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - public URL of the alias"""
        return f"{settings.base_url}/{self.alias}"

    # Pydantic V2 style configuration
    model_config = ConfigDict(from_attributes=True)


class TopAlias(BaseModel):
    alias: str
    canonical_url: str
    visit_count: int

    @computed_field
    @property
    def short_url(self) -> str:
        return f"{settings.base_url}/{self.alias}"

    model_config = ConfigDict(from_attributes=True)


class OwnerStats(BaseModel):
    total_aliases: int
    total_visits: int
    top_aliases: List[TopAlias]
