from pydantic import BaseModel, HttpUrl, Field, computed_field, ConfigDict
from typing import List, Optional
from datetime import datetime
from quickurl.config import settings
from quickurl.utils.helpers import resolve_now


class URLRecord(BaseModel):
    """Immutable snapshot of a stored URL record.

    Returned by every store read. Liveness is computed against a clock
    reading on each call, never cached on the snapshot.
    """
    id: str
    token: str
    original_url: str
    title: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    click_count: int = 0

    model_config = ConfigDict(from_attributes=True, frozen=True)

    def is_live_at(self, now: Optional[datetime] = None) -> bool:
        return resolve_now(now) < self.expires_at

    def is_expired_at(self, now: Optional[datetime] = None) -> bool:
        return not self.is_live_at(now)


class URLCreate(BaseModel):
    url: HttpUrl = Field(..., description="The original URL to be shortened")
    title: Optional[str] = Field(None, description="Optional human readable title")
    expires_at: Optional[datetime] = Field(
        None,
        description="Expiry time (UTC when no offset is given), defaults to 30 days"
    )


class URLResponse(URLRecord):
    """Response schema built from a URLRecord

    - @computed_field adds derived fields (like SerializerMethodField in DRF)
    """

    @computed_field
    @property
    def short_url(self) -> str:
        """Computed field - automatically generated from token"""
        return f"{settings.base_url}/{self.token}"

    @computed_field
    @property
    def is_expired(self) -> bool:
        """Evaluated at serialization time"""
        return self.is_expired_at()


class URLListResponse(BaseModel):
    urls: List[URLResponse]


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
