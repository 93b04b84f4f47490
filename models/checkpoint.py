"""
Checkpoint data model — ingestion cursor persisted between runs.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Checkpoint(BaseModel):
    """Id of the newest ingested post plus bookkeeping about the last run."""

    model_config = ConfigDict(populate_by_name=True)

    last_post_id: str = Field(alias="lastPostId", min_length=1)
    last_fetch_time: Optional[int] = Field(default=None, alias="lastFetchTime")
    total_offers: Optional[int] = Field(default=None, alias="totalOffers")

    @classmethod
    def create(cls, last_post_id: str, total_offers: int, now: datetime = None) -> "Checkpoint":
        now = now or datetime.now(timezone.utc)
        return cls(
            last_post_id=last_post_id,
            last_fetch_time=int(now.timestamp() * 1000),
            total_offers=total_offers,
        )

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)
