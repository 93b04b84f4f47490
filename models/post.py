"""
Post data model — one forum submission from the post source.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator


class Post(BaseModel):
    """A single compensation post, as returned by the post source."""

    id: str = Field(description="Opaque post id")
    title: str = Field(default="", description="Post title")
    content: str = Field(default="", description="Raw post body")
    vote_count: int = Field(default=0, description="Net votes, may be negative")
    creation_date: datetime = Field(description="Creation time (UTC)")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        return str(value)

    @field_validator("creation_date", mode="before")
    @classmethod
    def _epoch_seconds(cls, value):
        if isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        return value

    @field_validator("creation_date")
    @classmethod
    def _ensure_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def post_date(self) -> str:
        return self.creation_date.date().isoformat()

    @property
    def timestamp_ms(self) -> int:
        return int(self.creation_date.timestamp() * 1000)
