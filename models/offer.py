"""
Offer data model — one compensation data point extracted from a post.
"""

import re
from typing import Literal, Optional, Union
from pydantic import BaseModel, Field, field_validator

from models.post import Post


_MULTIPLIERS = {"k": 1_000, "m": 1_000_000}
_NUMBER_RE = re.compile(r"^(-?\d+(?:\.\d+)?)\s*([km])?$", re.IGNORECASE)

STANDARD_FIELDS = (
    "company",
    "role",
    "yoe",
    "base_offer",
    "total_offer",
    "location",
    "visa_sponsorship",
    "post_id",
    "post_title",
    "post_date",
    "post_timestamp",
)


def _parse_number(value) -> Optional[float]:
    """Coerce loose LLM numbers ("$210k", "210,000", "1.2M") to a number or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip().lower().replace(",", "").replace("$", "").replace("usd", "").strip()
    match = _NUMBER_RE.match(text)
    if not match:
        return None

    number = float(match.group(1))
    suffix = match.group(2)
    if suffix:
        number *= _MULTIPLIERS[suffix.lower()]
    return int(number) if number.is_integer() else number


def _clean_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("null", "none", "unknown", "n/a"):
        return None
    return text


class ExtractedOffer(BaseModel):
    """Offer fields as returned by the extractor, before provenance is stamped."""

    company: Optional[str] = Field(default=None, description="Company name")
    role: Optional[str] = Field(default=None, description="Role or level")
    yoe: Optional[Union[int, float]] = Field(default=None, description="Years of experience")
    base_offer: Optional[Union[int, float]] = Field(default=None, description="Base salary")
    total_offer: Optional[Union[int, float]] = Field(default=None, description="Total compensation")
    location: Optional[str] = Field(default=None, description="Office location")
    visa_sponsorship: Optional[Literal["yes", "no"]] = Field(
        default=None, description="Whether visa sponsorship was mentioned"
    )

    @field_validator("company", "role", "location", mode="before")
    @classmethod
    def _strings(cls, value):
        return _clean_text(value)

    @field_validator("yoe", "base_offer", "total_offer", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _parse_number(value)

    @field_validator("visa_sponsorship", mode="before")
    @classmethod
    def _visa(cls, value):
        if isinstance(value, bool):
            return "yes" if value else "no"
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("yes", "y", "true"):
                return "yes"
            if text in ("no", "n", "false"):
                return "no"
        return None

    def has_signal(self) -> bool:
        """True when the offer carries at least one identifying or pay field."""
        return any(
            value is not None
            for value in (self.company, self.role, self.base_offer, self.total_offer)
        )


class Offer(ExtractedOffer):
    """An extracted offer stamped with the post it came from."""

    post_id: str = Field(description="Id of the source post")
    post_title: str = Field(description="Title of the source post")
    post_date: str = Field(description="UTC calendar date of the post (YYYY-MM-DD)")
    post_timestamp: int = Field(description="Post creation time in epoch milliseconds")

    @classmethod
    def from_extracted(cls, extracted: ExtractedOffer, post: Post) -> "Offer":
        return cls(
            **extracted.model_dump(),
            post_id=post.id,
            post_title=post.title,
            post_date=post.post_date,
            post_timestamp=post.timestamp_ms,
        )

    def identity_key(self) -> tuple:
        return identity_key(self.model_dump())


def identity_key(offer: dict) -> tuple:
    """Deduplication key: (company, role, total_offer, post_id)."""
    return (
        offer.get("company"),
        offer.get("role"),
        offer.get("total_offer"),
        offer.get("post_id"),
    )
