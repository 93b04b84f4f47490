"""
Pipeline Context — the collaborators and limits one ingestion run works with.
Built from Settings by `build_context`; tests construct it directly with fakes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional, Protocol

from agents.extractor import OfferExtractor
from config.settings import Settings
from models.offer import ExtractedOffer
from models.post import Post
from tools.offer_store import CheckpointStore, OfferStore, build_stores, ingestion_tiers
from tools.pacing import Pacer
from tools.post_source import LeetCodePostSource


class PostSource(Protocol):
    def iter_posts(self, stop_at_id: Optional[str] = None, max_posts: int = 2000) -> Iterator[Post]: ...


class Extractor(Protocol):
    def extract(self, post: Post) -> list[ExtractedOffer]: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PipelineContext:
    offer_store: OfferStore
    checkpoint_store: CheckpointStore
    post_source: PostSource
    extractor: Extractor
    pacer: Pacer
    daily_call_budget: int = 240
    incremental_depth: int = 500
    full_depth: int = 2000
    force_full: bool = False
    output_path: str = ""
    clock: Callable[[], datetime] = field(default=_utc_now)


def build_context(settings: Settings, force_full: bool = False) -> PipelineContext:
    """Wire the production collaborators from settings."""
    local, remote = build_stores(settings)
    if not settings.has_remote_credentials:
        print("[Context] ⚠️  GIST_ID or GITHUB_TOKEN not set; remote writes will be skipped")

    tiers = ingestion_tiers(local, remote)
    return PipelineContext(
        offer_store=OfferStore(tiers, filename=settings.dataset_filename),
        checkpoint_store=CheckpointStore(tiers, filename=settings.checkpoint_filename),
        post_source=LeetCodePostSource(
            graphql_url=settings.leetcode_graphql_url,
            category=settings.post_category,
            page_size=settings.post_page_size,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        ),
        extractor=OfferExtractor.from_settings(settings),
        pacer=Pacer(
            short_delay=settings.pacing_short_delay,
            long_delay=settings.pacing_long_delay,
            long_every=settings.pacing_long_every,
        ),
        daily_call_budget=settings.daily_call_budget,
        incremental_depth=settings.incremental_depth,
        full_depth=settings.full_depth,
        force_full=force_full,
        output_path=local.path_for(settings.dataset_filename),
    )
