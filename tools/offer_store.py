"""
Offer Store — persistence for the offer dataset and the ingestion checkpoint.
Both documents live in a remote gist and a local directory.
"""

from typing import Optional

from pydantic import ValidationError

from config.settings import Settings
from models.checkpoint import Checkpoint
from tools.file_store import LocalFileStore
from tools.gist_store import GistStore
from tools.tiered_store import Tier, TieredStore


def build_stores(settings: Settings) -> tuple[LocalFileStore, GistStore]:
    """Create the local and remote adapters from settings."""
    local = LocalFileStore(settings.resolved_output_dir, ephemeral=settings.ephemeral_fs)
    remote = GistStore(
        settings.gist_id,
        settings.github_token,
        api_url=settings.gist_api_url,
        timeout=settings.request_timeout,
    )
    return local, remote


def ingestion_tiers(local: LocalFileStore, remote: GistStore) -> TieredStore:
    """Remote first for reads; local is the required write tier."""
    return TieredStore([Tier(remote, required=False), Tier(local, required=True)])


def _is_checkpoint(data) -> bool:
    if not isinstance(data, dict):
        return False
    try:
        Checkpoint.model_validate(data)
    except ValidationError:
        return False
    return True


def _has_offers(data) -> bool:
    return isinstance(data, list) and any(isinstance(item, dict) for item in data)


class OfferStore:
    """Loads and saves the offer dataset (a JSON array of offers)."""

    def __init__(self, tiers: TieredStore, filename: str = "parsed_comps.json"):
        self.tiers = tiers
        self.filename = filename

    def load(self) -> list[dict]:
        """
        Load the dataset from the first tier whose copy holds at least one offer.

        Returns:
            List of offer dicts; empty if no tier has data.
        """
        offers, source = self.tiers.read_json(self.filename, accept=_has_offers)
        if offers is None:
            return []

        offers = [offer for offer in offers if isinstance(offer, dict)]
        print(f"[Store] Loaded {len(offers)} existing offers from {source}")
        return offers

    def save(self, offers: list[dict]) -> list[str]:
        return self.tiers.write_json(self.filename, offers)


class CheckpointStore:
    """Loads and saves the ingestion checkpoint."""

    def __init__(self, tiers: TieredStore, filename: str = ".leetoffer_metadata.json"):
        self.tiers = tiers
        self.filename = filename

    def load(self) -> Optional[Checkpoint]:
        """
        Return the saved checkpoint, or None when no tier has a valid one.
        A missing checkpoint means the next run fetches in full mode.
        """
        data, source = self.tiers.read_json(self.filename, accept=_is_checkpoint)
        if data is None:
            return None

        checkpoint = Checkpoint.model_validate(data)
        print(f"[Store] Checkpoint from {source}: last post ID was {checkpoint.last_post_id}")
        return checkpoint

    def save(self, checkpoint: Checkpoint) -> list[str]:
        return self.tiers.write_json(self.filename, checkpoint.to_document())


def read_published_offers(settings: Settings) -> list[dict]:
    """
    Dashboard read path: local file first, then the gist.
    A missing or empty document on both sides means no data.
    """
    local, remote = build_stores(settings)
    store = OfferStore(
        TieredStore([Tier(local), Tier(remote)]),
        filename=settings.dataset_filename,
    )
    return store.load()
