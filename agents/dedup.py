"""
Dedup Agent — deterministic merge of newly extracted offers into the dataset.
No LLM needed.
"""

from models.offer import identity_key
from models.state import IngestState


def merge_offers(existing: list[dict], new: list[dict]) -> tuple[list[dict], list[dict]]:
    """
    Append new offers whose identity key is not already in the dataset.

    Existing offers keep their order; new offers are appended in the order
    they were extracted. Duplicates inside `new` collapse to the first one.

    Returns:
        (merged dataset, offers that were actually added)
    """
    seen_keys = {identity_key(offer) for offer in existing}
    added = []

    for offer in new:
        key = identity_key(offer)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        added.append(offer)

    return existing + added, added


def dedup_agent(state: IngestState) -> dict:
    """Merge state['new_offers'] into state['existing_offers']."""
    existing = state.get("existing_offers", [])
    new = state.get("new_offers", [])

    merged, added = merge_offers(existing, new)

    print(f"\n[Dedup] {len(new)} extracted offers, {len(new) - len(added)} duplicates removed")
    print(f"[Dedup] {len(merged)} offers total ({len(existing)} existing + {len(added)} new)")

    return {
        "merged_offers": merged,
        "added_count": len(added),
    }
