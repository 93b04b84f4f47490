"""
Formatter Agent — standardizes offer fields and persists the dataset and checkpoint.
No LLM needed. Runs once, after all posts have been merged.
"""

from graph.context import PipelineContext
from models.checkpoint import Checkpoint
from models.offer import STANDARD_FIELDS
from models.state import IngestState
from models.summary import RunSummary


def _standardize_offer(offer: dict) -> dict:
    """
    Put the known offer fields first, in a fixed order.
    Unknown keys from older datasets are kept after them.
    """
    standardized = {field: offer.get(field) for field in STANDARD_FIELDS}
    for key, value in offer.items():
        if key not in standardized:
            standardized[key] = value
    return standardized


def formatter_agent(state: IngestState, context: PipelineContext) -> dict:
    """
    Save the merged dataset, then the checkpoint if any post was observed.

    The local write is required: DirectoryMissing and other local errors
    propagate. Remote writes are best-effort.
    """
    merged = [_standardize_offer(offer) for offer in state.get("merged_offers", [])]

    print(f"\n[Formatter] Saving {len(merged)} offers...")
    written = context.offer_store.save(merged)
    print(f"[Formatter]   📄 Dataset written to: {', '.join(written)}")

    newest_post_id = state.get("newest_post_id")
    if newest_post_id:
        checkpoint = Checkpoint.create(newest_post_id, len(merged), now=context.clock())
        context.checkpoint_store.save(checkpoint)
        print(f"[Formatter]   📌 Checkpoint moved to post {newest_post_id}")
    else:
        print("[Formatter]   ℹ️  No new posts observed, checkpoint unchanged")

    errors = state.get("errors", [])
    summary = RunSummary(
        processed=state.get("processed", 0),
        successful=state.get("successful", 0),
        total_offers=len(merged),
        new_offers=state.get("added_count", 0),
        output_path=context.output_path,
        mode=state.get("mode", "full"),
        stop_reason=state.get("stop_reason"),
        api_calls=state.get("calls_made", 0),
        errors=len(errors),
    )

    print("\n[Formatter] ✅ Done!")
    print(f"   Processed: {summary.processed} new posts")
    print(f"   Successful: {summary.successful} posts with valid data")
    print(f"   New offers: {summary.new_offers}")
    print(f"   Total offers: {summary.total_offers}")
    print(f"   Data saved to: {summary.output_path}")

    if errors:
        print("\n⚠️  Errors encountered during extraction:")
        for error in errors:
            print(f"  - {error}")

    return {
        "merged_offers": merged,
        "summary": summary.model_dump(),
    }
