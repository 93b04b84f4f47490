"""
Scraper Agent — pulls the next post from the post stream.
Enforces the daily call budget before a post is taken off the stream.
"""

from graph.context import PipelineContext
from models.state import IngestState
from tools.errors import QuotaExceeded


def _stop(state: IngestState, reason: str = None) -> dict:
    close_stream(state)
    update = {"current_post": None}
    if reason:
        update["stop_reason"] = reason
    return update


def close_stream(state: IngestState) -> None:
    stream = state.get("post_stream")
    close = getattr(stream, "close", None)
    if close is not None:
        close()


def scraper_agent(state: IngestState, context: PipelineContext) -> dict:
    """
    Take the next post off the stream.

    Sets current_post to None when the stream is exhausted, the call budget
    is spent, or the source reports quota exhaustion. PostFetchError from
    the source propagates and fails the run.
    """
    calls_made = state.get("calls_made", 0)
    processed = state.get("processed", 0)

    if calls_made >= context.daily_call_budget:
        print(
            f"\n[Scraper] ⚠️  Approaching daily API limit "
            f"({calls_made}/{context.daily_call_budget}). Stopping to avoid quota errors."
        )
        print(f"[Scraper]    Processed {processed} posts, found {state.get('successful', 0)} with valid offers.")
        print("[Scraper]    Remaining posts will be processed in the next run.\n")
        return _stop(state, "budget")

    try:
        post = next(state["post_stream"], None)
    except QuotaExceeded as e:
        print(f"\n[Scraper] ⚠️  Post source quota exceeded: {e}")
        return _stop(state, "quota")

    if post is None:
        return {"current_post": None}

    processed += 1
    print(f"[Scraper] [{processed}] {post.title!r}")

    return {
        "current_post": post,
        "processed": processed,
        # Posts arrive newest first, so the first one seen is the new cursor
        "newest_post_id": state.get("newest_post_id") or post.id,
    }
