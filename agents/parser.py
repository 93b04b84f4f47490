"""
Parser Agent — sends the current post to the offer extractor.
Skips down-voted posts, paces calls, and stamps offers with their source post.
"""

from agents.scraper import close_stream
from graph.context import PipelineContext
from models.offer import Offer
from models.state import IngestState
from tools.errors import QuotaExceeded


def parser_agent(state: IngestState, context: PipelineContext) -> dict:
    """
    Extract offers from state['current_post'].

    QuotaExceeded halts the run (stop_reason="quota"); any other extraction
    failure is recorded in errors and the run moves on to the next post.
    """
    post = state["current_post"]
    calls_made = state.get("calls_made", 0)

    if post.vote_count < 0:
        print("[Parser]   ⚠️  Skipping due to negative votes.")
        return {}

    context.pacer.wait(calls_made)
    calls_made += 1

    try:
        extracted = context.extractor.extract(post)
    except QuotaExceeded:
        print("\n[Parser] ⚠️  Daily quota exceeded. Stopping processing.")
        print(
            f"[Parser]    Processed {state.get('processed', 0)} posts, "
            f"found {state.get('successful', 0)} with valid offers."
        )
        print("[Parser]    Remaining posts will be processed tomorrow.\n")
        close_stream(state)
        return {"calls_made": calls_made, "stop_reason": "quota"}
    except Exception as e:
        error_msg = f"Extraction failed for post {post.id}: {e}"
        print(f"[Parser]   ⚠️  {error_msg}, continuing...")
        return {"calls_made": calls_made, "errors": [error_msg]}

    if not extracted:
        print("[Parser]   ℹ️  No valid offers found")
        return {"calls_made": calls_made}

    offers = [Offer.from_extracted(offer, post).model_dump() for offer in extracted]
    print(f"[Parser]   ✅ Found {len(offers)} offer(s)")

    return {
        "calls_made": calls_made,
        "successful": state.get("successful", 0) + 1,
        "new_offers": offers,
    }
