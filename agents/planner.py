"""
Planner Agent — loads the checkpoint and the existing dataset, picks the run mode.
This is a deterministic agent (no LLM needed).
"""

from graph.context import PipelineContext
from models.state import IngestState


def planner_agent(state: IngestState, context: PipelineContext) -> dict:
    """
    Bootstrap a run.

    A saved cursor selects incremental mode with a shallow pagination bound;
    no cursor (or a forced full run) selects full mode with a deeper bound.
    The post stream is opened lazily here and consumed by the scraper.
    """
    checkpoint = None if context.force_full else context.checkpoint_store.load()
    existing_offers = context.offer_store.load()

    if checkpoint is not None:
        mode = "incremental"
        stop_at_id = checkpoint.last_post_id
        depth = context.incremental_depth
        print(f"[Planner] 🔄 Incremental update mode: fetching posts newer than {stop_at_id}")
    else:
        mode = "full"
        stop_at_id = None
        depth = context.full_depth
        print(f"[Planner] 🆕 Full fetch mode: fetching up to {depth} posts")

    print(f"[Planner] {len(existing_offers)} existing offers, budget {context.daily_call_budget} LLM calls")

    return {
        "existing_offers": existing_offers,
        "checkpoint_post_id": stop_at_id,
        "mode": mode,
        "post_stream": iter(context.post_source.iter_posts(stop_at_id=stop_at_id, max_posts=depth)),
    }
