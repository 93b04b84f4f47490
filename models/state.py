"""
LangGraph Ingestion State — shared state that flows through the graph.
"""

from typing import Annotated, Iterator, Optional, TypedDict
from models.post import Post


def merge_lists(left: list, right: list) -> list:
    """Reducer that merges two lists (used for accumulating results across loop iterations)."""
    return left + right


class IngestState(TypedDict):
    """
    Shared state for one ingestion run.
    Each node reads from and writes to this state.
    """

    # Planner output: what was loaded and which mode was chosen
    existing_offers: list[dict]
    checkpoint_post_id: Optional[str]
    mode: str
    post_stream: Optional[Iterator[Post]]

    # Scraper output: the post being processed (None once the stream stops)
    current_post: Optional[Post]
    newest_post_id: Optional[str]
    processed: int

    # Parser output: extraction counters and stamped offers
    calls_made: int
    successful: int
    new_offers: Annotated[list[dict], merge_lists]

    # Set when the run halts early: "budget" or "quota"
    stop_reason: Optional[str]

    # Dedup output
    merged_offers: list[dict]
    added_count: int

    # Formatter output
    summary: dict

    # Accumulated per-post errors
    errors: Annotated[list[str], merge_lists]
