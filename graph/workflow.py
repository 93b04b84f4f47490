"""
LangGraph Workflow — defines the ingestion graph with state transitions.

Graph structure:
    planner → scraper ⇄ parser → dedup → formatter

The graph loops between scraper and parser while posts keep coming, and
proceeds to dedup once the stream ends, the call budget is spent, or the
provider reports quota exhaustion.
"""

from typing import Callable

from langgraph.graph import StateGraph, END
from models.state import IngestState
from models.summary import RunSummary
from graph.context import PipelineContext
from agents.planner import planner_agent
from agents.scraper import scraper_agent
from agents.parser import parser_agent
from agents.dedup import dedup_agent
from agents.formatter import formatter_agent


def _bind(agent: Callable, context: PipelineContext) -> Callable[[IngestState], dict]:
    """Close a context-aware agent over the run's context."""

    def node(state: IngestState) -> dict:
        return agent(state, context)

    return node


def after_scraper(state: IngestState) -> str:
    """
    Conditional edge: extract the fetched post, or merge when there is none.

    Returns:
        'parser' if a post was fetched, 'dedup' otherwise.
    """
    if state.get("current_post") is None:
        return "dedup"
    return "parser"


def after_parser(state: IngestState) -> str:
    """
    Conditional edge: fetch the next post unless the run was halted.

    Returns:
        'scraper' to continue, 'dedup' on quota exhaustion.
    """
    if state.get("stop_reason"):
        return "dedup"
    return "scraper"


def build_workflow(context: PipelineContext):
    """
    Build and compile the ingestion workflow for one context.

    Returns:
        Compiled StateGraph ready to invoke.
    """
    workflow = StateGraph(IngestState)

    workflow.add_node("planner", _bind(planner_agent, context))
    workflow.add_node("scraper", _bind(scraper_agent, context))
    workflow.add_node("parser", _bind(parser_agent, context))
    workflow.add_node("dedup", dedup_agent)
    workflow.add_node("formatter", _bind(formatter_agent, context))

    workflow.set_entry_point("planner")

    # Planner → Scraper
    workflow.add_edge("planner", "scraper")

    # Scraper → conditional: got a post? → parser  OR  → dedup
    workflow.add_conditional_edges(
        "scraper",
        after_scraper,
        {
            "parser": "parser",
            "dedup": "dedup",
        },
    )

    # Parser → conditional: halted? → dedup  OR  → scraper (loop back)
    workflow.add_conditional_edges(
        "parser",
        after_parser,
        {
            "scraper": "scraper",
            "dedup": "dedup",
        },
    )

    # Dedup → Formatter
    workflow.add_edge("dedup", "formatter")

    # Formatter → END
    workflow.add_edge("formatter", END)

    return workflow.compile()


def initial_state() -> IngestState:
    return {
        "existing_offers": [],
        "checkpoint_post_id": None,
        "mode": "full",
        "post_stream": None,
        "current_post": None,
        "newest_post_id": None,
        "processed": 0,
        "calls_made": 0,
        "successful": 0,
        "new_offers": [],
        "stop_reason": None,
        "merged_offers": [],
        "added_count": 0,
        "summary": {},
        "errors": [],
    }


def run_pipeline(context: PipelineContext) -> RunSummary:
    """
    Execute one ingestion run.

    Raises:
        PostFetchError: If pagination fails for a non-quota reason.
        LocalStoreError: If the dataset cannot be written locally.
    """
    graph = build_workflow(context)

    # Two graph steps per post, plus the fixed nodes
    depth = max(context.incremental_depth, context.full_depth)
    result = graph.invoke(initial_state(), config={"recursion_limit": 2 * depth + 10})

    return RunSummary(**result["summary"])
