"""
LangGraph workflow definition for brand awareness testing.
"""

from typing import Dict, List, Optional

from langgraph.graph import StateGraph, START, END

from agents.brand_awareness_agent.models import BrandAwarenessState
from agents.brand_awareness_agent.nodes import (
    generate_queries,
    run_queries,
    analyze,
    competitive_summary,
    finalize
)
from agents.scorer_analyzer_agent.models import ScoringRules
from models.schemas import BusinessProfile


# Singleton graph instance
_graph = None


def create_brand_awareness_graph():
    """Create the LangGraph workflow for brand awareness testing."""
    workflow = StateGraph(BrandAwarenessState)

    # Add nodes
    workflow.add_node("generate_queries", generate_queries)
    workflow.add_node("run_queries", run_queries)
    workflow.add_node("analyze", analyze)
    workflow.add_node("competitive_summary", competitive_summary)
    workflow.add_node("finalize", finalize)

    # Define edges (workflow)
    workflow.add_edge(START, "generate_queries")
    workflow.add_edge("generate_queries", "run_queries")
    workflow.add_edge("run_queries", "analyze")
    workflow.add_edge("analyze", "competitive_summary")
    workflow.add_edge("competitive_summary", "finalize")
    workflow.add_edge("finalize", END)

    return workflow.compile()


def get_brand_awareness_graph():
    """Get or create the brand awareness graph."""
    global _graph
    if _graph is None:
        _graph = create_brand_awareness_graph()
    return _graph


async def run_brand_awareness_workflow(
    run_id: str,
    domain: str,
    profile: BusinessProfile,
    providers: Dict[str, object],
    competitors: Optional[List[str]] = None,
    batch_competitors: bool = False,
    include_summary: bool = True,
    cost_sink=None,
    on_progress=None,
    progress_callback=None,
    summary_provider=None,
    timeout: Optional[float] = None,
    max_services: Optional[int] = None,
    rules: Optional[ScoringRules] = None
):
    """
    Run the brand awareness workflow with optional progress streaming.

    Entry point for the brand awareness agent.

    Args:
        run_id: Scan run id
        domain: Business domain
        profile: Business profile from the site analysis step
        providers: Provider registry (id -> provider)
        competitors: Competitor names to compare against
        batch_competitors: Compare all competitors in one query per provider
        include_summary: Generate a competitive summary
        cost_sink: Optional cost record sink
        on_progress: Optional callback(completed, total) per provider call
        progress_callback: Optional callback(step, status, message, data) per stage
        summary_provider: Provider used for the summary (defaults to claude in the registry)
        timeout: Per-call timeout in seconds
        max_services: Cap on service checks
        rules: Scoring phrase lists (defaults to DEFAULT_RULES)

    Returns:
        Dictionary with queries, results, analysis, competitive_summary and errors
    """
    graph = get_brand_awareness_graph()

    # Prepare initial state
    initial_state = {
        "run_id": run_id,
        "domain": domain,
        "profile": profile,
        "competitors": competitors or [],
        "batch_competitors": batch_competitors,
        "include_summary": include_summary,
        "queries": [],
        "results": [],
        "analysis": None,
        "competitive_summary": None,
        "errors": [],
        "completed": False
    }

    config = {
        "configurable": {
            "providers": providers,
            "cost_sink": cost_sink,
            "on_progress": on_progress,
            "summary_provider": summary_provider,
            "timeout": timeout,
            "max_services": max_services,
            "rules": rules,
        }
    }

    state = initial_state

    # Execute graph with streaming
    async for step_output in graph.astream(initial_state, config=config):
        node_name = list(step_output.keys())[0]
        state = step_output[node_name]

        # Progress callbacks
        if progress_callback:
            if node_name == "generate_queries":
                queries = state.get("queries", [])
                progress_callback(
                    "queries", "completed",
                    f"Generated {len(queries)} queries for {len(providers)} providers",
                    {"total_queries": len(queries), "providers": list(providers)}
                )
            elif node_name == "run_queries":
                results = state.get("results", [])
                progress_callback(
                    "testing", "completed",
                    f"Received {len(results)} provider results",
                    {"total_results": len(results), "failed": len(state.get("errors", []))}
                )
            elif node_name == "analyze":
                analysis = state.get("analysis")
                progress_callback(
                    "analysis", "completed",
                    f"Overall recognition {analysis.overall_recognition}%",
                    {"overall_recognition": analysis.overall_recognition}
                )
            elif node_name == "competitive_summary":
                done = state.get("competitive_summary") is not None
                progress_callback(
                    "summary", "completed" if done else "skipped",
                    "Competitive summary generated" if done else "No competitive summary",
                    None
                )
            elif node_name == "finalize":
                progress_callback("finalize", "completed", "Brand awareness analysis complete", None)

    return {
        "queries": state.get("queries", []),
        "results": state.get("results", []),
        "analysis": state.get("analysis"),
        "competitive_summary": state.get("competitive_summary"),
        "errors": state.get("errors", [])
    }
