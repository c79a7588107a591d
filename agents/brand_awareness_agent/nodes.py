"""
Node functions for the brand awareness LangGraph workflow.

Providers, the cost sink and the per-completion progress callback are not
part of the state; they are read from config["configurable"].
"""

import logging

from langchain_core.runnables import RunnableConfig

from agents.brand_awareness_agent.models import BrandAwarenessState
from agents.query_generator import generate_brand_awareness_queries
from agents.ai_model_tester_agent.utils import run_brand_awareness_queries
from agents.scorer_analyzer_agent.aggregator import analyze_brand_awareness
from agents.scorer_analyzer_agent.models import DEFAULT_RULES
from agents.competitive_summary import generate_competitive_summary, SUMMARY_PROVIDER

logger = logging.getLogger(__name__)


def _configurable(config: RunnableConfig) -> dict:
    return (config or {}).get("configurable", {})


def generate_queries(state: BrandAwarenessState, config: RunnableConfig) -> BrandAwarenessState:
    """Node: Build the ordered query list for the business."""
    run_id = state["run_id"]
    logger.info(f"[{run_id}] 🔍 Generating brand awareness queries for {state['domain']}...")

    configurable = _configurable(config)
    queries = generate_brand_awareness_queries(
        state["profile"],
        state["domain"],
        competitors=state.get("competitors") or [],
        batch_competitors=state.get("batch_competitors", False),
        max_services=configurable.get("max_services"),
    )

    state["queries"] = queries
    logger.info(f"[{run_id}] Generated {len(queries)} queries")

    return state


async def run_queries(state: BrandAwarenessState, config: RunnableConfig) -> BrandAwarenessState:
    """Node: Ask every provider every query, concurrently."""
    run_id = state["run_id"]
    configurable = _configurable(config)
    providers = configurable.get("providers") or {}
    errors = list(state.get("errors", []))

    if not providers:
        errors.append("No providers configured")
        state["results"] = []
        state["errors"] = errors
        return state

    logger.info(f"[{run_id}] 🧪 Querying {len(providers)} providers...")

    results = await run_brand_awareness_queries(
        state.get("queries", []),
        providers,
        run_id,
        on_progress=configurable.get("on_progress"),
        cost_sink=configurable.get("cost_sink"),
        rules=configurable.get("rules") or DEFAULT_RULES,
        timeout=configurable.get("timeout"),
        errors=errors,
    )

    state["results"] = results
    state["errors"] = errors

    return state


def analyze(state: BrandAwarenessState) -> BrandAwarenessState:
    """Node: Aggregate results into recognition, service knowledge and positioning."""
    run_id = state["run_id"]
    logger.info(f"[{run_id}] 📊 Analyzing {len(state.get('results', []))} results...")

    analysis = analyze_brand_awareness(state.get("results", []))
    state["analysis"] = analysis

    logger.info(
        f"[{run_id}] Overall recognition {analysis.overall_recognition}%, "
        f"{len(analysis.knowledge_gaps)} knowledge gaps"
    )

    return state


async def competitive_summary(state: BrandAwarenessState, config: RunnableConfig) -> BrandAwarenessState:
    """Node: Synthesise comparison answers into a competitive summary."""
    run_id = state["run_id"]
    state["competitive_summary"] = None

    if not state.get("include_summary", True):
        logger.info(f"[{run_id}] Competitive summary disabled for this run")
        return state

    configurable = _configurable(config)
    provider = configurable.get("summary_provider")
    if provider is None:
        provider = (configurable.get("providers") or {}).get(SUMMARY_PROVIDER)

    if provider is None:
        logger.info(f"[{run_id}] No {SUMMARY_PROVIDER} provider, skipping competitive summary")
        return state

    profile = state["profile"]
    state["competitive_summary"] = await generate_competitive_summary(
        state.get("results", []),
        profile.business_name or state["domain"],
        provider,
        run_id,
        cost_sink=configurable.get("cost_sink"),
    )

    return state


def finalize(state: BrandAwarenessState) -> BrandAwarenessState:
    """Node: Log the run summary and mark complete."""
    run_id = state["run_id"]
    results = state.get("results", [])
    recognized = sum(1 for r in results if r.recognized)

    logger.info(
        f"[{run_id}] ✅ Brand awareness complete: {len(state.get('queries', []))} queries, "
        f"{len(results)} results, {recognized} recognized"
    )
    if state.get("errors"):
        logger.warning(f"[{run_id}] Completed with {len(state['errors'])} errors")

    state["completed"] = True
    return state
