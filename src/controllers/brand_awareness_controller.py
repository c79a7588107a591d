"""
Brand Awareness Controller

Handles business logic for a brand awareness run: provider setup, the
workflow, report assembly and persistence.
"""

import logging
from typing import Dict, Any, Optional

from agents.brand_awareness_agent import run_brand_awareness_workflow
from agents.ai_model_tester_agent.providers import build_provider_registry
from agents.scorer_analyzer_agent.models import ScoringRules
from models.schemas import BrandAwarenessRequest, BrandAwarenessReport
from config.settings import settings
from src.controllers.cache_manager import save_report
from utils.cost_tracker import build_cost_sink
from utils.helpers import generate_run_id, normalize_domain, sanitize_business_name

logger = logging.getLogger(__name__)


async def analyze_brand_awareness_request(
    request: BrandAwarenessRequest,
    progress_callback=None,
    on_progress=None,
    providers: Optional[Dict[str, object]] = None,
    cost_sink=None,
    persist: bool = True,
    rules: Optional[ScoringRules] = None
) -> BrandAwarenessReport:
    """
    Execute one brand awareness run.

    Args:
        request: Validated API request
        progress_callback: Optional callback(step, status, message, data) per stage
        on_progress: Optional callback(completed, total) per provider call
        providers: Provider registry override (built from settings when None)
        cost_sink: Cost sink override (built from settings when None)
        persist: Save the report to Redis
        rules: Scoring phrase lists (defaults to DEFAULT_RULES)

    Returns:
        BrandAwarenessReport

    Raises:
        ValueError: If the domain is blank or a provider id is unknown
    """
    domain = normalize_domain(request.domain)
    if not domain:
        raise ValueError("domain must not be empty")

    if providers is None:
        providers = build_provider_registry(settings, request.providers)
    if cost_sink is None:
        cost_sink = build_cost_sink(settings)

    profile = request.profile.model_copy(
        update={"business_name": sanitize_business_name(request.profile.business_name)}
    )

    run_id = request.run_id or generate_run_id()

    logger.info(f"[{run_id}] Starting brand awareness for {domain} ({', '.join(providers)})")

    workflow_result = await run_brand_awareness_workflow(
        run_id=run_id,
        domain=domain,
        profile=profile,
        providers=providers,
        competitors=request.competitors,
        batch_competitors=request.batch_competitors,
        include_summary=request.include_summary,
        cost_sink=cost_sink,
        on_progress=on_progress,
        progress_callback=progress_callback,
        timeout=settings.PROVIDER_TIMEOUT_SECONDS,
        rules=rules
    )

    report = build_report(run_id, domain, profile.business_name or domain, workflow_result)

    if persist:
        # Overwrites any earlier report of a re-enriched run; a failed run keeps it
        save_report(run_id, report.model_dump())

    return report


def build_report(
    run_id: str,
    domain: str,
    business_name: str,
    workflow_state: Dict[str, Any]
) -> BrandAwarenessReport:
    """Map workflow output to the persisted report."""
    results = workflow_state.get("results", [])
    errors = workflow_state.get("errors", [])
    status_value = "completed" if not errors else "completed_with_errors"

    return BrandAwarenessReport(
        run_id=run_id,
        domain=domain,
        business_name=business_name,
        status=status_value,
        total_queries=len(workflow_state.get("queries", [])),
        total_results=len(results),
        recognized=sum(1 for r in results if r.recognized),
        analysis=workflow_state["analysis"],
        competitive_summary=workflow_state.get("competitive_summary"),
        queries=workflow_state.get("queries", []),
        results=results,
        errors=errors
    )
