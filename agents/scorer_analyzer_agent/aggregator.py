"""
Aggregates scored provider results into a brand awareness analysis.
"""

import logging
from typing import Dict, List, Optional, Sequence

from models.schemas import (
    ProviderResult,
    BrandAwarenessAnalysis,
    ServiceKnowledge,
    CompetitorPositioning,
)

logger = logging.getLogger(__name__)


def _percentage(numerator: int, denominator: int) -> int:
    """Whole-number percentage, rounding halves up; 0 for an empty denominator."""
    if denominator <= 0:
        return 0
    return int(numerator * 100 / denominator + 0.5)


def calculate_overall_recognition(results: Sequence[ProviderResult]) -> int:
    """Share of brand recall answers that recognised the business."""
    brand_recall = [r for r in results if r.query_type == "brand_recall"]
    recognized = sum(1 for r in brand_recall if r.recognized)
    return _percentage(recognized, len(brand_recall))


def build_service_knowledge(results: Sequence[ProviderResult]) -> List[ServiceKnowledge]:
    """Group service checks by service, in order of first appearance."""
    by_service: Dict[str, ServiceKnowledge] = {}

    for result in results:
        if result.query_type != "service_check" or not result.tested_attribute:
            continue

        entry = by_service.setdefault(
            result.tested_attribute,
            ServiceKnowledge(service=result.tested_attribute)
        )
        if result.attribute_mentioned:
            entry.known_by.append(result.provider)
        else:
            entry.unknown_by.append(result.provider)

    return list(by_service.values())


def build_competitor_breakdown(results: Sequence[ProviderResult]) -> Dict[str, Dict[str, str]]:
    """competitor -> provider -> positioning for every comparison result."""
    breakdown: Dict[str, Dict[str, str]] = {}
    for result in results:
        if result.query_type != "competitor_compare" or not result.compared_to:
            continue
        breakdown.setdefault(result.compared_to, {})[result.provider] = result.positioning
    return breakdown


def analyze_brand_awareness(results: Sequence[ProviderResult]) -> BrandAwarenessAnalysis:
    """
    Reduce a completed run's results into a BrandAwarenessAnalysis.

    Pure function: no I/O, inputs are not modified.

    Args:
        results: Every ProviderResult of one run

    Returns:
        BrandAwarenessAnalysis with overall recognition, per-service knowledge,
        knowledge gaps and competitor positioning (when comparisons were run)
    """
    overall_recognition = calculate_overall_recognition(results)

    service_knowledge = build_service_knowledge(results)
    knowledge_gaps = [entry.service for entry in service_knowledge if not entry.known_by]

    competitor_breakdown = build_competitor_breakdown(results)
    competitor_positioning: Optional[CompetitorPositioning] = None
    if competitor_breakdown:
        # Headline positioning is reported against the first compared competitor
        first_competitor = next(iter(competitor_breakdown))
        competitor_positioning = CompetitorPositioning(
            competitor=first_competitor,
            positioning=dict(competitor_breakdown[first_competitor])
        )

    logger.debug(
        f"Brand awareness analysis: {overall_recognition}% recognition, "
        f"{len(knowledge_gaps)} knowledge gaps, {len(competitor_breakdown)} competitors"
    )

    return BrandAwarenessAnalysis(
        overall_recognition=overall_recognition,
        service_knowledge=service_knowledge,
        knowledge_gaps=knowledge_gaps,
        competitor_positioning=competitor_positioning,
        competitor_breakdown=competitor_breakdown,
    )
