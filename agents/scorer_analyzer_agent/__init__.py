"""
Scorer Analyzer Agent

Heuristic scoring of provider answers and aggregation into a brand
awareness analysis.
"""

from agents.scorer_analyzer_agent.models import ScoringRules, DEFAULT_RULES
from agents.scorer_analyzer_agent.utils import (
    check_entity_recognized,
    calculate_confidence,
    analyze_positioning,
    score_response,
    parse_batch_competitor_response,
)
from agents.scorer_analyzer_agent.aggregator import analyze_brand_awareness


__all__ = [
    "ScoringRules",
    "DEFAULT_RULES",
    "check_entity_recognized",
    "calculate_confidence",
    "analyze_positioning",
    "score_response",
    "parse_batch_competitor_response",
    "analyze_brand_awareness",
]
