"""
Utility functions for the brand awareness response scorer.

All functions here are pure: identical inputs always give identical
recognized / confidence / positioning outputs.
"""

import logging
import re
import unicodedata
from typing import List, Optional, Tuple

from agents.scorer_analyzer_agent.models import ScoringRules, DEFAULT_RULES
from models.schemas import BrandAwarenessQuery

logger = logging.getLogger(__name__)

MIN_SECTION_LENGTH = 50


def strip_accents(text: str) -> str:
    """
    Strip diacritics so "Ella Baché" matches "Ella Bache".

    Example:
        >>> strip_accents("café")
        'cafe'
    """
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str) -> str:
    """Lowercase, accent-free, straight apostrophes."""
    if not text:
        return ""
    text = text.replace("’", "'").replace("‘", "'")
    return strip_accents(text.lower())


def check_entity_recognized(
    response: str,
    entity: str,
    domain: Optional[str] = None,
    rules: ScoringRules = DEFAULT_RULES
) -> bool:
    """
    Check if the provider recognised the entity rather than just echoing it.

    Recognised means the name or the domain appears AND none of the hedging
    phrases ("i'm not familiar with", ...) do. A hedging phrase always wins.
    """
    normalized_response = normalize_text(response)
    normalized_entity = normalize_text(entity).strip()

    has_entity = bool(normalized_entity) and normalized_entity in normalized_response
    has_domain = bool(domain) and domain.lower().strip() in normalized_response

    if not has_entity and not has_domain:
        return False

    for phrase in rules.hedging_phrases:
        if normalize_text(phrase) in normalized_response:
            return False

    return True


def check_attribute_mentioned(response: str, attribute: Optional[str]) -> bool:
    """Whether the tested attribute (service) appears in the response."""
    if not attribute or not attribute.strip():
        return False
    return normalize_text(attribute).strip() in normalize_text(response)


def calculate_confidence(
    response: str,
    query: BrandAwarenessQuery,
    recognized: bool,
    rules: ScoringRules = DEFAULT_RULES
) -> int:
    """
    Confidence score (0-100) based on response quality.

    50 for recognition, +25 when the tested attribute appears, +10 per
    length threshold passed, +5 per confident phrase.
    """
    if not recognized:
        return 0

    score = rules.base_score
    lower_response = normalize_text(response)

    if check_attribute_mentioned(response, query.tested_attribute):
        score += rules.attribute_bonus

    for threshold in rules.length_thresholds:
        if len(response) > threshold:
            score += rules.length_bonus

    for phrase in rules.confident_phrases:
        if normalize_text(phrase) in lower_response:
            score += rules.confident_phrase_bonus

    return max(0, min(score, 100))


def analyze_positioning(
    response: str,
    entity: str,
    competitor: str,
    rules: ScoringRules = DEFAULT_RULES
) -> str:
    """
    Classify which of the two compared businesses the response favours.

    Stronger templates are checked before weaker ones and the first match
    wins. With no comparative phrase, both names present means "equal".
    """
    lower_response = normalize_text(response)
    lower_entity = normalize_text(entity).strip()
    lower_competitor = normalize_text(competitor).strip()

    if not lower_entity or not lower_competitor:
        return "not_compared"

    for template in rules.stronger_templates:
        indicator = template.format(entity=lower_entity, competitor=lower_competitor)
        if indicator in lower_response:
            return "stronger"

    for template in rules.weaker_templates:
        indicator = template.format(entity=lower_entity, competitor=lower_competitor)
        if indicator in lower_response:
            return "weaker"

    if lower_entity in lower_response and lower_competitor in lower_response:
        return "equal"

    return "not_compared"


def score_response(
    response: str,
    query: BrandAwarenessQuery,
    rules: ScoringRules = DEFAULT_RULES
) -> Tuple[bool, bool, int, str]:
    """
    Score a single response.

    Returns:
        (recognized, attribute_mentioned, confidence_score, positioning)
    """
    recognized = check_entity_recognized(response, query.tested_entity, query.tested_domain, rules)
    attribute_mentioned = check_attribute_mentioned(response, query.tested_attribute)
    confidence = calculate_confidence(response, query, recognized, rules)

    positioning = "not_compared"
    if query.type == "competitor_compare" and query.compared_to:
        positioning = analyze_positioning(response, query.tested_entity, query.compared_to, rules)

    return recognized, attribute_mentioned, confidence, positioning


# ============================================================================
# Batch competitor responses
# ============================================================================

def _section_start_patterns(escaped: str) -> List[str]:
    return [
        # Numbered sections: "1. Name:" / "1) Name"
        rf"(^|\n)\d+[.)]\s*{escaped}:?\s*",
        # Markdown headers: "## Name" / "### vs. Name"
        rf"(^|\n)##?#?\s*(?:vs\.?\s*)?{escaped}:?\s*",
        # Bold headers: "**Name**" / "**Name:**"
        rf"(^|\n)\*\*{escaped}:?\*\*:?\s*",
        # Bare name on its own line
        rf"(^|\n){escaped}:?\s*\n",
    ]


def _next_section_patterns(competitor: str, competitors: List[str]) -> List[str]:
    patterns = [r"\n\d+[.)]\s+"]
    for other in competitors:
        if other.lower() == competitor.lower():
            continue
        escaped_other = re.escape(other)
        patterns.extend([
            rf"\n\d+[.)]\s*{escaped_other}:?\s*",
            rf"\n##?#?\s*(?:vs\.?\s*)?{escaped_other}:?\s*",
            rf"\n\*\*{escaped_other}:?\*\*",
        ])
    return patterns


def extract_competitor_section(response_text: str, competitor: str, competitors: List[str]) -> str:
    """
    Extract the part of a batch answer that discusses one competitor.

    Section headers may be numbered items, markdown headers, bold text or the
    bare name on its own line. The section ends where the next numbered item
    or another competitor's header starts. Falls back to the whole response
    when nothing substantial is found.
    """
    escaped = re.escape(competitor)
    flags = re.IGNORECASE | re.MULTILINE

    for pattern in _section_start_patterns(escaped):
        match = re.search(pattern, response_text, flags)
        if not match:
            continue

        start_index = match.start() + len(match.group(1) or "")
        search_start = match.end()
        end_index = len(response_text)

        remainder = response_text[search_start:]
        for next_pattern in _next_section_patterns(competitor, competitors):
            next_match = re.search(next_pattern, remainder, re.IGNORECASE)
            if next_match:
                end_index = min(end_index, search_start + next_match.start())

        section = response_text[start_index:end_index].strip()
        if len(section) > MIN_SECTION_LENGTH:
            return section

    return response_text


def analyze_positioning_from_text(
    text: str,
    brand_name: str,
    competitor: str,
    rules: ScoringRules = DEFAULT_RULES
) -> str:
    """Count advantage phrases for each side of a batch section."""
    lower_text = normalize_text(text)
    lower_brand = normalize_text(brand_name).strip()
    lower_competitor = normalize_text(competitor).strip()

    brand_score = sum(
        1 for template in rules.advantage_templates
        if template.format(name=lower_brand) in lower_text
    )
    competitor_templates = rules.advantage_templates + rules.competitor_advantage_templates
    competitor_score = sum(
        1 for template in competitor_templates
        if template.format(name=lower_competitor) in lower_text
    )

    if brand_score > competitor_score:
        return "stronger"
    if competitor_score > brand_score:
        return "weaker"
    return "equal"


def parse_batch_competitor_response(
    response_text: str,
    competitors: List[str],
    brand_name: Optional[str] = None,
    rules: ScoringRules = DEFAULT_RULES
) -> List[Tuple[str, str, str]]:
    """
    Split a batch comparison answer into per-competitor results.

    Returns:
        List of (competitor, positioning, section_text) tuples
    """
    parsed = []
    for competitor in competitors:
        section = extract_competitor_section(response_text, competitor, competitors)
        positioning = (
            analyze_positioning_from_text(section, brand_name, competitor, rules)
            if brand_name else "equal"
        )
        parsed.append((competitor, positioning, section))
    return parsed
