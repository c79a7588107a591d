"""
Tests for the response scorer: recognition, confidence, positioning and
batch answer parsing.
"""

from agents.scorer_analyzer_agent.models import ScoringRules, DEFAULT_CONFIDENT_PHRASES
from agents.scorer_analyzer_agent.utils import (
    check_entity_recognized,
    check_attribute_mentioned,
    calculate_confidence,
    analyze_positioning,
    score_response,
    extract_competitor_section,
    analyze_positioning_from_text,
    parse_batch_competitor_response,
)
from models.schemas import BrandAwarenessQuery


RECALL = BrandAwarenessQuery(
    type="brand_recall", prompt="What do you know about Acme?", tested_entity="Acme", tested_domain="acme.com"
)
SERVICE = BrandAwarenessQuery(
    type="service_check", prompt="Does Acme offer consulting?", tested_entity="Acme",
    tested_domain="acme.com", tested_attribute="consulting"
)
COMPARE = BrandAwarenessQuery(
    type="competitor_compare", prompt="Acme or Beta Co?", tested_entity="Acme",
    tested_domain="acme.com", compared_to="Beta Co"
)


# ============================================================================
# Recognition
# ============================================================================

def test_name_match_recognized():
    assert check_entity_recognized("Acme is a Sydney design studio.", "Acme", "acme.com")


def test_domain_match_recognized():
    assert check_entity_recognized("The site acme.com lists several services.", "Acme Pty", "acme.com")


def test_hedging_phrase_wins_over_name_match():
    response = "Acme appears to be a business, but I don't have specific information about its services."
    assert not check_entity_recognized(response, "Acme", "acme.com")


def test_hedging_phrase_with_curly_apostrophe():
    response = "I don’t have specific information about Acme."
    assert not check_entity_recognized(response, "Acme")


def test_absent_entity_not_recognized():
    assert not check_entity_recognized("Beta Co is a consultancy.", "Acme", "acme.com")


def test_empty_entity_never_matches():
    assert not check_entity_recognized("Anything at all.", "")
    assert not check_entity_recognized("Anything at all.", "   ")


def test_accents_are_ignored():
    assert check_entity_recognized("Ella Bache offers skin care treatments.", "Ella Baché")
    assert check_entity_recognized("Ella Baché offers skin care treatments.", "Ella Bache")


def test_custom_hedging_phrases():
    rules = ScoringRules(hedging_phrases=["no idea"])

    assert not check_entity_recognized("Acme? No idea, sorry.", "Acme", rules=rules)
    assert check_entity_recognized("I'm not familiar with Acme.", "Acme", rules=rules)


def test_attribute_mentioned():
    assert check_attribute_mentioned("They do Consulting work.", "consulting")
    assert not check_attribute_mentioned("They do design work.", "consulting")
    assert not check_attribute_mentioned("They do design work.", None)


# ============================================================================
# Confidence
# ============================================================================

def test_unrecognized_confidence_is_zero():
    assert calculate_confidence("I'm not familiar with Acme.", RECALL, recognized=False) == 0


def test_base_confidence():
    assert calculate_confidence("Acme is a company.", RECALL, recognized=True) == 50


def test_attribute_and_length_bonuses():
    response = "Acme offers consulting. " + "x" * 600

    assert calculate_confidence(response, SERVICE, recognized=True) == 50 + 25 + 10


def test_confidence_clamped_to_100():
    """Every bonus at once would exceed 100."""
    response = "Acme consulting. " + " ".join(DEFAULT_CONFIDENT_PHRASES) + " " + "x" * 1200

    recognized, _, confidence, _ = score_response(response, SERVICE)

    assert recognized
    assert confidence == 100


# ============================================================================
# Positioning
# ============================================================================

def test_positioning_stronger():
    assert analyze_positioning("We recommend Acme over Beta Co.", "Acme", "Beta Co") == "stronger"


def test_positioning_weaker():
    assert analyze_positioning("Beta Co is better for large budgets than Acme.", "Acme", "Beta Co") == "weaker"


def test_positioning_equal_when_both_named():
    assert analyze_positioning("Acme and Beta Co are similar.", "Acme", "Beta Co") == "equal"


def test_positioning_not_compared_when_one_missing():
    assert analyze_positioning("Beta Co is a firm.", "Acme", "Beta Co") == "not_compared"


def test_stronger_checked_before_weaker():
    response = "Beta Co is more established, but I recommend Acme."
    assert analyze_positioning(response, "Acme", "Beta Co") == "stronger"


def test_non_comparison_queries_are_not_compared():
    _, _, _, positioning = score_response("Acme and Beta Co are both consultancies.", RECALL)
    assert positioning == "not_compared"


def test_scoring_is_pure():
    response = "Acme is known for consulting. Beta Co is larger, but I recommend Acme."

    first = score_response(response, COMPARE)
    second = score_response(response, COMPARE)

    assert first == second
    assert first == (True, False, 55, "stronger")


# ============================================================================
# Batch answers
# ============================================================================

BATCH_RESPONSE = """1. Beta Co
Acme excels at boutique consulting while Beta Co has more staff. Overall Acme is better for small teams and I would recommend Acme here.
2. Gamma Inc
Gamma Inc is more established and Gamma Inc outperforms Acme on price. Many clients prefer Gamma Inc for large projects.
"""


def test_extract_numbered_sections():
    beta = extract_competitor_section(BATCH_RESPONSE, "Beta Co", ["Beta Co", "Gamma Inc"])
    gamma = extract_competitor_section(BATCH_RESPONSE, "Gamma Inc", ["Beta Co", "Gamma Inc"])

    assert beta.startswith("1. Beta Co")
    assert "Gamma Inc" not in beta
    assert gamma.startswith("2. Gamma Inc")
    assert "recommend Acme" not in gamma


def test_extract_markdown_and_bold_headers():
    response = (
        "## Beta Co\nBeta Co is a large agency with offices nationwide and a long client list.\n"
        "**Gamma Inc**\nGamma Inc is a small studio that focuses on packaging design work only."
    )

    beta = extract_competitor_section(response, "Beta Co", ["Beta Co", "Gamma Inc"])
    gamma = extract_competitor_section(response, "Gamma Inc", ["Beta Co", "Gamma Inc"])

    assert beta.startswith("## Beta Co")
    assert "packaging" not in beta
    assert gamma.startswith("**Gamma Inc**")


def test_extract_falls_back_to_full_text():
    response = "Both competitors are reasonable choices depending on budget."
    assert extract_competitor_section(response, "Beta Co", ["Beta Co"]) == response


def test_positioning_by_counting():
    assert analyze_positioning_from_text("Acme excels. Acme is better.", "Acme", "Beta Co") == "stronger"
    assert analyze_positioning_from_text("Beta Co has more clients.", "Acme", "Beta Co") == "weaker"
    assert analyze_positioning_from_text("Acme excels. Beta Co excels.", "Acme", "Beta Co") == "equal"


def test_parse_batch_response():
    parsed = parse_batch_competitor_response(BATCH_RESPONSE, ["Beta Co", "Gamma Inc"], "Acme")

    assert [(name, positioning) for name, positioning, _ in parsed] == [
        ("Beta Co", "stronger"),
        ("Gamma Inc", "weaker"),
    ]


def test_parse_batch_without_brand_name_is_equal():
    parsed = parse_batch_competitor_response(BATCH_RESPONSE, ["Beta Co"])
    assert parsed[0][1] == "equal"
