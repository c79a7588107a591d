"""
End-to-end tests of the brand awareness LangGraph workflow with fake providers.
"""

import asyncio

from agents.brand_awareness_agent import run_brand_awareness_workflow
from agents.brand_awareness_agent.graph import get_brand_awareness_graph
from agents.scorer_analyzer_agent.models import ScoringRules


def _run(profile, providers, **kwargs):
    return asyncio.run(run_brand_awareness_workflow(
        run_id="run-acme",
        domain="acme.com",
        profile=profile,
        providers=providers,
        **kwargs
    ))


def test_graph_nodes():
    graph = get_brand_awareness_graph()
    nodes = set(graph.get_graph().nodes)

    assert {"generate_queries", "run_queries", "analyze", "competitive_summary", "finalize"} <= nodes
    assert get_brand_awareness_graph() is graph


def test_acme_scenario(acme_profile, acme_providers):
    """4 queries x 4 providers; design is a knowledge gap, consulting known by chatgpt."""
    records = []

    result = _run(acme_profile, acme_providers, competitors=["Beta Co"], cost_sink=records.append)

    assert len(result["queries"]) == 4
    assert len(result["results"]) == 16
    assert result["errors"] == []

    analysis = result["analysis"]
    assert analysis.overall_recognition == 50
    assert analysis.knowledge_gaps == ["design"]

    consulting = next(s for s in analysis.service_knowledge if s.service == "consulting")
    assert consulting.known_by == ["chatgpt"]
    assert consulting.unknown_by == ["claude", "gemini", "perplexity"]

    assert analysis.competitor_positioning.competitor == "Beta Co"
    assert analysis.competitor_positioning.positioning == {
        "chatgpt": "stronger",
        "claude": "weaker",
        "gemini": "equal",
        "perplexity": "equal",
    }

    summary = result["competitive_summary"]
    assert summary.strengths == ["Boutique consulting"]

    # 16 query calls plus the summary call
    assert len(records) == 17
    assert records[-1].step == "competitive_summary"


def test_custom_scoring_rules_reach_the_scorer(acme_profile, acme_providers):
    """Treating "known for" as hedging turns the confident recall answers into misses."""
    rules = ScoringRules(hedging_phrases=["known for"])

    default = _run(acme_profile, acme_providers, competitors=["Beta Co"])
    custom = _run(acme_profile, acme_providers, competitors=["Beta Co"], rules=rules)

    default_recall = [r for r in default["results"] if r.query_type == "brand_recall"]
    custom_recall = [r for r in custom["results"] if r.query_type == "brand_recall"]
    assert [r.provider for r in default_recall if r.recognized] == ["chatgpt", "claude"]
    assert not any(r.recognized for r in custom_recall)
    assert custom["analysis"].overall_recognition < default["analysis"].overall_recognition


def test_all_providers_failing(acme_profile, failing_providers):
    result = _run(acme_profile, failing_providers, competitors=["Beta Co"])

    assert len(result["results"]) == 16
    assert all(r.confidence_score == 0 for r in result["results"])
    assert result["analysis"].overall_recognition == 0
    assert result["analysis"].knowledge_gaps == ["consulting", "design"]
    assert result["competitive_summary"] is None
    assert len(result["errors"]) == 16


def test_summary_skipped_without_competitors(acme_profile, acme_providers):
    result = _run(acme_profile, acme_providers)

    assert len(result["results"]) == 12
    assert result["competitive_summary"] is None
    assert result["analysis"].competitor_positioning is None
    assert len(acme_providers["claude"].calls) == 3


def test_summary_disabled(acme_profile, acme_providers):
    result = _run(acme_profile, acme_providers, competitors=["Beta Co"], include_summary=False)

    assert result["competitive_summary"] is None
    assert len(acme_providers["claude"].calls) == 4


def test_no_providers(acme_profile):
    result = _run(acme_profile, {})

    assert result["results"] == []
    assert result["errors"] == ["No providers configured"]
    assert result["analysis"].overall_recognition == 0


def test_progress_callbacks(acme_profile, acme_providers):
    stages = []
    completions = []

    _run(
        acme_profile,
        acme_providers,
        competitors=["Beta Co"],
        progress_callback=lambda step, status, message, data: stages.append((step, status)),
        on_progress=lambda done, total: completions.append(done),
    )

    assert stages == [
        ("queries", "completed"),
        ("testing", "completed"),
        ("analysis", "completed"),
        ("summary", "completed"),
        ("finalize", "completed"),
    ]
    assert completions == list(range(1, 17))
