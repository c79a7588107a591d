"""
Tests for the Tavily search step, with a fake Tavily client.
"""

import asyncio

from agents.ai_model_tester_agent.search import (
    MAX_SEARCH_QUERY_LENGTH,
    build_grounded_prompt,
    format_search_results,
    tavily_context_builder,
)


class FakeTavilyClient:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"results": []}
        self.error = error
        self.searches = []

    def search(self, query, max_results=5):
        self.searches.append((query, max_results))
        if self.error:
            raise self.error
        return self.response


ACME_RESULTS = {
    "results": [
        {"title": "Acme Studio", "content": "Design consultancy in Sydney.", "url": "https://acme.com"},
        {"title": "Acme on LinkedIn", "content": "12 employees.", "url": "https://linkedin.com/company/acme"},
    ]
}


def test_format_search_results():
    text = format_search_results(ACME_RESULTS["results"])

    assert text.startswith("[1] Acme Studio\nDesign consultancy in Sydney.\nSource: https://acme.com")
    assert "\n\n[2] Acme on LinkedIn" in text


def test_grounded_prompt_keeps_the_question_last():
    prompt = build_grounded_prompt("Who is Acme?", "[1] Acme Studio")

    assert prompt.startswith("Based on these search results")
    assert prompt.endswith("USER QUESTION: Who is Acme?")


def test_context_builder_searches_with_the_prompt():
    client = FakeTavilyClient(ACME_RESULTS)
    build_context = tavily_context_builder("tvly-test", max_results=3, client=client)

    context = asyncio.run(build_context("What do you know about Acme?"))

    assert client.searches == [("What do you know about Acme?", 3)]
    assert "Source: https://linkedin.com/company/acme" in context


def test_long_prompts_are_cut_for_search():
    client = FakeTavilyClient(ACME_RESULTS)
    build_context = tavily_context_builder("tvly-test", client=client)

    asyncio.run(build_context("x" * 2000))

    assert len(client.searches[0][0]) == MAX_SEARCH_QUERY_LENGTH


def test_search_failure_and_empty_results_give_no_context():
    failing = tavily_context_builder("tvly-test", client=FakeTavilyClient(error=RuntimeError("quota exceeded")))
    empty = tavily_context_builder("tvly-test", client=FakeTavilyClient({"results": []}))

    assert asyncio.run(failing("Who is Acme?")) is None
    assert asyncio.run(empty("Who is Acme?")) is None


def test_no_api_key_means_no_search_step():
    assert tavily_context_builder("") is None
    assert tavily_context_builder(None) is None
