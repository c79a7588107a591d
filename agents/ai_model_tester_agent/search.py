"""
Tavily web search for providers without a native search tool.

The search results are placed in front of the question, so the model answers
from current web pages instead of training data alone.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from utils.helpers import truncate_text

logger = logging.getLogger(__name__)

ContextBuilder = Callable[[str], Awaitable[Optional[str]]]

# Tavily rejects longer queries
MAX_SEARCH_QUERY_LENGTH = 400


def format_search_results(results: List[Dict[str, Any]]) -> str:
    """Numbered title/snippet/source blocks."""
    return "\n\n".join(
        f"[{i}] {r.get('title', '')}\n{r.get('content', '')}\nSource: {r.get('url', '')}"
        for i, r in enumerate(results, 1)
    )


def build_grounded_prompt(prompt: str, context: str) -> str:
    return f"""Based on these search results, answer the user's question.

SEARCH RESULTS:
{context}

USER QUESTION: {prompt}"""


def tavily_context_builder(
    api_key: Optional[str],
    max_results: int = 5,
    client=None
) -> Optional[ContextBuilder]:
    """
    Build an async search step backed by Tavily.

    Returns None when no API key is configured. The returned callable yields
    formatted results, or None when the search fails or finds nothing; the
    provider then answers without search context. Searches are not retried.
    """
    if not api_key and client is None:
        return None

    async def build_context(prompt: str) -> Optional[str]:
        nonlocal client
        try:
            if client is None:
                from tavily import TavilyClient
                client = TavilyClient(api_key=api_key)

            # TavilyClient is synchronous
            response = await asyncio.to_thread(
                client.search,
                truncate_text(prompt, MAX_SEARCH_QUERY_LENGTH),
                max_results=max_results
            )
        except Exception as e:
            logger.warning(f"Tavily search failed, answering without search results: {e}")
            return None

        results = response.get("results", []) if isinstance(response, dict) else []
        if not results:
            logger.info("Tavily search returned no results")
            return None

        return format_search_results(results)

    return build_context
