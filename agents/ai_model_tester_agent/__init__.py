"""
AI Model Tester Agent

Provider adapters and the concurrent executor that asks every provider
every brand awareness query.
"""

from agents.ai_model_tester_agent.providers import (
    ProviderReply,
    ChatModelProvider,
    build_provider_registry,
)
from agents.ai_model_tester_agent.utils import (
    run_query_on_provider,
    run_queries_for_provider,
    run_brand_awareness_queries,
)


__all__ = [
    "ProviderReply",
    "ChatModelProvider",
    "build_provider_registry",
    "run_query_on_provider",
    "run_queries_for_provider",
    "run_brand_awareness_queries",
]
