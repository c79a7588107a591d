"""
Utility functions for running brand awareness queries against providers.

`run_query_on_provider` is the adapter boundary: it never raises, a failed
call comes back as an unrecognised, zero-confidence ProviderResult.
`run_brand_awareness_queries` fans every (query, provider) pair out
concurrently and returns results in query order.
"""

import asyncio
import logging
import time
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from agents.scorer_analyzer_agent.models import ScoringRules, DEFAULT_RULES
from agents.scorer_analyzer_agent.utils import score_response, parse_batch_competitor_response
from config.settings import settings
from models.schemas import BrandAwarenessQuery, ProviderResult
from utils.cost_tracker import CostSink, emit_cost, make_cost_record
from utils.helpers import truncate_text

logger = logging.getLogger(__name__)

BRAND_SYSTEM_PROMPT = """You are a helpful assistant providing information about businesses based on current web search results. When asked about a specific company:
- Share what you find about the business from your search
- Be specific about their services, products, and location
- If you can't find specific information, say so clearly
- Do not make up information about businesses you can't verify"""

MIN_BATCH_RESPONSE_LENGTH = 50

ProgressCallback = Callable[[int, int], None]
ProviderSet = Union[Mapping[str, object], Sequence[object]]


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))


def _error_message(error: BaseException) -> str:
    message = str(error)
    return message if message else f"{type(error).__name__}: query failed"


def _failed_result(
    query: BrandAwarenessQuery,
    provider,
    query_index: int,
    message: str,
    response_time_ms: int
) -> ProviderResult:
    return ProviderResult(
        provider=provider.provider_id,
        query_type=query.type,
        query_index=query_index,
        tested_entity=query.tested_entity,
        tested_attribute=query.tested_attribute,
        recognized=False,
        attribute_mentioned=False,
        response_text=message,
        confidence_score=0,
        compared_to=query.compared_to,
        positioning="not_compared",
        response_time_ms=response_time_ms,
        model=getattr(provider, "model_name", None),
    )


async def run_query_on_provider(
    query: BrandAwarenessQuery,
    provider,
    run_id: str,
    query_index: int = 0,
    cost_sink: Optional[CostSink] = None,
    rules: ScoringRules = DEFAULT_RULES,
    timeout: Optional[float] = None,
    max_tokens: Optional[int] = None,
    errors: Optional[List[str]] = None
) -> ProviderResult:
    """
    Run one brand awareness query against one provider and score the answer.

    Args:
        query: Query to send
        provider: Provider adapter (provider_id, model_name, generate)
        run_id: Scan run id, used for logging and cost records
        query_index: Position of the query in the run
        cost_sink: Optional callable receiving one CostRecord per successful call
        rules: Scoring phrase lists
        timeout: Per-call timeout in seconds (None = no timeout)
        max_tokens: Output cap (defaults to BRAND_MAX_OUTPUT_TOKENS)
        errors: Optional list that failure messages are appended to

    Returns:
        ProviderResult; failures are returned, never raised
    """
    start = time.monotonic()
    max_tokens = max_tokens or settings.BRAND_MAX_OUTPUT_TOKENS

    try:
        reply = await asyncio.wait_for(
            provider.generate(query.prompt, system_prompt=BRAND_SYSTEM_PROMPT, max_tokens=max_tokens),
            timeout=timeout
        )
    except Exception as e:
        response_time_ms = _elapsed_ms(start)
        logger.warning(
            f"[{run_id}] {provider.provider_id} brand {query.type} failed "
            f"after {response_time_ms}ms: {_error_message(e)}"
        )
        if errors is not None:
            errors.append(f"{provider.provider_id} {query.type} (query {query_index + 1}): {_error_message(e)}")
        return _failed_result(query, provider, query_index, _error_message(e), response_time_ms)

    response_time_ms = _elapsed_ms(start)

    await emit_cost(cost_sink, make_cost_record(
        run_id=run_id,
        step=f"brand_{query.type}_{provider.provider_id}",
        model=getattr(provider, "model_id", getattr(provider, "model_name", provider.provider_id)),
        input_tokens=reply.input_tokens,
        output_tokens=reply.output_tokens,
    ))

    recognized, attribute_mentioned, confidence, positioning = score_response(reply.text, query, rules)

    logger.info(
        f"[{run_id}] {provider.provider_id} ✓ brand {query.type} "
        f"({response_time_ms / 1000:.1f}s, {len(reply.text)} chars)"
    )

    return ProviderResult(
        provider=provider.provider_id,
        query_type=query.type,
        query_index=query_index,
        tested_entity=query.tested_entity,
        tested_attribute=query.tested_attribute,
        recognized=recognized,
        attribute_mentioned=attribute_mentioned,
        response_text=reply.text,
        confidence_score=confidence,
        compared_to=query.compared_to,
        positioning=positioning,
        response_time_ms=response_time_ms,
        model=getattr(provider, "model_name", None),
    )


def expand_batch_result(
    query: BrandAwarenessQuery,
    result: ProviderResult,
    rules: ScoringRules = DEFAULT_RULES
) -> List[ProviderResult]:
    """
    Expand a batch competitor answer into one result per competitor.

    Non-batch queries pass through unchanged. Empty, short or zero-confidence
    answers become "not_compared" results for every competitor.
    """
    if not (query.is_batch_query and query.competitors):
        return [result]

    if len(result.response_text or "") < MIN_BATCH_RESPONSE_LENGTH or result.confidence_score == 0:
        return [
            result.model_copy(update={"compared_to": competitor, "positioning": "not_compared"})
            for competitor in query.competitors
        ]

    parsed = parse_batch_competitor_response(result.response_text, query.competitors, query.tested_entity, rules)
    if not parsed:
        return [
            result.model_copy(update={"compared_to": competitor, "positioning": "equal"})
            for competitor in query.competitors
        ]

    return [
        result.model_copy(update={
            "compared_to": competitor,
            "positioning": positioning,
            "response_text": section or result.response_text,
        })
        for competitor, positioning, section in parsed
    ]


def _provider_list(providers: ProviderSet) -> List[object]:
    if isinstance(providers, Mapping):
        return list(providers.values())
    return list(providers)


async def run_queries_for_provider(
    queries: Sequence[BrandAwarenessQuery],
    provider,
    run_id: str,
    cost_sink: Optional[CostSink] = None,
    rules: ScoringRules = DEFAULT_RULES,
    timeout: Optional[float] = None,
    errors: Optional[List[str]] = None
) -> List[ProviderResult]:
    """
    Run every query against a single provider, concurrently.

    Used when a job runner splits work into one step per provider.
    """
    logger.info(f"[{run_id}] {provider.provider_id}: starting {len(queries)} brand awareness queries")

    if timeout is None:
        timeout = settings.PROVIDER_TIMEOUT_SECONDS

    async def _run(index: int, query: BrandAwarenessQuery) -> List[ProviderResult]:
        result = await run_query_on_provider(
            query, provider, run_id,
            query_index=index, cost_sink=cost_sink, rules=rules, timeout=timeout, errors=errors
        )
        return expand_batch_result(query, result, rules)

    nested = await asyncio.gather(*(_run(i, q) for i, q in enumerate(queries)))
    results = [r for group in nested for r in group]

    logger.info(f"[{run_id}] ✅ Brand {provider.provider_id}: {len(results)} results")
    return results


def _log_question_summary(run_id: str, queries: Sequence[BrandAwarenessQuery], results: List[ProviderResult]) -> None:
    by_query: Dict[int, Dict[str, bool]] = {}
    for result in results:
        # Batch expansion yields several results per provider; first one speaks for it
        by_query.setdefault(result.query_index, {}).setdefault(result.provider, result.recognized)

    for index, query in enumerate(queries):
        providers = by_query.get(index, {})
        marks = ", ".join(f"{name} {'✓' if ok else '✗'}" for name, ok in providers.items())
        logger.info(f"[{run_id}] Q{index + 1}/{len(queries)} {query.type}: {marks}")


async def run_brand_awareness_queries(
    queries: Sequence[BrandAwarenessQuery],
    providers: ProviderSet,
    run_id: str,
    on_progress: Optional[ProgressCallback] = None,
    cost_sink: Optional[CostSink] = None,
    rules: ScoringRules = DEFAULT_RULES,
    timeout: Optional[float] = None,
    errors: Optional[List[str]] = None
) -> List[ProviderResult]:
    """
    Run all brand awareness queries across all providers.

    Every provider runs its queries concurrently and all providers run in
    parallel. One failed call never cancels the others.

    Args:
        queries: Ordered queries for the run
        providers: Provider registry (id -> provider) or list of providers
        run_id: Scan run id for logging and cost records
        on_progress: Optional callback(completed, total) after each completion.
            Counts are monotonic; completion order is not query order.
        cost_sink: Optional cost record sink
        rules: Scoring phrase lists
        timeout: Per-call timeout (defaults to PROVIDER_TIMEOUT_SECONDS)
        errors: Optional list collecting one message per failed call

    Returns:
        Results sorted by query index; within a query, provider order is kept.
        Without batch queries the length is len(queries) * len(providers).
    """
    provider_list = _provider_list(providers)
    total = len(queries) * len(provider_list)
    completed = 0

    if timeout is None:
        timeout = settings.PROVIDER_TIMEOUT_SECONDS

    logger.info(f"[{run_id}] Brand awareness queries ({len(queries)} x {len(provider_list)} providers):")
    for i, query in enumerate(queries, 1):
        logger.info(f"[{run_id}]   {i}. {truncate_text(query.prompt, 120)}")

    async def _run_task(index: int, query: BrandAwarenessQuery, provider) -> List[Tuple[int, ProviderResult]]:
        nonlocal completed
        result = await run_query_on_provider(
            query, provider, run_id,
            query_index=index, cost_sink=cost_sink, rules=rules, timeout=timeout, errors=errors
        )

        # Single event loop thread: the increment needs no lock
        completed += 1
        if on_progress:
            try:
                on_progress(completed, total)
            except Exception as e:
                logger.warning(f"[{run_id}] Progress callback failed: {e}")

        return [(index, r) for r in expand_batch_result(query, result, rules)]

    async def _run_provider(provider) -> List[Tuple[int, ProviderResult]]:
        groups = await asyncio.gather(*(
            _run_task(index, query, provider) for index, query in enumerate(queries)
        ))
        return [item for group in groups for item in group]

    provider_groups = await asyncio.gather(*(_run_provider(p) for p in provider_list))

    tagged = [item for group in provider_groups for item in group]
    tagged.sort(key=lambda item: item[0])
    results = [result for _, result in tagged]

    _log_question_summary(run_id, queries, results)
    return results
