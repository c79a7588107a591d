"""
Competitive Summary

Synthesises every competitor comparison answer into strengths, weaknesses
and opportunities with one extra LLM call.
"""

import json
import logging
import re
from typing import Dict, List, Optional, Sequence

from config.settings import settings
from models.schemas import CompetitiveSummary, ProviderResult
from utils.cost_tracker import CostSink, emit_cost, make_cost_record

logger = logging.getLogger(__name__)

SUMMARY_PROVIDER = "claude"


def build_summary_prompt(results: Sequence[ProviderResult], brand_name: str) -> str:
    """Group comparison answers by competitor and provider into one prompt."""
    by_competitor: Dict[str, List[ProviderResult]] = {}
    for result in results:
        by_competitor.setdefault(result.compared_to or "Unknown", []).append(result)

    sections = []
    for competitor, responses in by_competitor.items():
        provider_sections = "\n\n".join(
            f"### {r.provider.upper()}\n{r.response_text}" for r in responses
        )
        sections.append(f"## vs. {competitor}\n{provider_sections}")

    comparisons = "\n\n---\n\n".join(sections)

    return f"""You are analyzing competitive intelligence for "{brand_name}".

Below are AI assistant responses comparing {brand_name} to various competitors. Your task is to synthesize these into a clear competitive summary.

{comparisons}

---

Based on ALL the above comparisons across ALL platforms, provide a competitive intelligence summary in the following JSON format:

{{
  "strengths": ["What {brand_name} is perceived to do well"],
  "weaknesses": ["Areas where competitors have an advantage"],
  "opportunities": ["Actionable ways to improve positioning"],
  "overall_position": "A 1-2 sentence summary of {brand_name}'s overall competitive position in the AI landscape"
}}

Important:
- Base your analysis ONLY on what the AI responses actually say
- Be specific and actionable
- Include 2-4 items per category
- Focus on perception, not reality (what AI thinks, not what's true)
- Respond ONLY with the JSON, no additional text"""


def parse_summary_response(text: str) -> CompetitiveSummary:
    """
    Parse the summary JSON, tolerating code fences and surrounding prose.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    json_str = text or ""

    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", json_str)
    if fenced:
        json_str = fenced.group(1).strip()

    obj = re.search(r"\{[\s\S]*\}", json_str)
    if obj:
        json_str = obj.group(0)

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Competitive summary is not valid JSON: {e}")

    if not isinstance(parsed, dict):
        raise ValueError("Competitive summary JSON is not an object")

    return CompetitiveSummary(
        strengths=[str(s) for s in parsed.get("strengths") or []],
        weaknesses=[str(s) for s in parsed.get("weaknesses") or []],
        opportunities=[str(s) for s in parsed.get("opportunities") or []],
        overall_position=str(parsed.get("overall_position") or parsed.get("overallPosition") or ""),
    )


async def generate_competitive_summary(
    results: Sequence[ProviderResult],
    brand_name: str,
    provider,
    run_id: str,
    cost_sink: Optional[CostSink] = None
) -> Optional[CompetitiveSummary]:
    """
    Generate a competitive summary from all competitor comparison results.

    Args:
        results: All results of the run (non-comparison results are ignored)
        brand_name: Business name used in the prompt
        provider: Provider adapter used for synthesis
        run_id: Scan run id
        cost_sink: Optional cost record sink

    Returns:
        CompetitiveSummary, or None when there is nothing to summarise or
        the call/parse fails
    """
    comparison_results = [r for r in results if r.query_type == "competitor_compare"]
    if not comparison_results:
        logger.info(f"[{run_id}] No competitor data, skipping competitive summary")
        return None

    prompt = build_summary_prompt(comparison_results, brand_name)

    try:
        # Synthesis works from the collected answers only, no web search
        reply = await provider.generate(prompt, max_tokens=settings.SUMMARY_MAX_OUTPUT_TOKENS, grounded=False)
    except Exception as e:
        logger.error(f"[{run_id}] Failed to generate competitive summary: {e}")
        return None

    await emit_cost(cost_sink, make_cost_record(
        run_id=run_id,
        step="competitive_summary",
        model=getattr(provider, "model_id", provider.provider_id),
        input_tokens=reply.input_tokens,
        output_tokens=reply.output_tokens,
    ))

    try:
        summary = parse_summary_response(reply.text)
    except ValueError as e:
        logger.error(f"[{run_id}] Failed to parse competitive summary: {e}")
        return None

    logger.info(
        f"[{run_id}] Competitive summary: {len(summary.strengths)} strengths, "
        f"{len(summary.weaknesses)} weaknesses, {len(summary.opportunities)} opportunities"
    )
    return summary
