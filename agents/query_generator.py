"""
Brand Awareness Query Generator

Builds the prompts used to test what AI assistants know about a business.
Generation is deterministic: the same profile always yields the same
queries, in the order brand recall, service checks, competitor comparisons.
"""

import logging
from typing import List, Optional, Union

from models.schemas import BusinessProfile, BrandAwarenessQuery
from config.settings import settings

logger = logging.getLogger(__name__)


def _brand_identifier(profile: BusinessProfile, domain: str) -> str:
    """Name plus domain, so providers that know the site by URL still match."""
    if profile.business_name:
        return f"{profile.business_name} ({domain})"
    return domain


def _normalize_competitors(competitors: Optional[Union[str, List[str]]]) -> List[str]:
    if not competitors:
        return []
    if isinstance(competitors, str):
        competitors = [competitors]
    return [c.strip() for c in competitors if c and c.strip()]


def build_brand_recall_query(profile: BusinessProfile, domain: str) -> BrandAwarenessQuery:
    """Does the provider know this business at all?"""
    business_name = profile.business_name or domain
    identifier = _brand_identifier(profile, domain)

    return BrandAwarenessQuery(
        type="brand_recall",
        prompt=(
            f"What do you know about {identifier}? What services do they offer and where are they "
            f"located? Please include any information you have about their website at {domain}."
        ),
        tested_entity=business_name,
        tested_domain=domain,
    )


def build_service_check_query(profile: BusinessProfile, domain: str, service: str) -> BrandAwarenessQuery:
    """Does the provider know that THIS business offers THIS service (not the service in general)?"""
    business_name = profile.business_name or domain
    identifier = _brand_identifier(profile, domain)

    return BrandAwarenessQuery(
        type="service_check",
        prompt=(
            f"I found {identifier} online. Based on your knowledge, does this specific company offer "
            f"\"{service}\" as one of their services? I'm specifically asking about {business_name} "
            f"at {domain}, not about {service} in general."
        ),
        tested_entity=business_name,
        tested_domain=domain,
        tested_attribute=service,
    )


def build_competitor_query(profile: BusinessProfile, domain: str, competitor: str) -> BrandAwarenessQuery:
    """Head-to-head comparison against a single competitor."""
    business_name = profile.business_name or domain
    location_clause = f" in {profile.location}" if profile.location else ""
    business_type = profile.business_type or "their"

    return BrandAwarenessQuery(
        type="competitor_compare",
        prompt=(
            f"I'm choosing between {business_name} and {competitor} for {business_type} services"
            f"{location_clause}. Compare these two companies directly - what are the pros and cons "
            f"of each? Which would you recommend and why?"
        ),
        tested_entity=business_name,
        tested_domain=domain,
        compared_to=competitor,
    )


def build_batch_competitor_query(
    profile: BusinessProfile,
    domain: str,
    competitors: List[str]
) -> BrandAwarenessQuery:
    """
    One comparison prompt covering every competitor.

    The answer is asked for in numbered sections, one per competitor, so it
    can be split back into per-competitor results after scoring.
    """
    business_name = profile.business_name or domain
    location_clause = f" in {profile.location}" if profile.location else ""
    business_type = profile.business_type or "their"
    numbered = "\n".join(f"{i}. {name}" for i, name in enumerate(competitors, 1))

    return BrandAwarenessQuery(
        type="competitor_compare",
        prompt=(
            f"I'm considering {business_name} for {business_type} services{location_clause}. "
            f"Compare {business_name} against each of these competitors:\n{numbered}\n\n"
            f"Answer in numbered sections using the competitor's name as the heading, in the same "
            f"order. In each section, say what {business_name} does better, what the competitor "
            f"does better, and which you would recommend."
        ),
        tested_entity=business_name,
        tested_domain=domain,
        compared_to=competitors[0],
        competitors=list(competitors),
        is_batch_query=True,
    )


def generate_brand_awareness_queries(
    profile: BusinessProfile,
    domain: str,
    competitors: Optional[Union[str, List[str]]] = None,
    batch_competitors: bool = False,
    max_services: Optional[int] = None
) -> List[BrandAwarenessQuery]:
    """
    Generate brand awareness queries for a business.

    Args:
        profile: Business profile from the site analysis step
        domain: Business domain, e.g. "acme.com"
        competitors: A competitor name or list of names. A single name yields
            exactly one comparison query.
        batch_competitors: Fold all competitors into one batch query
        max_services: Cap on service checks (defaults to MAX_SERVICE_QUERIES)

    Returns:
        Ordered list: [brand_recall, service_check x N, competitor_compare ...]
    """
    if max_services is None:
        max_services = settings.MAX_SERVICE_QUERIES

    queries = [build_brand_recall_query(profile, domain)]

    services = [s for s in profile.services if s and s.strip()][:max_services]
    for service in services:
        queries.append(build_service_check_query(profile, domain, service))

    competitor_list = _normalize_competitors(competitors)
    if batch_competitors and len(competitor_list) > 1:
        queries.append(build_batch_competitor_query(profile, domain, competitor_list))
    else:
        for competitor in competitor_list:
            queries.append(build_competitor_query(profile, domain, competitor))

    logger.debug(
        f"Generated {len(queries)} brand awareness queries for {domain} "
        f"({len(services)} services, {len(competitor_list)} competitors)"
    )

    return queries
