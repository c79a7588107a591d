"""
State for the brand awareness graph.
"""

from typing import List, Optional, TypedDict

from models.schemas import (
    BusinessProfile,
    BrandAwarenessQuery,
    ProviderResult,
    BrandAwarenessAnalysis,
    CompetitiveSummary,
)


class BrandAwarenessState(TypedDict):
    """State for the brand awareness graph."""
    # Input
    run_id: str
    domain: str
    profile: BusinessProfile
    competitors: List[str]
    batch_competitors: bool
    include_summary: bool

    # Processing
    queries: List[BrandAwarenessQuery]
    results: List[ProviderResult]

    # Output
    analysis: Optional[BrandAwarenessAnalysis]
    competitive_summary: Optional[CompetitiveSummary]

    # Metadata
    errors: List[str]
    completed: bool
