"""
Data models and schemas for the AI Brand Awareness Service.

This module defines the Pydantic models used for API requests/responses,
the brand awareness pipeline (queries, provider results, analysis) and
persisted reports.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Literal


QueryType = Literal["brand_recall", "service_check", "competitor_compare"]
Positioning = Literal["stronger", "weaker", "equal", "not_compared"]


# Upstream Input

class BusinessProfile(BaseModel):
    """Business profile produced by the upstream site analysis step."""
    business_name: Optional[str] = Field(
        None,
        description="Business name (falls back to the domain when absent)",
        examples=["Acme"]
    )
    business_type: str = Field(
        "",
        description="Short description of what kind of business this is",
        examples=["design consultancy"]
    )
    location: Optional[str] = Field(
        None,
        description="Primary geographic location",
        examples=["Sydney, Australia"]
    )
    services: List[str] = Field(
        default_factory=list,
        description="Services offered, most important first",
        examples=[["consulting", "design"]]
    )
    key_phrases: List[str] = Field(
        default_factory=list,
        description="Phrases describing what the business does"
    )
    industry: Optional[str] = Field(
        None,
        description="Broader industry category",
        examples=["Marketing"]
    )


# Pipeline Models

class BrandAwarenessQuery(BaseModel):
    """A single prompt testing what a provider knows about a business."""
    type: QueryType
    prompt: str
    tested_entity: str
    tested_domain: Optional[str] = None
    tested_attribute: Optional[str] = None
    compared_to: Optional[str] = None
    # Batch competitor queries list every competitor compared in one prompt
    competitors: List[str] = Field(default_factory=list)
    is_batch_query: bool = False

    class Config:
        frozen = True


class ProviderResult(BaseModel):
    """Scored outcome of one (query, provider) call."""
    provider: str
    query_type: QueryType
    query_index: int = Field(..., ge=0)
    tested_entity: str
    tested_attribute: Optional[str] = None
    recognized: bool
    attribute_mentioned: bool
    response_text: str
    confidence_score: int = Field(..., ge=0, le=100)
    compared_to: Optional[str] = None
    positioning: Positioning = "not_compared"
    response_time_ms: int = Field(..., ge=0)
    model: Optional[str] = None

    class Config:
        frozen = True


class ServiceKnowledge(BaseModel):
    """Which providers know a business offers a given service."""
    service: str
    known_by: List[str] = Field(default_factory=list)
    unknown_by: List[str] = Field(default_factory=list)


class CompetitorPositioning(BaseModel):
    """Per-provider positioning against a single competitor."""
    competitor: str
    positioning: Dict[str, Positioning] = Field(default_factory=dict)


class BrandAwarenessAnalysis(BaseModel):
    """Aggregate view of one brand awareness run."""
    overall_recognition: int = Field(
        ...,
        description="Percentage of brand recall answers that recognised the business",
        ge=0,
        le=100
    )
    service_knowledge: List[ServiceKnowledge] = Field(default_factory=list)
    knowledge_gaps: List[str] = Field(
        default_factory=list,
        description="Services no provider affirmed"
    )
    competitor_positioning: Optional[CompetitorPositioning] = None
    competitor_breakdown: Dict[str, Dict[str, Positioning]] = Field(
        default_factory=dict,
        description="competitor -> provider -> positioning for every compared competitor"
    )


class CompetitiveSummary(BaseModel):
    """LLM-synthesised view of all competitor comparison answers."""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    opportunities: List[str] = Field(default_factory=list)
    overall_position: str = ""


# API Request/Response Models

class BrandAwarenessRequest(BaseModel):
    """Request model for the brand awareness endpoints."""
    domain: str = Field(
        ...,
        description="The business's website domain",
        min_length=1,
        examples=["acme.com"]
    )
    profile: BusinessProfile
    competitors: Optional[List[str]] = Field(
        None,
        description="Competitor names to compare against",
        max_length=10,
        examples=[["Beta Co"]]
    )
    batch_competitors: bool = Field(
        False,
        description="Compare all competitors in a single query per provider"
    )
    providers: Optional[List[str]] = Field(
        None,
        description="Providers to query (defaults to all four)",
        examples=[["chatgpt", "claude", "gemini", "perplexity"]]
    )
    run_id: Optional[str] = Field(
        None,
        description="Existing run to re-enrich; a new id is generated when absent"
    )
    include_summary: bool = Field(
        True,
        description="Generate a competitive summary when comparison results exist"
    )


class BrandAwarenessReport(BaseModel):
    """Persisted and returned result of one brand awareness run."""
    run_id: str
    domain: str
    business_name: str
    status: str = Field(
        ...,
        examples=["completed", "completed_with_errors"]
    )
    total_queries: int = Field(..., ge=0)
    total_results: int = Field(..., ge=0)
    recognized: int = Field(..., ge=0)
    analysis: BrandAwarenessAnalysis
    competitive_summary: Optional[CompetitiveSummary] = None
    queries: List[BrandAwarenessQuery] = Field(default_factory=list)
    results: List[ProviderResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response model for the /health endpoint."""
    status: str = Field(
        ...,
        description="Health status of the system",
        examples=["healthy", "degraded"]
    )
    version: str = Field(
        ...,
        description="Application version",
        examples=["1.0.0"]
    )
