"""
Phrase lists driving the response scorer.

The lists are data rather than logic so they can be tuned without changing
the scoring algorithm. Templates use `{entity}` / `{competitor}` (or `{name}`
for the symmetric batch lists) placeholders, filled with lowercased,
accent-stripped names.
"""

from typing import List
from pydantic import BaseModel, Field


DEFAULT_HEDGING_PHRASES = [
    "i don't have specific information",
    "i don't have specific details",
    "i don't have detailed information",
    "i'm not familiar with",
    "i don't have data about",
    "i cannot find information",
    "no specific information",
    "i'm unable to provide specific",
    "i don't have access to",
    "i don't know about",
    "i'm not aware of",
    "i couldn't find any",
    "no information available",
    "it's best to visit their official website",
    "visit their website directly",
    "contact them directly",
    "check their official website",
    "i don't have real-time",
    "i don't have current information",
    "my knowledge doesn't include",
    "i cannot provide specific details",
]

DEFAULT_CONFIDENT_PHRASES = [
    "known for",
    "specializes in",
    "recognized for",
    "expertise in",
    "leading provider",
]

DEFAULT_STRONGER_TEMPLATES = [
    "{entity} is better",
    "{entity} excels",
    "{entity} offers more",
    "prefer {entity}",
    "recommend {entity}",
    "{entity} stands out",
]

DEFAULT_WEAKER_TEMPLATES = [
    "{competitor} is better",
    "{competitor} excels",
    "{competitor} is larger",
    "{competitor} has more",
    "recommend {competitor}",
    "{competitor} is more established",
]

DEFAULT_ADVANTAGE_TEMPLATES = [
    "{name} is better",
    "{name} excels",
    "{name} offers more",
    "{name} has an advantage",
    "{name} stands out",
    "prefer {name}",
    "recommend {name}",
    "{name} is stronger",
    "{name} outperforms",
]

DEFAULT_COMPETITOR_ADVANTAGE_TEMPLATES = [
    "{name} is more established",
    "{name} has more",
]


class ScoringRules(BaseModel):
    """Configurable phrase lists for recognition, confidence and positioning."""
    hedging_phrases: List[str] = Field(default_factory=lambda: list(DEFAULT_HEDGING_PHRASES))
    confident_phrases: List[str] = Field(default_factory=lambda: list(DEFAULT_CONFIDENT_PHRASES))
    stronger_templates: List[str] = Field(default_factory=lambda: list(DEFAULT_STRONGER_TEMPLATES))
    weaker_templates: List[str] = Field(default_factory=lambda: list(DEFAULT_WEAKER_TEMPLATES))

    # Batch sections are scored by counting, with these symmetric lists
    advantage_templates: List[str] = Field(default_factory=lambda: list(DEFAULT_ADVANTAGE_TEMPLATES))
    competitor_advantage_templates: List[str] = Field(
        default_factory=lambda: list(DEFAULT_COMPETITOR_ADVANTAGE_TEMPLATES)
    )

    # Confidence scoring
    base_score: int = 50
    attribute_bonus: int = 25
    length_thresholds: List[int] = Field(default_factory=lambda: [500, 1000])
    length_bonus: int = 10
    confident_phrase_bonus: int = 5

    class Config:
        frozen = True


DEFAULT_RULES = ScoringRules()
