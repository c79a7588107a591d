from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    OPENAI_API_KEY: Optional[str] = ""
    ANTHROPIC_API_KEY: Optional[str] = ""
    GEMINI_API_KEY: Optional[str] = ""
    PERPLEXITY_API_KEY: Optional[str] = ""
    TAVILY_API_KEY: Optional[str] = ""

    # Application Settings
    APP_NAME: str = "AI Brand Awareness Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Provider Models - fixed per provider, grounded/search-capable where available
    CHATGPT_MODEL: str = "gpt-4o"
    CLAUDE_MODEL: str = "claude-sonnet-4-20250514"
    GEMINI_MODEL: str = "gemini-2.5-flash"
    PERPLEXITY_MODEL: str = "sonar-pro"
    PERPLEXITY_API_BASE: str = "https://api.perplexity.ai"

    # Grounded search: web search tool for ChatGPT, Google Search for Gemini,
    # Tavily results in the prompt for Claude. Perplexity searches natively.
    GROUNDED_SEARCH_ENABLED: bool = True
    SEARCH_MAX_RESULTS: int = 5

    # Output caps
    BRAND_MAX_OUTPUT_TOKENS: int = 4000
    SUMMARY_MAX_OUTPUT_TOKENS: int = 1000

    # Per-call timeout in seconds. Unset means calls are bounded only by the
    # hosting platform's request ceiling.
    PROVIDER_TIMEOUT_SECONDS: Optional[float] = None

    # Providers queried for every brand awareness run
    DEFAULT_PROVIDERS: List[str] = ["chatgpt", "claude", "gemini", "perplexity"]

    # Query Settings
    MAX_SERVICE_QUERIES: int = 3

    # Redis Settings
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_MAX_CONNECTIONS: int = 10
    REPORT_CACHE_TTL: int = 604800  # 7 days

    # Cost tracking
    COST_TRACKING_ENABLED: bool = True
    COST_RECORD_TTL: int = 2592000  # 30 days

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
