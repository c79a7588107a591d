"""
Provider adapters for brand awareness testing.

Every provider exposes the same surface: `provider_id`, `model_name` and
`async generate(prompt, system_prompt, max_tokens, grounded) -> ProviderReply`.
Providers are built from Settings by `build_provider_registry`, so nothing
is constructed at import time and tests can register fakes instead.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from langchain_core.messages import SystemMessage, HumanMessage

from agents.ai_model_tester_agent.search import ContextBuilder, build_grounded_prompt, tavily_context_builder
from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProviderReply:
    """Generated text plus token usage."""
    text: str
    input_tokens: int = 0
    output_tokens: int = 0


def _content_to_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of parts) into text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class ChatModelProvider:
    """
    A LangChain chat model behind the provider interface.

    Grounding comes in two forms: `search_tools` are bound to the client
    (server-side search such as OpenAI web search or Google Search), and
    `context_builder` fetches search results that are prepended to the
    prompt. Both apply only to grounded calls.
    """

    def __init__(
        self,
        provider_id: str,
        vendor: str,
        model_name: str,
        llm_factory: Callable[[int], Any],
        default_max_tokens: int,
        search_tools: Optional[List[Dict[str, Any]]] = None,
        context_builder: Optional[ContextBuilder] = None
    ):
        self.provider_id = provider_id
        self.vendor = vendor
        self.model_name = model_name
        self.default_max_tokens = default_max_tokens
        self.search_tools = search_tools or []
        self.context_builder = context_builder
        self._llm_factory = llm_factory
        self._llms: Dict[Tuple[int, bool], Any] = {}

    @property
    def model_id(self) -> str:
        """Vendor-qualified model id used in cost records, e.g. openai/gpt-4o."""
        return f"{self.vendor}/{self.model_name}"

    def _get_llm(self, max_tokens: int, with_tools: bool):
        # One client per output cap and tool binding; clients are reused across calls
        key = (max_tokens, with_tools)
        if key not in self._llms:
            llm = self._llm_factory(max_tokens)
            if with_tools:
                llm = llm.bind_tools(self.search_tools)
            self._llms[key] = llm
        return self._llms[key]

    async def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        max_tokens: Optional[int] = None,
        grounded: bool = True
    ) -> ProviderReply:
        """
        Send one prompt and return the generated text with token usage.

        Raises whatever the underlying client raises; callers decide how to
        recover. A failed search step only drops the search context.
        """
        llm = self._get_llm(max_tokens or self.default_max_tokens, grounded and bool(self.search_tools))

        if grounded and self.context_builder:
            context = await self.context_builder(prompt)
            if context:
                prompt = build_grounded_prompt(prompt, context)

        messages = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))

        response = await llm.ainvoke(messages)

        usage = getattr(response, "usage_metadata", None) or {}
        return ProviderReply(
            text=_content_to_text(response.content),
            input_tokens=usage.get("input_tokens", 0) or 0,
            output_tokens=usage.get("output_tokens", 0) or 0,
        )


# ============================================================================
# Provider factories
# ============================================================================
# Retries are disabled on every client: a failed call is recorded as a
# zero-confidence result, never retried. Search is grounding only; a failed
# search never triggers a second call.

OPENAI_WEB_SEARCH_TOOL = {"type": "web_search_preview"}
GOOGLE_SEARCH_TOOL = {"google_search": {}}


def _build_chatgpt(config: Settings) -> ChatModelProvider:
    grounded = config.GROUNDED_SEARCH_ENABLED

    def factory(max_tokens: int):
        if not config.OPENAI_API_KEY:
            raise ValueError("OpenAI API key not configured")

        from langchain_openai import ChatOpenAI

        # The web search tool is only served by the Responses API
        return ChatOpenAI(
            model=config.CHATGPT_MODEL,
            openai_api_key=config.OPENAI_API_KEY,
            max_tokens=max_tokens,
            timeout=config.PROVIDER_TIMEOUT_SECONDS,
            max_retries=0,
            use_responses_api=grounded
        )

    return ChatModelProvider(
        "chatgpt", "openai", config.CHATGPT_MODEL, factory, config.BRAND_MAX_OUTPUT_TOKENS,
        search_tools=[OPENAI_WEB_SEARCH_TOOL] if grounded else None
    )


def _build_claude(config: Settings) -> ChatModelProvider:
    def factory(max_tokens: int):
        if not config.ANTHROPIC_API_KEY:
            raise ValueError("Anthropic API key not configured")

        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=config.CLAUDE_MODEL,
            anthropic_api_key=config.ANTHROPIC_API_KEY,
            max_tokens=max_tokens,
            timeout=config.PROVIDER_TIMEOUT_SECONDS,
            max_retries=0
        )

    context_builder = None
    if config.GROUNDED_SEARCH_ENABLED:
        context_builder = tavily_context_builder(config.TAVILY_API_KEY, max_results=config.SEARCH_MAX_RESULTS)
        if context_builder is None:
            logger.debug("Tavily API key not configured, Claude answers without search results")

    return ChatModelProvider(
        "claude", "anthropic", config.CLAUDE_MODEL, factory, config.BRAND_MAX_OUTPUT_TOKENS,
        context_builder=context_builder
    )


def _build_gemini(config: Settings) -> ChatModelProvider:
    def factory(max_tokens: int):
        if not config.GEMINI_API_KEY:
            raise ValueError("Gemini API key not configured")

        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=config.GEMINI_MODEL,
            google_api_key=config.GEMINI_API_KEY,
            max_output_tokens=max_tokens,
            timeout=config.PROVIDER_TIMEOUT_SECONDS,
            max_retries=0
        )

    return ChatModelProvider(
        "gemini", "google", config.GEMINI_MODEL, factory, config.BRAND_MAX_OUTPUT_TOKENS,
        search_tools=[GOOGLE_SEARCH_TOOL] if config.GROUNDED_SEARCH_ENABLED else None
    )


def _build_perplexity(config: Settings) -> ChatModelProvider:
    def factory(max_tokens: int):
        if not config.PERPLEXITY_API_KEY:
            raise ValueError("Perplexity API key not configured")

        from langchain_openai import ChatOpenAI

        # Perplexity serves an OpenAI-compatible chat completions endpoint
        return ChatOpenAI(
            model=config.PERPLEXITY_MODEL,
            openai_api_key=config.PERPLEXITY_API_KEY,
            openai_api_base=config.PERPLEXITY_API_BASE,
            max_tokens=max_tokens,
            timeout=config.PROVIDER_TIMEOUT_SECONDS,
            max_retries=0
        )

    return ChatModelProvider(
        "perplexity", "perplexity", config.PERPLEXITY_MODEL, factory, config.BRAND_MAX_OUTPUT_TOKENS
    )


PROVIDER_FACTORIES: Dict[str, Callable[[Settings], ChatModelProvider]] = {
    "chatgpt": _build_chatgpt,
    "claude": _build_claude,
    "gemini": _build_gemini,
    "perplexity": _build_perplexity,
}


def build_provider_registry(
    config: Optional[Settings] = None,
    provider_ids: Optional[List[str]] = None
) -> Dict[str, ChatModelProvider]:
    """
    Build the provider lookup table.

    Args:
        config: Settings to build clients from (defaults to the app settings)
        provider_ids: Providers to include, in order (defaults to DEFAULT_PROVIDERS)

    Returns:
        Ordered dict of provider id -> provider

    Raises:
        ValueError: If a provider id is unknown
    """
    config = config or default_settings
    provider_ids = provider_ids or config.DEFAULT_PROVIDERS

    registry: Dict[str, ChatModelProvider] = {}
    for provider_id in provider_ids:
        key = provider_id.lower()
        factory = PROVIDER_FACTORIES.get(key)
        if factory is None:
            raise ValueError(
                f"Unknown provider: {provider_id}. "
                f"Available: {', '.join(PROVIDER_FACTORIES)}"
            )
        registry[key] = factory(config)

    logger.debug(f"Provider registry: {', '.join(registry)}")
    return registry
