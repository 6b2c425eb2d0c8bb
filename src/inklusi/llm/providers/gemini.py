"""Google Gemini model client implementation.

Uses the official Google GenAI SDK for async generation.
Reference: https://github.com/googleapis/python-genai

Note: Gemini can return empty responses due to safety filtering or service issues.
This implementation includes retry logic and relaxed safety settings.
"""

import asyncio
from typing import Any

from google import genai
from google.genai import types

from ...prompts import get_system_prompt
from ..base import ModelClient
from ..models import ModelReply, ModelVariant, RequestError, Source

# Relaxed so that questions about disabilities are not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]

DEFAULT_MODELS: dict[ModelVariant, str] = {
    ModelVariant.LITE: "gemini-2.5-flash-lite",
    ModelVariant.SEARCH: "gemini-2.5-flash",
    ModelVariant.THINKING: "gemini-2.5-pro",
}

THINKING_BUDGET = 32768


class GeminiModelClient(ModelClient):
    """Google Gemini model client.

    Hidden design decisions:
    - Google GenAI client initialization
    - Variant to model/config mapping (search tool, thinking budget)
    - Grounding source extraction
    - Retry logic for empty responses (known Gemini issue)
    """

    def __init__(
        self,
        api_key: str,
        models: dict[ModelVariant, str] | None = None,
        system_instruction: str | None = None,
        temperature: float = 0.7,
        max_retries: int = 3,
        **client_kwargs: Any
    ):
        """Initialize Gemini client.

        Args:
            api_key: Google AI API key
            models: Per-variant model names (missing variants use DEFAULT_MODELS)
            system_instruction: System prompt (default: prompts/system.txt)
            temperature: Sampling temperature
            max_retries: Max attempts for empty responses (default 3)
            **client_kwargs: Additional kwargs for genai.Client
        """
        self._models = {**DEFAULT_MODELS, **(models or {})}
        self._system_instruction = system_instruction or get_system_prompt()
        self._temperature = temperature
        self._max_retries = max(1, max_retries)
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    def model_for(self, variant: ModelVariant) -> str:
        """Get the model name used for a variant."""
        return self._models[variant]

    def _build_config(self, variant: ModelVariant) -> types.GenerateContentConfig:
        config = types.GenerateContentConfig(
            temperature=self._temperature,
            system_instruction=self._system_instruction,
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        if variant == ModelVariant.SEARCH:
            config.tools = [types.Tool(google_search=types.GoogleSearch())]
        elif variant == ModelVariant.THINKING:
            config.thinking_config = types.ThinkingConfig(thinking_budget=THINKING_BUDGET)
        return config

    def _extract_content(self, response) -> str:
        """Extract text content from Gemini response, handling empty responses.

        Thought parts are skipped so that reasoning summaries never reach the user.
        """
        if response.candidates and len(response.candidates) > 0:
            candidate = response.candidates[0]
            if candidate.content and candidate.content.parts:
                texts = [
                    part.text for part in candidate.content.parts
                    if getattr(part, "text", None) and not getattr(part, "thought", False)
                ]
                if texts:
                    return "".join(texts)

        # Fallback to response.text (may raise or return None)
        try:
            return response.text or ""
        except (ValueError, AttributeError):
            return ""

    def _extract_sources(self, response) -> tuple[Source, ...]:
        """Collect web grounding sources, de-duplicated by uri in order."""
        if not response.candidates:
            return ()

        metadata = getattr(response.candidates[0], "grounding_metadata", None)
        chunks = getattr(metadata, "grounding_chunks", None) if metadata else None
        if not chunks:
            return ()

        sources: list[Source] = []
        seen: set[str] = set()
        for chunk in chunks:
            web = getattr(chunk, "web", None)
            uri = getattr(web, "uri", None) if web else None
            if not uri or uri in seen:
                continue
            seen.add(uri)
            sources.append(Source(uri=uri, title=getattr(web, "title", None) or None))
        return tuple(sources)

    def _extract_usage(self, response) -> dict[str, int] | None:
        if not getattr(response, "usage_metadata", None):
            return None
        return {
            "prompt_tokens": response.usage_metadata.prompt_token_count or 0,
            "completion_tokens": response.usage_metadata.candidates_token_count or 0,
            "total_tokens": response.usage_metadata.total_token_count or 0,
        }

    async def send(self, text: str, variant: ModelVariant) -> ModelReply:
        """Generate a reply with the model configured for the variant.

        Includes retry logic for empty responses (known Gemini service issue).

        Raises:
            RequestError: On SDK failures or when every attempt came back empty
        """
        model = self._models[variant]
        config = self._build_config(variant)

        content = ""
        sources: tuple[Source, ...] = ()
        usage = None

        for attempt in range(self._max_retries):
            try:
                response = await self._client.aio.models.generate_content(
                    model=model,
                    contents=text,
                    config=config
                )
            except Exception as e:
                raise RequestError(str(e), variant=variant) from e

            usage = self._extract_usage(response)
            content = self._extract_content(response)

            if content:
                sources = self._extract_sources(response)
                break

            if attempt < self._max_retries - 1:
                await asyncio.sleep(0.5 * (attempt + 1))

        if not content:
            raise RequestError(f"{model} returned an empty response", variant=variant)

        return ModelReply(text=content, sources=sources, model=model, usage=usage)

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass
