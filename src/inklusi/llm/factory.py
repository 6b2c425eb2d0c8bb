from typing import Any

from .base import ModelClient
from .providers import GeminiModelClient


def create_model_client(provider: str, **config: Any) -> ModelClient:
    """Create a model client instance.

    This factory function hides the instantiation logic for different services.

    Args:
        provider: Provider type (currently 'gemini')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - models: dict[ModelVariant, str] | None
                - system_instruction: str | None
                - temperature: float (default: 0.7)

    Returns:
        Initialized model client instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> client = create_model_client(
        ...     "gemini",
        ...     api_key="...",
        ...     models={ModelVariant.LITE: "gemini-2.5-flash-lite"}
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini provider requires 'api_key' in config")
        return GeminiModelClient(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'gemini'"
    )
