"""Factory for creating speech synthesizers."""

from typing import Any

from .base import SpeechSynthesizer


def create_speech_synthesizer(provider: str = "gemini", **config: Any) -> SpeechSynthesizer:
    """Create a speech synthesizer.

    Args:
        provider: Provider type ("gemini")
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required)
                - model: str (default: 'gemini-2.5-flash-preview-tts')
                - voice: str (default: 'Kore')

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() in ("gemini", "google"):
        if "api_key" not in config:
            raise TypeError("Gemini speech synthesizer requires 'api_key' in config")
        from .providers import GeminiSpeechSynthesizer
        return GeminiSpeechSynthesizer(**config)

    raise ValueError(
        f"Unsupported speech provider: {provider}. "
        f"Supported providers: gemini"
    )
