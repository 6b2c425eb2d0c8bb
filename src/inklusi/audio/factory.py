"""Factory for creating audio engines."""

from typing import Any

from .base import AudioEngine


def create_audio_engine(backend: str = "sounddevice", **kwargs: Any) -> AudioEngine | None:
    """Create an audio engine.

    Args:
        backend: Backend type ("sounddevice", or "none" for text-only mode)
        **kwargs: Backend-specific configuration (sample_rate, channels, device)

    Returns:
        AudioEngine instance, or None when audio output is disabled

    Raises:
        ValueError: If backend type is not supported
    """
    backend_lower = backend.lower()

    if backend_lower in ("none", "off", ""):
        return None

    if backend_lower == "sounddevice":
        from .sounddevice_engine import SoundDeviceAudioEngine
        return SoundDeviceAudioEngine(**kwargs)

    raise ValueError(
        f"Unsupported audio backend: {backend}. "
        f"Supported backends: sounddevice, none"
    )
