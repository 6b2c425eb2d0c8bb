"""Abstract base class for speech synthesis clients.

The abstraction hides:
- Which text-to-speech service is used
- Voice selection and request format
- How the audio payload is transported (bytes, base64)
"""

from abc import ABC, abstractmethod
from typing import Any


class SpeechSynthesizer(ABC):
    """Turns reply text into raw audio bytes.

    Implementations return 16-bit little-endian PCM at the rate reported by
    `sample_rate`, and raise SynthesisError on any failure.
    """

    @abstractmethod
    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for text.

        Raises:
            SynthesisError: If no audio could be produced
        """

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """Sample rate of the returned PCM audio."""

    async def close(self) -> None:
        """Close any open connections or resources."""

    async def __aenter__(self) -> "SpeechSynthesizer":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
