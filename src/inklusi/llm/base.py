from abc import ABC, abstractmethod
from typing import Any

from .models import ModelReply, ModelVariant


class ModelClient(ABC):
    """Abstract base class for text-generation clients.

    This module hides the design decision of which generative-AI service
    answers the chatbot. Implementations must handle:
    - API client setup and authentication
    - Mapping a ModelVariant to a concrete model and request config
    - Extracting text and grounding sources from the response
    - Converting service failures into RequestError

    Supports async context manager protocol for proper resource cleanup:
        async with client:
            reply = await client.send("Halo", ModelVariant.LITE)
        # Automatically cleaned up
    """

    @abstractmethod
    async def send(self, text: str, variant: ModelVariant) -> ModelReply:
        """Send user text to the model variant and return its reply.

        Args:
            text: The user's message
            variant: Which backend model configuration to use

        Returns:
            ModelReply with text and optional grounding sources

        Raises:
            RequestError: If the request fails or yields no text
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> "ModelClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
