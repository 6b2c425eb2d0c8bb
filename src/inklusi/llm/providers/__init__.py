from .gemini import GeminiModelClient

__all__ = ["GeminiModelClient"]
