from .gemini import GeminiSpeechSynthesizer

__all__ = ["GeminiSpeechSynthesizer"]
