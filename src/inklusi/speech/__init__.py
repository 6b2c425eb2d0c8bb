"""Speech synthesis module.

Turns bot replies into raw PCM audio for playback.
"""

from .base import SpeechSynthesizer
from .factory import create_speech_synthesizer
from .models import SynthesisError
from .providers import GeminiSpeechSynthesizer
from .text import clean_for_speech

__all__ = [
    "GeminiSpeechSynthesizer",
    "SpeechSynthesizer",
    "SynthesisError",
    "clean_for_speech",
    "create_speech_synthesizer",
]
