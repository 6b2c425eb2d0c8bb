"""Google Gemini text-to-speech implementation.

Uses the GenAI SDK with the AUDIO response modality. The service returns
raw 16-bit PCM, mono, 24 kHz as inline data on the first candidate part.
"""

from typing import Any

from google import genai
from google.genai import types

from ...audio.codec import decode_base64
from ...audio.config import AUDIO_SAMPLE_RATE_OUTPUT
from ..base import SpeechSynthesizer
from ..models import SynthesisError
from ..text import clean_for_speech

DEFAULT_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_VOICE = "Kore"


class GeminiSpeechSynthesizer(SpeechSynthesizer):
    """Gemini TTS client.

    Hidden design decisions:
    - TTS model and prebuilt voice
    - Markdown cleanup before synthesis
    - Inline audio extraction (bytes or base64 string)
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_TTS_MODEL,
        voice: str = DEFAULT_VOICE,
        **client_kwargs: Any
    ):
        self._model = model
        self._voice = voice
        self._client = genai.Client(api_key=api_key, **client_kwargs)

    @property
    def model(self) -> str:
        return self._model

    @property
    def voice(self) -> str:
        return self._voice

    @property
    def sample_rate(self) -> int:
        return AUDIO_SAMPLE_RATE_OUTPUT

    def _build_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self._voice)
                )
            ),
        )

    def _extract_audio(self, response) -> bytes:
        if response.candidates:
            content = response.candidates[0].content
            for part in (content.parts or []) if content else []:
                inline = getattr(part, "inline_data", None)
                if inline is not None and inline.data:
                    data = inline.data
                    return decode_base64(data) if isinstance(data, str) else bytes(data)
        raise SynthesisError("No audio data received from TTS service")

    async def synthesize(self, text: str) -> bytes:
        spoken = clean_for_speech(text)
        if not spoken:
            raise SynthesisError("Nothing to synthesize")

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=spoken,
                config=self._build_config(),
            )
        except Exception as e:
            raise SynthesisError(str(e)) from e

        return self._extract_audio(response)
