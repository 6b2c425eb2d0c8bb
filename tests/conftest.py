"""Pytest configuration and shared fixtures."""
import asyncio
import os

import numpy as np
import pytest

from inklusi.audio import AudioEngine, PlayableBuffer, PlaybackHandle
from inklusi.conversation import ChatSession
from inklusi.llm import ModelClient, ModelReply, ModelVariant, RequestError
from inklusi.speech import SpeechSynthesizer, SynthesisError


def pcm_bytes(frames: int = 2400) -> bytes:
    """A short 16-bit mono ramp, as the TTS service would return it."""
    ramp = np.linspace(-16000, 16000, frames).astype("<i2")
    return ramp.tobytes()


class FakeModelClient(ModelClient):
    """Model client returning canned replies, optionally held on a gate."""

    def __init__(self, replies: list | None = None):
        self.replies = list(replies or [])
        self.calls: list[tuple[str, ModelVariant]] = []
        self.gate: asyncio.Event | None = None
        self.closed = False

    async def send(self, text: str, variant: ModelVariant) -> ModelReply:
        self.calls.append((text, variant))
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0) if self.replies else ModelReply(text=f"Reply to: {text}")
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, str):
            return ModelReply(text=reply)
        return reply

    async def close(self) -> None:
        self.closed = True


class FakeSynthesizer(SpeechSynthesizer):
    """Synthesizer returning PCM bytes, or raising a configured error."""

    def __init__(self, audio: bytes | None = None, error: Exception | None = None):
        self.audio = pcm_bytes() if audio is None else audio
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    @property
    def sample_rate(self) -> int:
        return 24000

    async def synthesize(self, text: str) -> bytes:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return self.audio

    async def close(self) -> None:
        self.closed = True


class FakePlaybackHandle(PlaybackHandle):
    """Handle whose natural end is triggered explicitly with finish()."""

    def __init__(self, engine: "FakeAudioEngine", buffer: PlayableBuffer):
        self.engine = engine
        self.buffer = buffer
        self.started = False
        self.stopped = False
        self.closed = False
        self.fail_start = engine.fail_start
        self.fail_stop = engine.fail_stop
        self._callbacks = []

    def start(self) -> None:
        if self.fail_start:
            raise RuntimeError("device busy")
        self.started = True

    def stop(self) -> None:
        self.stopped = True
        if self.fail_stop:
            raise RuntimeError("device refused to stop")

    def on_finish(self, callback) -> None:
        self._callbacks.append(callback)

    def close(self) -> None:
        self.closed = True

    @property
    def active(self) -> bool:
        return self.started and not self.stopped and not self.closed

    def finish(self) -> None:
        """Simulate the buffer playing to its end."""
        for callback in self._callbacks:
            self.engine.dispatch(callback)


class FakeAudioEngine(AudioEngine):
    """In-memory engine that records every handle it creates."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.handles: list[FakePlaybackHandle] = []
        self.fail_create = False
        self.fail_start = False
        self.fail_stop = False
        self.closed = False

    def create_playback(self, buffer: PlayableBuffer) -> FakePlaybackHandle:
        if self.fail_create:
            raise RuntimeError("no device")
        handle = FakePlaybackHandle(self, buffer)
        self.handles.append(handle)
        return handle

    def close(self) -> None:
        self.closed = True

    @property
    def backend_type(self) -> str:
        return "fake"


@pytest.fixture
def model_client():
    """Fake model client with no canned replies."""
    return FakeModelClient()


@pytest.fixture
def synthesizer():
    """Fake synthesizer that always succeeds."""
    return FakeSynthesizer()


@pytest.fixture
def audio_engine():
    """Fake audio engine."""
    return FakeAudioEngine()


@pytest.fixture
def session(model_client, synthesizer, audio_engine):
    """Chat session wired to fakes, without a welcome message."""
    return ChatSession(
        model_client=model_client,
        synthesizer=synthesizer,
        audio_engine=audio_engine,
        welcome_message=None,
    )


@pytest.fixture
def failing_model_client():
    """Model client whose first call fails."""
    return FakeModelClient([RequestError("quota exceeded", variant=ModelVariant.LITE)])


@pytest.fixture
def failing_synthesizer():
    """Synthesizer that always fails."""
    return FakeSynthesizer(error=SynthesisError("TTS service unavailable"))


@pytest.fixture(scope="session")
def gemini_api_key():
    """Return the Gemini API key from environment."""
    return os.getenv("GEMINI_API_KEY")
