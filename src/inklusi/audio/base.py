"""Abstract audio engine and playback handle.

This module hides the design decision of which audio output library plays
decoded speech. The rest of the application only sees decode, a
start/stop/on-finish handle, and a scoped engine lifetime.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from .codec import decode_pcm16
from .config import AUDIO_NUM_CHANNELS, AUDIO_SAMPLE_RATE_OUTPUT
from .models import PlayableBuffer

FinishCallback = Callable[[], None]
Dispatcher = Callable[[FinishCallback], None]


def _call_inline(callback: FinishCallback) -> None:
    callback()


def loop_dispatcher(loop: asyncio.AbstractEventLoop) -> Dispatcher:
    """Dispatcher that schedules finish callbacks onto an event loop.

    Never blocks the calling (driver) thread.
    """
    def dispatch(callback: FinishCallback) -> None:
        loop.call_soon_threadsafe(callback)
    return dispatch


class PlaybackHandle(ABC):
    """One playback of one buffer."""

    @abstractmethod
    def start(self) -> None:
        """Begin playback."""

    @abstractmethod
    def stop(self) -> None:
        """Halt playback. May raise if the device refuses."""

    @abstractmethod
    def on_finish(self, callback: FinishCallback) -> None:
        """Register a callback fired once when playback ends on its own."""

    def close(self) -> None:
        """Release device resources held by the handle."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True while audio is being produced."""


class AudioEngine(ABC):
    """Top-level audio handle, acquired once per session.

    Finish notifications may originate on a driver thread. They are passed
    through the dispatcher installed with `set_dispatcher` so the owner can
    marshal them onto its event loop.
    """

    def __init__(
        self,
        sample_rate: int = AUDIO_SAMPLE_RATE_OUTPUT,
        channels: int = AUDIO_NUM_CHANNELS,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._dispatch: Dispatcher = _call_inline

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    def set_dispatcher(self, dispatch: Dispatcher | None) -> None:
        """Set how finish callbacks are delivered (None = call inline)."""
        self._dispatch = dispatch or _call_inline

    def dispatch(self, callback: FinishCallback) -> None:
        self._dispatch(callback)

    def decode(self, raw: bytes) -> PlayableBuffer:
        """Decode raw PCM from the synthesizer into a playable buffer."""
        return decode_pcm16(raw, sample_rate=self._sample_rate, channels=self._channels)

    @abstractmethod
    def create_playback(self, buffer: PlayableBuffer) -> PlaybackHandle:
        """Create a new, not yet started, handle bound to buffer."""

    @abstractmethod
    def close(self) -> None:
        """Release the engine and any handles still playing."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def __enter__(self) -> "AudioEngine":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
