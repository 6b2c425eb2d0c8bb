"""Audio engine backed by sounddevice (PortAudio).

Each playback opens an OutputStream whose callback copies frames out of the
decoded buffer; the stream's finished_callback becomes the handle's
on-finish notification.
"""

import contextlib
import threading
from typing import Any

import numpy as np
import sounddevice as sd

from .base import AudioEngine, FinishCallback, PlaybackHandle
from .config import AUDIO_NUM_CHANNELS, AUDIO_SAMPLE_RATE_OUTPUT, PLAYBACK_BLOCK_SIZE
from .models import PlayableBuffer


class SoundDevicePlayback(PlaybackHandle):
    """Plays one PlayableBuffer on an OutputStream."""

    def __init__(
        self,
        engine: "SoundDeviceAudioEngine",
        buffer: PlayableBuffer,
        device: Any | None = None,
        blocksize: int = PLAYBACK_BLOCK_SIZE,
    ) -> None:
        self._engine = engine
        self._buffer = buffer
        self._device = device
        self._blocksize = blocksize
        self._position = 0
        self._stream: sd.OutputStream | None = None
        self._callbacks: list[FinishCallback] = []
        self._stopped = False
        self._lock = threading.Lock()

    def on_finish(self, callback: FinishCallback) -> None:
        self._callbacks.append(callback)

    @property
    def active(self) -> bool:
        return self._stream is not None and self._stream.active

    def start(self) -> None:
        self._stream = sd.OutputStream(
            samplerate=self._buffer.sample_rate,
            channels=self._buffer.channels,
            dtype="float32",
            blocksize=self._blocksize,
            device=self._device,
            callback=self._fill,
            finished_callback=self._finished,
        )
        self._stream.start()

    def _fill(self, outdata: np.ndarray, frames: int, time_info: Any, status: sd.CallbackFlags) -> None:
        chunk = self._buffer.samples[self._position:self._position + frames]
        count = len(chunk)
        outdata[:count] = chunk
        self._position += count
        if count < frames:
            outdata[count:] = 0
            raise sd.CallbackStop()

    def _finished(self) -> None:
        # Runs on the PortAudio thread
        with self._lock:
            if self._stopped:
                return
        for callback in self._callbacks:
            self._engine.dispatch(callback)

    def stop(self) -> None:
        with self._lock:
            self._stopped = True
        if self._stream is not None:
            self._stream.stop()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close(ignore_errors=True)
            self._stream = None
        self._engine.forget(self)


class SoundDeviceAudioEngine(AudioEngine):
    """Audio engine playing through the default (or given) output device."""

    def __init__(
        self,
        sample_rate: int = AUDIO_SAMPLE_RATE_OUTPUT,
        channels: int = AUDIO_NUM_CHANNELS,
        device: Any | None = None,
        blocksize: int = PLAYBACK_BLOCK_SIZE,
    ) -> None:
        super().__init__(sample_rate=sample_rate, channels=channels)
        self._device = device
        self._blocksize = blocksize
        self._handles: set[SoundDevicePlayback] = set()

    def create_playback(self, buffer: PlayableBuffer) -> PlaybackHandle:
        handle = SoundDevicePlayback(self, buffer, device=self._device, blocksize=self._blocksize)
        self._handles.add(handle)
        return handle

    def forget(self, handle: SoundDevicePlayback) -> None:
        self._handles.discard(handle)

    def close(self) -> None:
        for handle in list(self._handles):
            with contextlib.suppress(sd.PortAudioError):
                handle.stop()
            handle.close()
        self._handles.clear()

    @property
    def backend_type(self) -> str:
        return "sounddevice"


def list_output_devices() -> list[dict[str, Any]]:
    """Describe output-capable devices (used by the health command)."""
    devices = sd.query_devices()
    return [
        {"index": index, "name": device["name"], "channels": device["max_output_channels"]}
        for index, device in enumerate(devices)
        if device["max_output_channels"] > 0
    ]
