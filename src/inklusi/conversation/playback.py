"""Audio playback controller.

Hides how per-message play/stop requests map onto a single live playback
handle. All state it touches is passed in explicitly: the conversation
(for the playing flags), the asset store (for buffers) and the engine.
"""

from collections.abc import Callable
from typing import Any

from ..audio.base import AudioEngine, PlaybackHandle
from ..audio.store import AudioAssetStore
from .conversation import Conversation
from .models import PlaybackResult

ChangeCallback = Callable[[list[str]], None]


class PlaybackController:
    """Plays at most one message's audio at a time.

    Starting playback for a message pre-empts whatever is playing. Stop
    never raises: device errors are reported through the debug callback
    and as PlaybackResult.FAILED.
    """

    def __init__(
        self,
        conversation: Conversation,
        store: AudioAssetStore,
        engine: AudioEngine | None = None,
        on_change: ChangeCallback | None = None,
    ) -> None:
        self._conversation = conversation
        self._store = store
        self._engine = engine
        self._on_change = on_change
        self._handle: PlaybackHandle | None = None
        self._handle_message_id: str | None = None
        self._debug_callback: Any | None = None

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback: Callable(level, component, message)."""
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "Audio", message)

    def _notify(self, changed: list[str]) -> None:
        if changed and self._on_change:
            self._on_change(changed)

    @property
    def engine(self) -> AudioEngine | None:
        return self._engine

    @property
    def is_playing(self) -> bool:
        return self._handle is not None

    @property
    def playing_message_id(self) -> str | None:
        return self._handle_message_id

    def _release(self, handle: PlaybackHandle) -> None:
        try:
            handle.close()
        except Exception as e:
            self._debug("error", f"Error releasing audio handle: {e}")

    def _discard_current(self) -> None:
        """Stop and drop the live handle, if any, without touching flags."""
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        self._handle_message_id = None
        try:
            handle.stop()
        except Exception as e:
            self._debug("error", f"Error stopping pre-empted audio: {e}")
        self._release(handle)

    def play(self, message_id: str) -> PlaybackResult:
        buffer = self._store.get(message_id)
        if buffer is None:
            self._debug("warning", f"Audio buffer not found for message ID: {message_id}")
            return PlaybackResult.NO_AUDIO

        if self._engine is None:
            self._debug("warning", "Audio engine not available, cannot play audio")
            return PlaybackResult.NO_ENGINE

        changed = self._conversation.clear_all_playing()
        self._discard_current()

        handle: PlaybackHandle | None = None
        try:
            handle = self._engine.create_playback(buffer)
            handle.on_finish(lambda: self._finished(handle, message_id))
            self._handle = handle
            self._handle_message_id = message_id
            handle.start()
        except Exception as e:
            self._debug("error", f"Error starting audio for {message_id}: {e}")
            if handle is not None:
                if self._handle is handle:
                    self._handle = None
                    self._handle_message_id = None
                self._release(handle)
            self._notify(changed)
            return PlaybackResult.FAILED

        if self._handle is handle:
            changed.extend(self._conversation.mark_playing(message_id))
        self._notify(sorted(set(changed)))
        self._debug("debug", f"Playing {buffer.duration:.1f}s of audio for {message_id}")
        return PlaybackResult.STARTED

    def _finished(self, handle: PlaybackHandle, message_id: str) -> None:
        # Stale notifications from pre-empted or stopped handles are ignored
        if handle is not self._handle:
            return
        self._handle = None
        self._handle_message_id = None
        self._release(handle)
        if self._conversation.clear_playing(message_id):
            self._notify([message_id])
        self._debug("debug", f"Playback finished for {message_id}")

    def stop(self, message_id: str) -> PlaybackResult:
        handle = self._handle
        if handle is None:
            return PlaybackResult.NOT_PLAYING

        playing_id = self._handle_message_id
        self._handle = None
        self._handle_message_id = None

        result = PlaybackResult.STOPPED
        try:
            handle.stop()
        except Exception as e:
            self._debug("error", f"Error stopping audio source: {e}")
            result = PlaybackResult.FAILED
        self._release(handle)

        changed = [
            mid for mid in dict.fromkeys((message_id, playing_id))
            if mid is not None and self._conversation.clear_playing(mid)
        ]
        self._notify(changed)
        return result

    def stop_all(self) -> PlaybackResult:
        """Stop whatever is playing (used on shutdown)."""
        if self._handle_message_id is None:
            return PlaybackResult.NOT_PLAYING
        return self.stop(self._handle_message_id)
