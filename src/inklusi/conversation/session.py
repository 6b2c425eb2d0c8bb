"""Chat session: the conversation state machine.

Hidden design decisions:
- Turn lifecycle (IDLE -> SENDING -> IDLE) and the loading flag
- Routing of user text to a model variant
- Best-effort speech synthesis for bot replies
- Which session-scoped resources exist and when they are released

Everything runs on one event loop. A turn suspends while waiting on the
model and the synthesizer, so play/stop requests may interleave with it.
"""

from collections.abc import Callable
from typing import Any

from ..audio.base import AudioEngine
from ..audio.codec import decode_pcm16
from ..audio.models import AudioDecodeError, PlayableBuffer
from ..audio.store import AudioAssetStore
from ..llm.base import ModelClient
from ..llm.models import RequestError
from ..llm.router import ModelRouter
from ..speech.base import SpeechSynthesizer
from ..speech.models import SynthesisError
from .config import (
    DEFAULT_ERROR_REASON,
    ERROR_MESSAGE_TEMPLATE,
    LOG_PREVIEW_LENGTH,
    WELCOME_MESSAGE,
)
from .conversation import Conversation
from .models import (
    Message,
    PlaybackResult,
    Sender,
    SessionEvent,
    SynthesisOutcome,
    SynthesisResult,
    TurnResult,
    TurnState,
    TurnStatus,
)
from .playback import PlaybackController

UpdateCallback = Callable[[SessionEvent, Message | None], None]


class SessionBusyError(RuntimeError):
    """Raised when submit() is called while a turn is in flight."""


def _preview(text: str) -> str:
    return text if len(text) <= LOG_PREVIEW_LENGTH else text[:LOG_PREVIEW_LENGTH] + "..."


def format_error_message(error: Exception) -> str:
    """User-facing text for a failed generation."""
    reason = getattr(error, "message", None) or str(error) or DEFAULT_ERROR_REASON
    return ERROR_MESSAGE_TEMPLATE.format(reason=reason)


class ChatSession:
    """One user's chat: message log, loading flag, audio assets and playback.

    Usage:
        async with ChatSession(model_client, synthesizer, engine) as session:
            await session.start()
            result = await session.submit("Apa itu UDL?")
            session.play(result.message.id)
    """

    def __init__(
        self,
        model_client: ModelClient,
        synthesizer: SpeechSynthesizer | None = None,
        audio_engine: AudioEngine | None = None,
        router: ModelRouter | None = None,
        welcome_message: str | None = WELCOME_MESSAGE,
    ) -> None:
        self._model_client = model_client
        self._synthesizer = synthesizer
        self._audio_engine = audio_engine
        self._router = router or ModelRouter()
        self._welcome_message = welcome_message

        self._conversation = Conversation()
        self._store = AudioAssetStore()
        self._playback = PlaybackController(
            self._conversation,
            self._store,
            audio_engine,
            on_change=self._on_playing_changed,
        )

        self._state = TurnState.IDLE
        self._loading = False
        self._started = False
        self._closed = False
        self._update_callback: UpdateCallback | None = None
        self._debug_callback: Any | None = None

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def set_update_callback(self, callback: UpdateCallback | None) -> None:
        """Set the listener notified of appended/updated messages and loading changes."""
        self._update_callback = callback

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for detailed logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
                      level: 'debug', 'info', 'warning', 'error'
        """
        self._debug_callback = callback
        self._playback.set_debug_callback(callback)

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _emit(self, event: SessionEvent, message: Message | None = None) -> None:
        if self._update_callback:
            self._update_callback(event, message)

    def _on_playing_changed(self, message_ids: list[str]) -> None:
        for message_id in message_ids:
            message = self._conversation.get(message_id)
            if message is not None:
                self._emit(SessionEvent.MESSAGE_UPDATED, message)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        self._state = TurnState.SENDING if loading else TurnState.IDLE
        self._emit(SessionEvent.LOADING_CHANGED)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    @property
    def store(self) -> AudioAssetStore:
        return self._store

    @property
    def playback(self) -> PlaybackController:
        return self._playback

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._conversation.snapshot()

    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def audio_enabled(self) -> bool:
        return self._synthesizer is not None

    def is_audio_available(self, message_id: str) -> bool:
        return message_id in self._store

    def _append(self, message: Message) -> Message:
        self._conversation.append(message)
        self._emit(SessionEvent.MESSAGE_ADDED, message)
        return message

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    def _decode(self, raw: bytes) -> PlayableBuffer:
        if self._audio_engine is not None:
            return self._audio_engine.decode(raw)
        return decode_pcm16(raw, sample_rate=self._synthesizer.sample_rate)

    async def _synthesize(self, message: Message) -> SynthesisResult:
        """Best-effort speech for a bot message; failures degrade to text only."""
        if self._synthesizer is None:
            return SynthesisResult(SynthesisOutcome.SKIPPED)

        try:
            raw = await self._synthesizer.synthesize(message.text)
            buffer = self._decode(raw)
        except (SynthesisError, AudioDecodeError) as e:
            self._debug("warning", "TTS", f"Failed to generate TTS audio: {e}")
            return SynthesisResult(SynthesisOutcome.DEGRADED, error=str(e))
        except Exception as e:
            self._debug("error", "TTS", f"Unexpected TTS failure: {e!r}")
            return SynthesisResult(SynthesisOutcome.DEGRADED, error=str(e) or repr(e))

        self._store.put(message.id, buffer)
        self._debug("info", "TTS", f"Audio ready ({buffer.duration:.1f}s) for {message.id}")
        return SynthesisResult(SynthesisOutcome.AVAILABLE)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def start(self) -> SynthesisResult | None:
        """Show the welcome message and pre-generate its audio.

        Returns:
            Synthesis outcome for the welcome message, or None when the
            session has no welcome message
        """
        if self._started:
            raise RuntimeError("Session already started")
        self._started = True

        if not self._welcome_message:
            return None

        welcome = self._append(Message(sender=Sender.BOT, text=self._welcome_message))
        result = await self._synthesize(welcome)
        if result.outcome == SynthesisOutcome.AVAILABLE:
            self._emit(SessionEvent.MESSAGE_UPDATED, welcome)
        return result

    async def submit(self, text: str) -> TurnResult | None:
        """Run one round trip for user text.

        Blank text is ignored (returns None). The USER message is appended
        before anything is awaited.

        Raises:
            SessionBusyError: If a turn is already in flight
        """
        if not text or not text.strip():
            return None
        if self._loading:
            raise SessionBusyError("A message is already being processed")

        self._append(Message(sender=Sender.USER, text=text))
        self._set_loading(True)

        try:
            variant = self._router.select_variant(text)
            self._debug("info", "Router", f"'{_preview(text)}' -> {variant.value}")

            try:
                reply = await self._model_client.send(text, variant)
            except Exception as e:
                error = e if isinstance(e, RequestError) else RequestError(str(e), variant=variant)
                self._debug("error", "LLM", f"Error sending message: {e!r}")
                message = self._append(Message(sender=Sender.ERROR, text=format_error_message(error)))
                return TurnResult(
                    status=TurnStatus.FAILURE,
                    message=message,
                    variant=variant,
                    error=error.message or DEFAULT_ERROR_REASON,
                )

            self._debug("info", "LLM", f"Reply received ({len(reply.text)} chars, {len(reply.sources)} sources)")

            bot_message = Message(sender=Sender.BOT, text=reply.text, sources=tuple(reply.sources))
            synthesis = await self._synthesize(bot_message)
            self._append(bot_message)
        finally:
            self._set_loading(False)

        return TurnResult(
            status=TurnStatus.SUCCESS,
            message=bot_message,
            variant=variant,
            synthesis=synthesis,
        )

    def play(self, message_id: str) -> PlaybackResult:
        """Play the stored audio for a message, pre-empting any other playback."""
        return self._playback.play(message_id)

    def stop(self, message_id: str) -> PlaybackResult:
        """Stop playback. Never raises; see PlaybackResult.FAILED."""
        return self._playback.stop(message_id)

    async def close(self) -> None:
        """Release session resources (once)."""
        if self._closed:
            return
        self._closed = True

        self._playback.stop_all()
        if self._audio_engine is not None:
            try:
                self._audio_engine.close()
            except Exception as e:
                self._debug("error", "Audio", f"Error closing audio engine: {e}")
        if self._synthesizer is not None:
            try:
                await self._synthesizer.close()
            except Exception as e:
                self._debug("error", "TTS", f"Error closing speech synthesizer: {e}")
        self._store.clear()
        await self._model_client.close()

    async def __aenter__(self) -> "ChatSession":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
