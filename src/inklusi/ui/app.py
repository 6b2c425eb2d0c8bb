"""Main Textual TUI application.

Orchestrates the UI components and wires them to a ChatSession.
"""

import asyncio
import contextlib

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Footer, Header

from ..audio.base import loop_dispatcher
from ..conversation.models import Message, PlaybackResult, Sender, SessionEvent, TurnStatus
from ..conversation.session import ChatSession, SessionBusyError
from .config import APP_TITLE, NOTIFY_ERROR, NOTIFY_SHORT, LogLevel
from .styles import APP_CSS
from .themes import INKLUSI_INDIGO
from .widgets import (
    ChatHistoryWidget,
    ChatInputBar,
    DebugPanel,
    MessageCard,
    StatusBar,
)


class InklusiChatApp(App):
    """Textual TUI for the UDL companion chatbot."""

    CSS = APP_CSS
    TITLE = APP_TITLE

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit"),
        Binding("ctrl+s", "stop_audio", "Stop Audio"),
        Binding("ctrl+r", "copy_last_response", "Copy Response"),
        Binding("ctrl+d", "toggle_debug", "Log"),
    ]

    def __init__(
        self,
        session: ChatSession,
        log_level: str | None = None,
    ) -> None:
        super().__init__()
        self._session = session
        self._log_level = log_level

    @property
    def session(self) -> ChatSession:
        return self._session

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield ChatHistoryWidget(id="chat-history")
        yield DebugPanel(id="debug-panel")
        with Vertical(id="bottom-bar"):
            yield StatusBar(id="status-bar", audio_enabled=self._session.audio_enabled)
            yield ChatInputBar(id="chat-input-bar")
        yield Footer()

    def on_mount(self) -> None:
        """Called when app is mounted."""
        self.register_theme(INKLUSI_INDIGO)
        self.theme = "inklusi-indigo"

        log_panel = self.query_one("#debug-panel", DebugPanel)
        if self._log_level is not None:
            log_panel.log_level = LogLevel.from_string(self._log_level)
            log_panel.show()
            log_panel.info("TUI", f"Log panel enabled with level: {self._log_level.upper()}")

        # Finish notifications arrive on the audio driver thread
        engine = self._session.playback.engine
        if engine is not None:
            engine.set_dispatcher(loop_dispatcher(asyncio.get_running_loop()))

        self._session.set_update_callback(self._on_session_update)
        self._session.set_debug_callback(self._route_debug)

        audio = "speech on" if self._session.audio_enabled else "text only"
        self.sub_title = f"Universal Design for Learning | {audio}"

        self.query_one("#chat-input-bar", ChatInputBar).focus_input()
        self._start_session()

    def _route_debug(self, level: str, component: str, message: str) -> None:
        """Route debug messages to the log panel."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        if level == "debug":
            log_panel.debug(component, message)
        elif level == "info":
            log_panel.info(component, message)
        elif level == "warning":
            log_panel.warning(component, message)
        elif level == "error":
            log_panel.error(component, message)

    def _on_session_update(self, event: SessionEvent, message: Message | None) -> None:
        chat = self.query_one("#chat-history", ChatHistoryWidget)
        status = self.query_one("#status-bar", StatusBar)

        if event == SessionEvent.MESSAGE_ADDED and message is not None:
            chat.add_message(message, self._session.is_audio_available(message.id))
        elif event == SessionEvent.MESSAGE_UPDATED and message is not None:
            chat.update_message(message, self._session.is_audio_available(message.id))
            status.update_status(playing=self._session.playback.is_playing)
        elif event == SessionEvent.LOADING_CHANGED:
            loading = self._session.is_loading
            self.query_one("#chat-input-bar", ChatInputBar).set_loading(loading)
            status.update_status(loading=loading)

    @work(group="session")
    async def _start_session(self) -> None:
        result = await self._session.start()
        if result is not None:
            self._route_debug("info", "TUI", f"Welcome audio: {result.outcome.value}")

    def on_chat_input_bar_submitted(self, event: ChatInputBar.Submitted) -> None:
        """Handle user input submission."""
        if self._session.is_loading:
            self.notify("Please wait for the current reply", severity="warning", timeout=NOTIFY_SHORT)
            return
        self._run_turn(event.value)

    @work(group="turn")
    async def _run_turn(self, text: str) -> None:
        status = self.query_one("#status-bar", StatusBar)
        try:
            result = await self._session.submit(text)
        except SessionBusyError as e:
            self.notify(str(e), severity="warning", timeout=NOTIFY_SHORT)
            return

        if result is None:
            return
        status.update_status(variant=result.variant.value)
        if result.status == TurnStatus.FAILURE:
            self.notify(f"Error: {(result.error or '')[:50]}", severity="error", timeout=NOTIFY_ERROR)

    def on_message_card_play_requested(self, event: MessageCard.PlayRequested) -> None:
        result = self._session.play(event.message_id)
        if result == PlaybackResult.NO_AUDIO:
            self.notify("No audio for this message", severity="warning", timeout=NOTIFY_SHORT)
        elif result == PlaybackResult.NO_ENGINE:
            self.notify("Audio output is not available", severity="warning", timeout=NOTIFY_SHORT)
        elif result == PlaybackResult.FAILED:
            self.notify("Could not play audio", severity="error", timeout=NOTIFY_ERROR)

    def on_message_card_stop_requested(self, event: MessageCard.StopRequested) -> None:
        self._session.stop(event.message_id)

    def action_stop_audio(self) -> None:
        """Stop whatever is playing."""
        playing = self._session.playback.playing_message_id
        if playing is not None:
            self._session.stop(playing)

    def action_toggle_debug(self) -> None:
        """Toggle the log panel visibility."""
        log_panel = self.query_one("#debug-panel", DebugPanel)
        is_visible = log_panel.toggle()
        self.notify(f"Log panel {'shown' if is_visible else 'hidden'}", timeout=NOTIFY_SHORT)

    def action_copy_last_response(self) -> None:
        """Copy last bot reply to clipboard."""
        for message in reversed(self._session.messages):
            if message.sender == Sender.BOT:
                self.copy_to_clipboard(message.text)
                self.notify("Response copied", timeout=NOTIFY_SHORT)
                return
        self.notify("No response to copy", severity="warning", timeout=NOTIFY_SHORT)


async def run_textual_tui(session: ChatSession, log_level: str | None = None) -> None:
    """Run the Textual TUI and release the session when it exits.

    Args:
        session: Configured chat session (owns model, speech and audio resources)
        log_level: Log level for panel (debug/info/warning/error), None to hide
    """
    app = InklusiChatApp(session=session, log_level=log_level)
    try:
        await app.run_async()
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        with contextlib.suppress(Exception):
            await session.close()
