"""Custom Textual widgets for the TUI.

Hides widget implementation details:
- Message card rendering (header, markdown body, sources, audio button)
- Input history management and the loading lock on the input bar
- Status line formatting
- Log rendering and level filtering
"""

from datetime import datetime

from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.events import Click
from textual.message import Message as TextualMessage
from textual.widgets import Button, Markdown, RichLog, Static, TextArea

from ..conversation.models import Message, Sender
from .config import INPUT_HISTORY_MAX_SIZE, LOG_TIMESTAMP_FORMAT, VARIANT_LABELS, LogLevel
from .formatting import format_sources, message_header

_SENDER_CLASSES = {
    Sender.USER: "user-message",
    Sender.BOT: "bot-message",
    Sender.ERROR: "error-message",
}


def card_id(message_id: str) -> str:
    """Widget id for a message card (ids may not start with a digit)."""
    return f"msg-{message_id}"


class MessageCard(Vertical):
    """One chat message with optional sources and a play/stop button.

    Clicking the message body copies its text to the clipboard.
    """

    class PlayRequested(TextualMessage):
        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    class StopRequested(TextualMessage):
        def __init__(self, message_id: str) -> None:
            super().__init__()
            self.message_id = message_id

    def __init__(self, message: Message, audio_available: bool = False) -> None:
        super().__init__(
            id=card_id(message.id),
            classes=f"chat-message {_SENDER_CLASSES[message.sender]}",
        )
        self._message = message
        self._audio_available = audio_available

    @property
    def message_id(self) -> str:
        return self._message.id

    def compose(self):
        yield Static(message_header(self._message), classes="message-header")
        if self._message.sender == Sender.BOT:
            yield Markdown(self._message.text, classes="message-content")
        else:
            yield Static(self._message.text, classes="message-content", markup=False)

        sources = format_sources(self._message.sources)
        if sources:
            yield Markdown(sources, classes="message-sources")

        if self._message.sender == Sender.BOT:
            with Horizontal(classes="audio-controls"):
                yield Button("Play", classes="audio-button")

    def on_mount(self) -> None:
        self.refresh_audio(self._audio_available)

    def refresh_audio(self, available: bool) -> None:
        """Sync the audio button with availability and the playing flag."""
        self._audio_available = available
        for controls in self.query(".audio-controls"):
            controls.set_class(available, "-available")
        for button in self.query(".audio-button").results(Button):
            playing = self._message.audio_playing
            button.label = "Stop" if playing else "Play"
            button.set_class(playing, "-playing")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if not event.button.has_class("audio-button"):
            return
        event.stop()
        if self._message.audio_playing:
            self.post_message(self.StopRequested(self._message.id))
        else:
            self.post_message(self.PlayRequested(self._message.id))

    def on_click(self, event: Click) -> None:
        """Copy message text to clipboard when clicked."""
        if isinstance(event.widget, Button):
            return
        event.stop()
        try:
            import pyperclip
            pyperclip.copy(self._message.text)
            self.app.notify("Copied to clipboard", timeout=2)
        except Exception:
            self.app.copy_to_clipboard(self._message.text)
            self.app.notify("Copied (terminal)", timeout=2)


class ChatHistoryWidget(VerticalScroll):
    """Scrollable chat history in insertion order."""

    BORDER_TITLE = "Chat"
    BORDER_SUBTITLE = "Conversation"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._cards: dict[str, MessageCard] = {}

    def add_message(self, message: Message, audio_available: bool = False) -> None:
        card = MessageCard(message, audio_available=audio_available)
        self._cards[message.id] = card
        self.mount(card)
        self.border_subtitle = f"{len(self._cards)} messages"
        self.scroll_end(animate=False)

    def update_message(self, message: Message, audio_available: bool) -> None:
        card = self._cards.get(message.id)
        if card is not None:
            card.refresh_audio(audio_available)

    @property
    def message_count(self) -> int:
        return len(self._cards)


class ChatInputBar(Horizontal):
    """Chat input bar with TextArea and Send button.

    Submission is refused while loading; Up/Down at the text edges walk
    through previously sent messages.
    """

    class Submitted(TextualMessage):
        """Message sent when user submits input."""

        def __init__(self, value: str) -> None:
            super().__init__()
            self.value = value

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._history: list[str] = []
        self._history_index: int = -1
        self._loading = False

    def compose(self):
        text_area = TextArea(id="chat-input", show_line_numbers=False)
        text_area.cursor_blink = False
        yield text_area
        yield Button("Send", id="send-btn", variant="primary").with_tooltip(
            "Send message (Ctrl+J)"
        )

    def on_mount(self) -> None:
        text_area = self.query_one("#chat-input", TextArea)
        text_area.highlight_cursor_line = False
        text_area.focus()

    @property
    def loading(self) -> bool:
        return self._loading

    def set_loading(self, loading: bool) -> None:
        """Disable the send affordance while a reply is pending."""
        self._loading = loading
        self.set_class(loading, "-loading")
        button = self.query_one("#send-btn", Button)
        button.disabled = loading
        button.label = "..." if loading else "Send"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "send-btn":
            self._submit()

    def on_key(self, event) -> None:
        """Handle keyboard shortcuts.

        Note: ctrl+enter cannot work in terminals (terminal doesn't pass
        ctrl/shift modifiers with Enter). Use ctrl+j as the submit shortcut.
        """
        if event.key == "ctrl+j":
            self._submit()
            event.prevent_default()
            event.stop()
        elif event.key == "up" and self._is_cursor_at_start():
            self._navigate_history(-1)
            event.prevent_default()
            event.stop()
        elif event.key == "down" and self._is_cursor_at_end():
            self._navigate_history(1)
            event.prevent_default()
            event.stop()

    def _is_cursor_at_start(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        return text_area.cursor_location == (0, 0)

    def _is_cursor_at_end(self) -> bool:
        text_area = self.query_one("#chat-input", TextArea)
        lines = text_area.text.split("\n")
        return text_area.cursor_location == (len(lines) - 1, len(lines[-1]))

    def _navigate_history(self, direction: int) -> None:
        if not self._history:
            return
        text_area = self.query_one("#chat-input", TextArea)
        if direction < 0:
            if self._history_index == -1:
                self._history_index = len(self._history) - 1
            elif self._history_index > 0:
                self._history_index -= 1
        else:
            if self._history_index < len(self._history) - 1:
                self._history_index += 1
            else:
                self._history_index = -1
                text_area.text = ""
                return
        text_area.text = self._history[self._history_index]

    def _submit(self) -> None:
        if self._loading:
            return
        text_area = self.query_one("#chat-input", TextArea)
        value = text_area.text.strip()
        if not value:
            return
        if not self._history or self._history[-1] != value:
            self._history.append(value)
            del self._history[:-INPUT_HISTORY_MAX_SIZE]
        self._history_index = -1
        text_area.text = ""
        self.post_message(self.Submitted(value))

    def focus_input(self) -> None:
        """Focus the text input."""
        self.query_one("#chat-input", TextArea).focus()


class StatusBar(Static):
    """One-line status: turn state, last routed variant, audio mode."""

    def __init__(self, *args, audio_enabled: bool = True, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._loading = False
        self._variant: str | None = None
        self._audio_enabled = audio_enabled
        self._playing = False

    def on_mount(self) -> None:
        self._update_display()

    def update_status(
        self,
        loading: bool | None = None,
        variant: str | None = None,
        playing: bool | None = None,
    ) -> None:
        if loading is not None:
            self._loading = loading
        if variant is not None:
            self._variant = variant
        if playing is not None:
            self._playing = playing
        self._update_display()

    def _update_display(self) -> None:
        state = "[bold yellow]Thinking...[/]" if self._loading else "[bold green]Ready[/]"
        variant = VARIANT_LABELS.get(self._variant, self._variant) if self._variant else "-"
        if not self._audio_enabled:
            audio = "[dim]off[/]"
        elif self._playing:
            audio = "[bold]playing[/]"
        else:
            audio = "on"
        self.update(
            f"{state}  [bold cyan]Model:[/] {variant}  [bold magenta]Audio:[/] {audio}"
        )


class DebugPanel(RichLog):
    """Log panel for real-time tracing with level filtering.

    Shows timestamped log messages from all components.
    Supports standard log levels: DEBUG < INFO < WARNING < ERROR.
    Hidden by default, shown with --log-level flag or toggled with Ctrl+D.
    """

    BORDER_TITLE = "Log"
    BORDER_SUBTITLE = "Trace log"

    def __init__(self, *args, log_level: int = LogLevel.INFO, **kwargs) -> None:
        super().__init__(
            *args,
            markup=True,
            highlight=False,
            auto_scroll=True,
            wrap=True,
            **kwargs
        )
        self._log_level = log_level

    @property
    def log_level(self) -> int:
        """Current log level threshold."""
        return self._log_level

    @log_level.setter
    def log_level(self, level: int) -> None:
        self._log_level = level
        self._update_subtitle()

    def _update_subtitle(self) -> None:
        if self.display:
            self.border_subtitle = f"Level: {LogLevel.name(self._log_level)}"
        else:
            self.border_subtitle = "Hidden"

    def on_mount(self) -> None:
        """Hide by default."""
        self.display = False

    def log(
        self,
        component: str,
        message: str,
        level: int = LogLevel.DEBUG
    ) -> None:
        """Add a log entry if it meets the current level threshold.

        Args:
            component: Component name (TUI, LLM, TTS, Audio, Router)
            message: Log message
            level: Log level (LogLevel.DEBUG, INFO, WARNING, ERROR)
        """
        if level < self._log_level:
            return

        from rich.markup import escape

        timestamp = datetime.now().strftime(LOG_TIMESTAMP_FORMAT)
        level_colors = {
            LogLevel.DEBUG: "dim white",
            LogLevel.INFO: "cyan",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
        }
        component_colors = {
            "TUI": "cyan",
            "LLM": "magenta",
            "TTS": "bright_green",
            "Audio": "yellow",
            "Router": "bright_blue",
        }
        level_color = level_colors.get(level, "white")
        comp_color = component_colors.get(component, "white")

        self.write(
            f"[dim]{timestamp}[/] "
            f"[{level_color}]{LogLevel.name(level):<5}[/] "
            f"[{comp_color}]\\[{component}][/] {escape(message)}"
        )

    def debug(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.DEBUG)

    def info(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.INFO)

    def warning(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.WARNING)

    def error(self, component: str, message: str) -> None:
        self.log(component, message, LogLevel.ERROR)

    def show(self) -> None:
        self.display = True
        self._update_subtitle()

    def hide(self) -> None:
        self.display = False
        self.border_subtitle = "Hidden"

    def toggle(self) -> bool:
        """Toggle visibility. Returns new state."""
        if self.display:
            self.hide()
            return False
        self.show()
        return True
