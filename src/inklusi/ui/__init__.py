"""Terminal UI module for inklusi.

Provides a Textual-based TUI for the chat session.

Module structure (Parnas principle - each module hides a design decision):
- widgets.py: Custom widgets (message cards, input bar, status, log panel)
- formatting.py: Display strings for headers and sources
- styles.py: CSS styling (layout decisions)
- themes.py: Color palettes and theme configuration
- app.py: Application orchestration (user interaction flow)
"""

from .app import InklusiChatApp, run_textual_tui
from .config import LogLevel
from .widgets import ChatHistoryWidget, ChatInputBar, DebugPanel, MessageCard, StatusBar

__all__ = [
    "ChatHistoryWidget",
    "ChatInputBar",
    "DebugPanel",
    "InklusiChatApp",
    "LogLevel",
    "MessageCard",
    "StatusBar",
    "run_textual_tui",
]
