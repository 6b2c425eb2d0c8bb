"""Conversation module.

Owns the message log, the loading flag and per-message audio playback.
"""

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
from .session import ChatSession, SessionBusyError, format_error_message

__all__ = [
    "ChatSession",
    "Conversation",
    "Message",
    "PlaybackController",
    "PlaybackResult",
    "Sender",
    "SessionBusyError",
    "SessionEvent",
    "SynthesisOutcome",
    "SynthesisResult",
    "TurnResult",
    "TurnState",
    "TurnStatus",
    "format_error_message",
]
