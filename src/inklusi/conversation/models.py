"""Data models for the conversation log and turn outcomes.

Messages are append-only records. Only the playing flag changes after
creation; audio availability is not stored here at all, it is derived from
the session's AudioAssetStore.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import uuid4

from ..llm.models import ModelVariant, Source


class Sender(str, Enum):
    USER = "user"
    BOT = "bot"
    ERROR = "error"


_IMMUTABLE_FIELDS = frozenset({"id", "sender", "text", "timestamp", "sources"})


def new_message_id() -> str:
    return uuid4().hex


@dataclass(eq=False)
class Message:
    """A single entry in the conversation."""

    sender: Sender
    text: str
    sources: tuple[Source, ...] = ()
    id: str = field(default_factory=new_message_id)
    timestamp: datetime = field(default_factory=datetime.now)
    audio_playing: bool = False

    def __setattr__(self, name: str, value: object) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Message.{name} cannot be changed after creation")
        super().__setattr__(name, value)


class TurnState(str, Enum):
    IDLE = "idle"
    SENDING = "sending"


class TurnStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class SynthesisOutcome(str, Enum):
    """What happened to speech for a bot message."""

    AVAILABLE = "available"
    DEGRADED = "degraded"  # synthesis or decode failed, text only
    SKIPPED = "skipped"  # no synthesizer configured


class PlaybackResult(str, Enum):
    STARTED = "started"
    STOPPED = "stopped"
    NO_AUDIO = "no_audio"
    NO_ENGINE = "no_engine"
    NOT_PLAYING = "not_playing"
    FAILED = "failed"


class SessionEvent(str, Enum):
    MESSAGE_ADDED = "message_added"
    MESSAGE_UPDATED = "message_updated"
    LOADING_CHANGED = "loading_changed"


@dataclass(frozen=True)
class SynthesisResult:
    outcome: SynthesisOutcome
    error: str | None = None


@dataclass(frozen=True)
class TurnResult:
    """Outcome of one submit() round trip."""

    status: TurnStatus
    message: Message
    variant: ModelVariant
    synthesis: SynthesisResult | None = None
    error: str | None = None

    @property
    def audio_available(self) -> bool:
        return self.synthesis is not None and self.synthesis.outcome == SynthesisOutcome.AVAILABLE
