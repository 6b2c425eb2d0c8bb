"""Ordered, append-only message log."""

from collections.abc import Iterator

from .models import Message


class Conversation:
    """Messages in display order.

    Invariant: at most one message has audio_playing set.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._index: dict[str, Message] = {}

    def append(self, message: Message) -> Message:
        if message.id in self._index:
            raise ValueError(f"Duplicate message id: {message.id}")
        self._messages.append(message)
        self._index[message.id] = message
        return message

    def get(self, message_id: str) -> Message | None:
        return self._index.get(message_id)

    def playing(self) -> list[str]:
        """Ids of messages currently flagged as playing."""
        return [m.id for m in self._messages if m.audio_playing]

    def mark_playing(self, message_id: str) -> list[str]:
        """Flag one message as playing, clearing every other flag.

        Returns:
            Ids whose flag changed
        """
        changed = self.clear_all_playing()
        message = self._index.get(message_id)
        if message is not None:
            message.audio_playing = True
            changed.append(message_id)
        return changed

    def clear_playing(self, message_id: str) -> bool:
        message = self._index.get(message_id)
        if message is None or not message.audio_playing:
            return False
        message.audio_playing = False
        return True

    def clear_all_playing(self) -> list[str]:
        cleared = []
        for message in self._messages:
            if message.audio_playing:
                message.audio_playing = False
                cleared.append(message.id)
        return cleared

    def snapshot(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._index
