"""Session-scoped storage of decoded audio.

Buffers are heavyweight and owned by the playback side, so they live here
keyed by message id rather than on the messages themselves.
"""

from collections.abc import Iterator

from .models import PlayableBuffer


class AudioAssetStore:
    """Mapping from message id to a decoded PlayableBuffer."""

    def __init__(self) -> None:
        self._buffers: dict[str, PlayableBuffer] = {}

    def put(self, message_id: str, buffer: PlayableBuffer) -> None:
        self._buffers[message_id] = buffer

    def get(self, message_id: str) -> PlayableBuffer | None:
        return self._buffers.get(message_id)

    def clear(self) -> None:
        self._buffers.clear()

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buffers)
