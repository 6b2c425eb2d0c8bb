"""Data models for decoded audio."""

from dataclasses import dataclass

import numpy as np


class AudioDecodeError(ValueError):
    """Raised when a raw payload cannot be decoded into a playable buffer."""


@dataclass(frozen=True)
class PlayableBuffer:
    """Decoded, ready-to-play audio held in memory.

    `samples` is float32 in [-1, 1) shaped (frames, channels).
    """

    samples: np.ndarray
    sample_rate: int

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1]) if self.samples.ndim > 1 else 1

    @property
    def duration(self) -> float:
        """Length in seconds."""
        return self.frames / self.sample_rate if self.sample_rate else 0.0
