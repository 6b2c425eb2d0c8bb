"""Decoding of raw synthesized audio into playable buffers."""

import base64
import binascii

import numpy as np

from .config import AUDIO_NUM_CHANNELS, AUDIO_SAMPLE_RATE_OUTPUT, PCM_SAMPLE_WIDTH
from .models import AudioDecodeError, PlayableBuffer


def decode_base64(data: str) -> bytes:
    """Decode a base64 audio payload into raw bytes."""
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise AudioDecodeError(f"Invalid base64 audio payload: {e}") from e


def decode_pcm16(
    raw: bytes,
    sample_rate: int = AUDIO_SAMPLE_RATE_OUTPUT,
    channels: int = AUDIO_NUM_CHANNELS,
) -> PlayableBuffer:
    """Convert interleaved little-endian int16 PCM into a float32 buffer.

    Args:
        raw: PCM bytes
        sample_rate: Frames per second of the payload
        channels: Interleaved channel count

    Returns:
        PlayableBuffer shaped (frames, channels)

    Raises:
        AudioDecodeError: If the payload is empty or not frame-aligned
    """
    if channels < 1:
        raise AudioDecodeError(f"Invalid channel count: {channels}")
    if not raw:
        raise AudioDecodeError("Empty audio payload")
    if len(raw) % PCM_SAMPLE_WIDTH:
        raise AudioDecodeError(f"PCM payload has odd length ({len(raw)} bytes)")

    pcm = np.frombuffer(raw, dtype="<i2")
    if pcm.size % channels:
        raise AudioDecodeError(
            f"{pcm.size} samples cannot be split into {channels} channels"
        )

    samples = (pcm.astype(np.float32) / 32768.0).reshape(-1, channels)
    return PlayableBuffer(samples=samples, sample_rate=sample_rate)
