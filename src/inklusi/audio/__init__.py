"""Audio decode and playback module.

Module structure:
- models.py: PlayableBuffer and decode errors
- codec.py: raw PCM / base64 decoding
- store.py: per-session buffer storage keyed by message id
- base.py: engine and playback handle interfaces
- sounddevice_engine.py: PortAudio implementation (imported lazily)
- factory.py: backend selection
"""

from .base import AudioEngine, PlaybackHandle, loop_dispatcher
from .codec import decode_base64, decode_pcm16
from .factory import create_audio_engine
from .models import AudioDecodeError, PlayableBuffer
from .store import AudioAssetStore

__all__ = [
    "AudioAssetStore",
    "AudioDecodeError",
    "AudioEngine",
    "PlayableBuffer",
    "PlaybackHandle",
    "create_audio_engine",
    "decode_base64",
    "decode_pcm16",
    "loop_dispatcher",
]
