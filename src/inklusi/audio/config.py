"""Audio format constants.

The TTS service returns raw 16-bit PCM; these describe how to interpret it.
"""

AUDIO_SAMPLE_RATE_OUTPUT = 24000
AUDIO_NUM_CHANNELS = 1
PCM_SAMPLE_WIDTH = 2  # bytes per int16 sample

# Frames handed to the output device per callback
PLAYBACK_BLOCK_SIZE = 1024
