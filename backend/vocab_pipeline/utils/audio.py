"""
Decoding of the speech model's raw audio.

The speech model returns headerless 16-bit signed little-endian PCM, mono,
at 24 kHz. There is no format detection: anything else is an error.
"""
import io
import logging
import sys
import wave
from array import array
from typing import Optional

from vocab_pipeline.config import config
from vocab_pipeline.errors import AudioDecodeError, DecodeError
from vocab_pipeline.types import DecodedAudio
from vocab_pipeline.utils.binary_text import bytes_from_base64

logger = logging.getLogger(__name__)

PCM_SAMPLE_WIDTH = 2
PCM_CHANNELS = 1
PCM_SCALE = 32768.0


def decode_pcm16(audio_b64: str, sample_rate: Optional[int] = None) -> DecodedAudio:
    """
    Turn a base64 PCM16 payload into normalized float samples.

    Args:
        audio_b64: base64 of the raw PCM stream
        sample_rate: override for the configured rate (24000)

    Returns:
        DecodedAudio with samples in [-1.0, 1.0), original order

    Raises:
        AudioDecodeError: empty input, bad base64 or odd byte length
    """
    if not audio_b64:
        raise AudioDecodeError("Audio payload is empty")

    try:
        pcm = bytes_from_base64(audio_b64)
    except DecodeError as e:
        raise AudioDecodeError(f"Audio payload is not base64: {e}") from e

    if not pcm:
        raise AudioDecodeError("Audio payload is empty")
    if len(pcm) % PCM_SAMPLE_WIDTH:
        raise AudioDecodeError(f"PCM16 payload has odd length ({len(pcm)} bytes)")

    ints = array('h')
    ints.frombytes(pcm)
    if sys.byteorder != 'little':
        ints.byteswap()

    samples = tuple(value / PCM_SCALE for value in ints)
    return DecodedAudio(
        samples=samples,
        sample_rate=sample_rate or config.audio_sample_rate,
        pcm=pcm,
    )


def pcm16_to_wav(audio: DecodedAudio) -> bytes:
    """Wrap decoded PCM in a WAV container so any player can start it as-is"""
    buffer = io.BytesIO()
    with wave.open(buffer, 'wb') as wf:
        wf.setnchannels(PCM_CHANNELS)
        wf.setsampwidth(PCM_SAMPLE_WIDTH)
        wf.setframerate(audio.sample_rate)
        wf.writeframes(audio.pcm)
    return buffer.getvalue()


def audio_data_to_wav(audio_b64: str) -> Optional[bytes]:
    """
    Playback helper: WAV bytes for a word's audioData, or None for silence.

    Decode failures are logged and swallowed so playback never interrupts
    the caller.
    """
    if not audio_b64:
        return None
    try:
        return pcm16_to_wav(decode_pcm16(audio_b64))
    except AudioDecodeError as e:
        logger.error(f"Failed to play audio: {e}")
        return None
