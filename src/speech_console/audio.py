"""
Audio source helpers for the recognizers.

Loads audio from files or the microphone, frames raw PCM as WAV and
splits WAV audio into fixed-length segments for continuous recognition.
"""
import io
import wave
from pathlib import Path
from typing import AsyncIterator, List, Optional

import structlog

logger = structlog.get_logger(__name__)

SAMPLE_RATE = 16000
CHANNELS = 1
SAMPLE_WIDTH = 2
CHUNK_SIZE = 4096


def to_wav(pcm: bytes, *, samplerate: int = SAMPLE_RATE, channels: int = CHANNELS, sampwidth: int = SAMPLE_WIDTH) -> bytes:
    """Wrap raw little-endian PCM samples in a WAV container."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as writer:
        writer.setnchannels(channels)
        writer.setsampwidth(sampwidth)
        writer.setframerate(samplerate)
        writer.writeframes(pcm)
    return buffer.getvalue()


def split_wav(data: bytes, segment_seconds: float) -> List[bytes]:
    """Split WAV audio into WAV segments of at most ``segment_seconds`` each.

    Audio that is not a readable WAV file is returned as a single segment.
    """
    if segment_seconds <= 0:
        raise ValueError("segment_seconds must be positive")
    try:
        reader = wave.open(io.BytesIO(data), "rb")
    except (wave.Error, EOFError):
        return [data]
    with reader:
        params = reader.getparams()
        frames_per_segment = max(1, int(params.framerate * segment_seconds))
        segments = []
        while True:
            frames = reader.readframes(frames_per_segment)
            if not frames:
                break
            segments.append(
                to_wav(frames, samplerate=params.framerate, channels=params.nchannels, sampwidth=params.sampwidth)
            )
    return segments or [data]


def record_microphone(seconds: float, *, device_name: Optional[str] = None, samplerate: int = SAMPLE_RATE) -> bytes:
    """Record ``seconds`` of mono 16-bit audio and return it as WAV bytes."""
    import sounddevice as sd

    frames = int(seconds * samplerate)
    logger.info("microphone_recording", seconds=seconds, device=device_name or "default")
    recording = sd.rec(frames, samplerate=samplerate, channels=CHANNELS, dtype="int16", device=device_name)
    sd.wait()
    return to_wav(recording.tobytes(), samplerate=samplerate)


def load_audio(filename: Optional[str], *, device_name: Optional[str] = None, record_seconds: float = 5.0) -> bytes:
    """Read audio from ``filename``, or from the microphone when no file is given."""
    if filename:
        return Path(filename).read_bytes()
    return record_microphone(record_seconds, device_name=device_name)


async def iter_chunks(data: bytes, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield ``data`` in chunks, for chunked-transfer uploads."""
    for start in range(0, len(data), chunk_size):
        yield data[start:start + chunk_size]
