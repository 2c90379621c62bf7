"""Speech narration of analysis summaries.

Synthesis goes through an OpenAI-compatible /audio/speech endpoint that
returns raw 16-bit mono PCM at 24kHz. Playback is left to the caller;
narrations can be saved as WAV files.
"""

import asyncio
import base64
import binascii
import sys
import wave
from pathlib import Path

import httpx
import numpy as np

import config


class SpeechSynthesizer:
    """Synthesizes speech from text via a cloud TTS API."""

    SAMPLE_RATE = config.TTS_SAMPLE_RATE

    def __init__(
        self,
        voice: str = "coral",
        model: str | None = None,
        base_url: str | None = None,
        api_key: str | None = None,
    ):
        """Initialize synthesizer.

        Args:
            voice: Voice preset name.
            model: TTS model id. Defaults to config.TTS_MODEL.
            base_url: API base URL. Defaults to config.REDPILL_BASE_URL.
            api_key: API key. Defaults to config.REDPILL_API_KEY.
        """
        self.voice = voice
        self.model = model or config.TTS_MODEL
        self.base_url = base_url or config.REDPILL_BASE_URL
        self.api_key = api_key if api_key is not None else config.REDPILL_API_KEY
        self.timeout = config.TTS_TIMEOUT_SEC
        self.sample_rate = self.SAMPLE_RATE

    def synthesize(self, text: str) -> str | None:
        """Synthesize text to audio.

        Args:
            text: Text to speak.

        Returns:
            Base64-encoded 16-bit mono PCM at 24kHz, or None on failure
            or empty text.
        """
        if not text or not text.strip():
            return None

        try:
            response = httpx.post(
                f"{self.base_url}/audio/speech",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json"
                },
                json={
                    "model": self.model,
                    "input": text,
                    "voice": self.voice,
                    "response_format": "pcm",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            print(f"TTS error: {e}", file=sys.stderr)
            return None

        if not response.content:
            print("TTS error: empty audio response", file=sys.stderr)
            return None
        return base64.b64encode(response.content).decode("ascii")


def decode_pcm16(data_b64: str, channels: int = config.TTS_CHANNELS) -> np.ndarray:
    """Decode base64 16-bit little-endian PCM into float32 samples.

    Args:
        data_b64: Base64 PCM payload.
        channels: Interleaved channel count.

    Returns:
        Array of shape (frames,) for mono or (frames, channels), in [-1, 1).

    Raises:
        ValueError: If the payload is not valid base64.
    """
    try:
        raw = base64.b64decode(data_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid audio payload: {e}") from None

    # Drop a trailing odd byte or partial frame
    frame_bytes = 2 * channels
    raw = raw[: len(raw) - (len(raw) % frame_bytes)]

    samples = np.frombuffer(raw, dtype="<i2").astype(np.float32) / 32768.0
    if channels > 1:
        samples = samples.reshape(-1, channels)
    return samples


def save_wav(audio: np.ndarray, path: Path, sample_rate: int = config.TTS_SAMPLE_RATE) -> Path:
    """Write float samples as a 16-bit WAV file."""
    path = Path(path)
    channels = 1 if audio.ndim == 1 else audio.shape[1]
    pcm = (np.clip(audio, -1.0, 1.0) * 32767).astype("<i2")
    with wave.open(str(path), "wb") as f:
        f.setnchannels(channels)
        f.setsampwidth(2)
        f.setframerate(sample_rate)
        f.writeframes(pcm.tobytes())
    return path


class Narrator:
    """Speaks analysis summaries, reusing audio while the text is unchanged."""

    def __init__(self, synthesizer: SpeechSynthesizer):
        self.synthesizer = synthesizer
        self._text: str | None = None
        self._audio: np.ndarray | None = None

    def reset(self) -> None:
        self._text = None
        self._audio = None

    async def narrate(self, text: str) -> np.ndarray | None:
        """Audio for text, or None if synthesis failed.

        Synthesis runs in a worker thread. A new text drops the cached audio.
        """
        if text != self._text:
            self.reset()
        if self._audio is not None:
            return self._audio

        data = await asyncio.to_thread(self.synthesizer.synthesize, text)
        if data is None:
            return None
        try:
            audio = decode_pcm16(data)
        except ValueError as e:
            print(f"TTS decode error: {e}", file=sys.stderr)
            return None

        self._text = text
        self._audio = audio
        return audio
