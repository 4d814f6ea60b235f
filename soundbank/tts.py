"""Voice-line TTS via edge-tts with retry logic."""

import asyncio
import os
import time

import edge_tts

from soundbank.constants import TTS_RETRY_COUNT, TTS_RETRY_BASE_DELAY, TTS_RATE
from soundbank.errors import SourceError

# Unit type -> voice. Anything not listed speaks with the system voice.
VOICE_MAP = {
    "sales_rep": "en-US-GuyNeural",
    "sr_sales_rep": "en-US-AriaNeural",
    "marketer": "en-US-JennyNeural",
    "service_rep": "en-GB-SoniaNeural",
    "ai_agent": "en-US-EricNeural",
    "talent_acq": "en-US-DavisNeural",
    "system": "en-US-MichelleNeural",
}


def voice_for(unit_type: str) -> str:
    return VOICE_MAP.get(unit_type, VOICE_MAP["system"])


def generate_single(text: str, voice: str, output_path: str, rate: str = TTS_RATE) -> None:
    """Generate a single TTS clip with retry logic.

    Sync wrapper around edge_tts.Communicate(). Retries on network errors,
    HTTP errors, or 0-byte output files; raises SourceError when exhausted.
    """
    last_error = None
    for attempt in range(TTS_RETRY_COUNT):
        try:
            communicate = edge_tts.Communicate(text, voice, rate=rate)
            asyncio.run(communicate.save(output_path))

            if os.path.exists(output_path) and os.path.getsize(output_path) > 0:
                return

            last_error = SourceError(f"TTS produced 0-byte file for: {text[:50]}...")
        except Exception as e:
            last_error = SourceError(f"TTS failed for {text[:50]!r}: {e}")

        # never leave a partial file where the cache would pick it up
        if os.path.exists(output_path):
            os.remove(output_path)

        if attempt < TTS_RETRY_COUNT - 1:
            delay = TTS_RETRY_BASE_DELAY * (2 ** attempt)
            time.sleep(delay)

    raise last_error
