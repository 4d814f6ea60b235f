"""Short clips: sound effects and voice lines, one request per file."""

import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor

from soundbank.artifacts import file_ready
from soundbank.constants import SFX_PACING_SECONDS, VOICE_BATCH_SIZE, VOICE_PACING_SECONDS
from soundbank.errors import SourceError
from soundbank.models import RunStats, SfxSpec, VoiceLine
from soundbank.source import SoundGenerationClient
from soundbank.tts import generate_single, voice_for


def generate_sfx(
    sfx: list[SfxSpec],
    audio_dir: str,
    client: SoundGenerationClient,
    stats: RunStats,
    pacing: float = SFX_PACING_SECONDS,
) -> dict[str, str]:
    """Generate each effect to ``<key>.mp3``, skipping files that exist.

    Returns manifest entries (key -> filename) for every effect.
    """
    entries = {}
    total = len(sfx)
    for i, item in enumerate(sfx):
        filename = f"{item.key}.mp3"
        path = os.path.join(audio_dir, filename)
        entries[item.key] = filename

        if file_ready(path):
            stats.add(skipped=1)
            print(f"  [{i + 1}/{total}] SKIP {filename}")
            continue

        try:
            data = client.generate(item.prompt)
            with open(path, "wb") as f:
                f.write(data)
        except (SourceError, OSError) as e:
            stats.add(failed=1)
            print(f"  [{i + 1}/{total}] FAIL {filename}: {e}", file=sys.stderr)
        else:
            stats.add(generated=1)
            print(f"  [{i + 1}/{total}] OK   {filename}")

        if i < total - 1:
            time.sleep(pacing)

    return entries


def _voice_line(line: VoiceLine, voices_dir: str, stats: RunStats) -> None:
    path = os.path.join(voices_dir, line.filename)
    if file_ready(path):
        stats.add(skipped=1)
        print(f"  [skip] {line.filename}")
        return
    try:
        generate_single(line.text, voice_for(line.type), path)
    except SourceError as e:
        stats.add(failed=1)
        print(f"  FAIL {line.filename}: {e}", file=sys.stderr)
        return
    stats.add(generated=1)
    print(f"  OK   {line.filename}")


def generate_voice_lines(
    lines: list[VoiceLine],
    voices_dir: str,
    stats: RunStats,
    batch_size: int = VOICE_BATCH_SIZE,
    pacing: float = VOICE_PACING_SECONDS,
) -> dict[str, str]:
    """Generate voice lines in small concurrent batches with a pause between.

    Returns manifest entries keyed by ``"<text>||<type>"``.
    """
    os.makedirs(voices_dir, exist_ok=True)
    entries = {line.cache_key: line.filename for line in lines}
    batch_size = max(1, batch_size)
    print(f"Generating {len(lines)} voice lines to {voices_dir}")

    with ThreadPoolExecutor(max_workers=batch_size) as pool:
        for start in range(0, len(lines), batch_size):
            batch = lines[start:start + batch_size]
            list(pool.map(lambda line: _voice_line(line, voices_dir, stats), batch))
            if start + batch_size < len(lines):
                time.sleep(pacing)

    return entries
