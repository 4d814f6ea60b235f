"""On-disk cache of raw music segments, keyed by (track, index)."""

import os
import sys
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from soundbank.artifacts import file_ready
from soundbank.constants import SEGMENT_BATCH_SIZE, SEGMENT_PACING_SECONDS
from soundbank.errors import PipelineCancelled, SourceError
from soundbank.models import RunStats, Segment, TrackSpec
from soundbank.source import SoundGenerationClient
from soundbank.tool import AudioTool


class SegmentStore:
    """Resolve raw segments from the cache, generating the missing ones.

    A non-empty file at the canonical path is reused without calling the
    source. New files are written under a temporary name and renamed, so a
    crash never leaves a truncated segment behind.
    """

    def __init__(
        self,
        segment_dir: str,
        tool: AudioTool,
        source: SoundGenerationClient | None = None,
        stats: RunStats | None = None,
        batch_size: int = SEGMENT_BATCH_SIZE,
        pacing: float = SEGMENT_PACING_SECONDS,
    ):
        self.segment_dir = segment_dir
        self.tool = tool
        self.source = source
        self.stats = stats or RunStats()
        self.batch_size = max(1, batch_size)
        self.pacing = pacing

    def path_for(self, track_key: str, index: int) -> str:
        return os.path.join(self.segment_dir, f"{track_key}_seg{index:02d}.mp3")

    def missing(self, track: TrackSpec) -> list[int]:
        return [i for i in range(track.segment_count) if not file_ready(self.path_for(track.key, i))]

    def _generate(self, track: TrackSpec, index: int) -> None:
        path = self.path_for(track.key, index)
        data = self.source.generate(track.prompt(index), track.segment_seconds)
        partial = f"{path}.part"
        try:
            with open(partial, "wb") as f:
                f.write(data)
            os.replace(partial, path)
        except OSError as e:
            if os.path.isfile(partial):
                os.remove(partial)
            raise SourceError(f"Could not write {path}: {e}") from e

    def resolve(
        self,
        track: TrackSpec,
        allow_generate: bool = True,
        cancel: threading.Event | None = None,
    ) -> list[Segment]:
        """Return all segments of a track in order.

        Every missing segment is attempted before giving up, so a re-run only
        has to fetch what still failed. Raises SourceError if any segment is
        unavailable.
        """
        os.makedirs(self.segment_dir, exist_ok=True)
        total = track.segment_count
        missing = self.missing(track)
        cached = total - len(missing)
        if cached:
            print(f"    [{track.key}] {cached}/{total} segments cached")
            self.stats.add(skipped=cached)

        if missing and not allow_generate:
            self.stats.add(failed=len(missing))
            raise SourceError(f"{track.key}: {len(missing)} segments missing from cache: {missing}")
        if missing and self.source is None:
            raise SourceError(f"{track.key}: no generation source configured")

        failures = {}
        batches = [missing[i:i + self.batch_size] for i in range(0, len(missing), self.batch_size)]
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for b, batch in enumerate(batches):
                if cancel is not None and cancel.is_set():
                    raise PipelineCancelled(f"{track.key}: cancelled during generation")
                futures = {index: pool.submit(self._generate, track, index) for index in batch}
                for index, future in futures.items():
                    try:
                        future.result()
                    except SourceError as e:
                        failures[index] = e
                        self.stats.add(failed=1)
                        print(f"    seg {index + 1}/{total} FAIL: {e}", file=sys.stderr)
                    else:
                        self.stats.add(generated=1)
                        print(f"    seg {index + 1}/{total} OK")
                if b < len(batches) - 1:
                    time.sleep(self.pacing)

        if failures:
            raise SourceError(f"{track.key}: {len(failures)} of {total} segments failed to generate")

        return [
            Segment(
                track=track.key,
                index=i,
                path=self.path_for(track.key, i),
                duration=self.tool.probe_duration(self.path_for(track.key, i)),
            )
            for i in range(total)
        ]
