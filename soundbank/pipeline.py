"""Per-track pipeline: fetch segments, preprocess, assemble, verify, emit.

Tracks are independent and run in parallel; the steps inside one track are
strictly sequential. A failure in one track is recorded and never stops the
others.
"""

import logging
import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

from soundbank.artifacts import file_ready, scratch_dir
from soundbank.assembly import TrackAssembler
from soundbank.constants import TRACK_WORKERS
from soundbank.errors import PipelineCancelled, SoundbankError, SourceError, ToolError
from soundbank.models import MergePlan, RunStats, TrackResult, TrackSpec
from soundbank.preprocess import SegmentPreprocessor
from soundbank.store import SegmentStore
from soundbank.tool import AudioTool
from soundbank.verify import ContinuityVerifier, warn_gaps

logger = logging.getLogger(__name__)


class TrackPipeline:
    def __init__(
        self,
        store: SegmentStore,
        tool: AudioTool,
        plan: MergePlan,
        audio_dir: str,
        work_dir: str,
        assemble_only: bool = False,
        keep_failed: bool = False,
        stats: RunStats | None = None,
        cancel: threading.Event | None = None,
    ):
        self.store = store
        self.tool = tool
        self.plan = plan
        self.audio_dir = audio_dir
        self.work_dir = work_dir
        self.assemble_only = assemble_only
        self.keep_failed = keep_failed
        self.stats = stats or store.stats
        self.cancel = cancel or threading.Event()
        self.preprocessor = SegmentPreprocessor(tool, plan)
        self.assembler = TrackAssembler(tool, plan, keep_failed=keep_failed)
        self.verifier = ContinuityVerifier(tool)

    def output_path(self, track: TrackSpec) -> str:
        return os.path.join(self.audio_dir, f"{track.key}.mp3")

    def _checkpoint(self, track: TrackSpec) -> None:
        if self.cancel.is_set():
            raise PipelineCancelled(f"{track.key}: cancelled")

    def run(self, track: TrackSpec) -> TrackResult:
        """Build one track. Raises on the first failing step."""
        final = self.output_path(track)
        if file_ready(final) and not self.assemble_only:
            print(f"\n  [{track.key}] SKIP (already exists)")
            self.stats.add(skipped=1)
            return TrackResult(track.key, "skipped", path=final)

        self.plan.validate(track.segment_seconds)
        n = track.segment_count
        expected = self.plan.expected_duration([track.segment_seconds] * n, track.segment_seconds)
        verb = "Re-assembling" if self.assemble_only else "Building"
        print(f"\n  [{track.key}] {verb} {n} segments (~{int(expected // 60)}m {int(expected % 60)}s)...")

        segments = self.store.resolve(track, allow_generate=not self.assemble_only, cancel=self.cancel)
        self._checkpoint(track)

        with scratch_dir(self.work_dir, f"{track.key}_", keep_on_failure=self.keep_failed) as work:
            if self.plan.needs_preprocessing:
                prepared = []
                for segment in segments:
                    self._checkpoint(track)
                    prepared.append(self.preprocessor.preprocess(segment, work))
            else:
                prepared = segments

            self._checkpoint(track)
            print(f"  [{track.key}] Merging {n} segments ({self.plan.strategy}, {self.plan.overlap}s overlap)...")
            staged = os.path.join(work, os.path.basename(final))
            assembled = self.assembler.assemble(prepared, track.segment_seconds, staged, work)

            self._checkpoint(track)
            report = self.verifier.verify(staged)
            try:
                os.replace(staged, final)
            except OSError as e:
                raise ToolError(f"Could not move {track.key} into place: {e}") from e

        assembled.path = final
        assembled.report = report
        if report.ok:
            print(f"  [{track.key}] VERIFIED: No silence gaps. Duration: {round(report.duration)}s")
        else:
            print(f"  [{track.key}] WARNING: {len(report.gaps)} silence gaps detected:", file=sys.stderr)
            for gap in report.gaps:
                print(f"    {gap.start:.1f}s - {gap.end:.1f}s ({gap.duration:.1f}s)", file=sys.stderr)
            warn_gaps(track.key, report)
        print(f"  [{track.key}] DONE -> {os.path.basename(final)}")
        self.stats.add(generated=1)
        return TrackResult(track.key, "done", path=final, assembled=assembled)

    def run_isolated(self, track: TrackSpec) -> TrackResult:
        """Like run(), but a failure becomes a failed TrackResult."""
        try:
            return self.run(track)
        except PipelineCancelled as e:
            print(f"  [{track.key}] CANCELLED", file=sys.stderr)
            return TrackResult(track.key, "cancelled", error=str(e))
        except (SoundbankError, ValueError, OSError) as e:
            # segment failures were already counted one by one
            if not isinstance(e, SourceError):
                self.stats.add(failed=1)
            print(f"  [{track.key}] FAIL: {e}", file=sys.stderr)
            logger.debug("track %s failed", track.key, exc_info=True)
            return TrackResult(track.key, "failed", error=str(e))


def run_tracks(
    pipeline: TrackPipeline,
    tracks: list[TrackSpec],
    workers: int = TRACK_WORKERS,
) -> list[TrackResult]:
    """Run every track, in parallel, and return results in input order.

    Ctrl-C sets the pipeline's cancel event; running tracks stop at their
    next step boundary.
    """
    if not tracks:
        return []
    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        futures = [pool.submit(pipeline.run_isolated, track) for track in tracks]
        try:
            return [f.result() for f in futures]
        except KeyboardInterrupt:
            pipeline.cancel.set()
            raise
