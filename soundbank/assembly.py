"""Stitch an ordered list of segments into one continuous track.

Two strategies, picked by ``MergePlan.strategy``:

overlap-mix
    Segment i is delayed by ``i * spacing`` (or, for preprocessed segments, by
    the running sum of measured durations minus overlaps) and all N streams
    are summed in a single tool call, then loudness-normalized. Each segment
    must fade in and out on its own, otherwise the overlapping regions double
    up audibly; that is checked before mixing.

sequential-crossfade
    A fold over the segments: the running track is crossfaded with the next
    segment, the result becomes the new running track. Every intermediate is
    deleted as soon as the following step has consumed it.
"""

import functools
import logging
import os

from soundbank.constants import FADE_EDGE_WINDOW_SECONDS, FADE_EDGE_MARGIN_DB
from soundbank.errors import AssemblyError
from soundbank.models import AssembledTrack, MergePlan, Segment
from soundbank.tool import AudioTool

logger = logging.getLogger(__name__)


def _check_order(segments: list[Segment]) -> list[Segment]:
    """Sort by index and require exactly 0..N-1 from a single track."""
    ordered = sorted(segments, key=lambda s: s.index)
    indices = [s.index for s in ordered]
    if indices != list(range(len(ordered))):
        raise AssemblyError(f"Segment indices must be 0..{len(ordered) - 1}, got {indices}")
    tracks = {s.track for s in ordered}
    if len(tracks) > 1:
        raise AssemblyError(f"Segments from more than one track: {sorted(tracks)}")
    return ordered


class TrackAssembler:
    def __init__(self, tool: AudioTool, plan: MergePlan, keep_failed: bool = False):
        self.tool = tool
        self.plan = plan
        self.keep_failed = keep_failed

    def assemble(
        self,
        segments: list[Segment],
        nominal: float,
        output_path: str,
        work_dir: str,
    ) -> AssembledTrack:
        """Build ``output_path`` from segments, using work_dir for intermediates.

        Segments may arrive in any order; they are placed by index.
        """
        if not segments:
            raise AssemblyError("No segments to assemble")
        ordered = _check_order(segments)
        self.plan.validate(nominal)
        track = ordered[0].track

        if len(ordered) == 1:
            self.tool.normalize(
                ordered[0].path, output_path,
                self.plan.target_lufs, self.plan.true_peak,
                self.plan.sample_rate, self.plan.channel_layout,
            )
        elif self.plan.strategy == "overlap-mix":
            self._overlap_mix(ordered, nominal, output_path, work_dir)
        else:
            self._crossfade_chain(ordered, output_path, work_dir)

        expected = self.plan.expected_duration([s.duration for s in ordered], nominal)
        duration = self.tool.probe_duration(output_path)
        logger.info("%s: assembled %d segments, %.1fs (expected %.1fs)", track, len(ordered), duration, expected)
        return AssembledTrack(track=track, path=output_path, expected_duration=expected, duration=duration)

    # --- overlap-mix ---

    def is_self_fading(self, segment: Segment) -> bool:
        head, tail, body = self.tool.edge_levels(segment.path, FADE_EDGE_WINDOW_SECONDS)
        return head <= body - FADE_EDGE_MARGIN_DB and tail <= body - FADE_EDGE_MARGIN_DB

    def _ensure_fades(self, segment: Segment, work_dir: str) -> Segment:
        if self.plan.overlap == 0 or self.is_self_fading(segment):
            return segment
        if not self.plan.bake_missing_fades:
            raise AssemblyError(
                f"{segment.track} segment {segment.index} does not fade in/out; "
                "overlap-mix would double the overlapping audio"
            )
        logger.warning(
            "%s segment %d has hard edges, baking %.1fs fades", segment.track, segment.index, self.plan.overlap,
        )
        baked = os.path.join(work_dir, f"{segment.track}_seg{segment.index:02d}.fade.wav")
        self.tool.fade(segment.path, baked, self.plan.overlap, self.plan.overlap)
        return Segment(segment.track, segment.index, baked, segment.duration)

    def _overlap_mix(self, segments: list[Segment], nominal: float, output: str, work_dir: str) -> None:
        if self.plan.measured_spacing:
            self._check_longer_than_overlap(segments)
        inputs = [self._ensure_fades(s, work_dir) for s in segments]
        self.tool.mix(
            [s.path for s in inputs],
            self.plan.offsets([s.duration for s in inputs], nominal),
            output,
            self.plan.target_lufs,
            self.plan.true_peak,
            self.plan.sample_rate,
            self.plan.channel_layout,
        )

    # --- sequential-crossfade ---

    def _check_longer_than_overlap(self, segments: list[Segment]) -> None:
        short = [s.index for s in segments if s.duration <= self.plan.overlap]
        if short:
            raise AssemblyError(f"Segments {short} are not longer than the {self.plan.overlap}s overlap")

    def _crossfade_chain(self, segments: list[Segment], output: str, work_dir: str) -> None:
        fade = self.plan.overlap
        self._check_longer_than_overlap(segments)

        first = segments[0].path
        last = len(segments) - 1

        def merge(running: str, item: tuple[int, Segment]) -> str:
            position, segment = item
            target = output if position == last else os.path.join(work_dir, f"xf_{position:02d}.wav")
            try:
                self.tool.crossfade(running, segment.path, target, fade, self.plan.curve)
            except Exception:
                if not self.keep_failed:
                    for leftover in (running, target):
                        if leftover != first and os.path.exists(leftover):
                            os.remove(leftover)
                raise
            if running != first:
                os.remove(running)
            return target

        functools.reduce(merge, enumerate(segments[1:], start=1), first)
