"""Canonicalize raw segments: trim edge silence, resample, normalize loudness."""

import logging
import os

from soundbank.constants import TRIM_NOISE_DB, TRIM_MIN_SECONDS
from soundbank.errors import ToolError
from soundbank.models import MergePlan, Segment
from soundbank.tool import AudioTool

logger = logging.getLogger(__name__)


class SegmentPreprocessor:
    """Produce a new canonical Segment from a raw one.

    Silence below ``noise_db`` touching either edge is cut away, audio
    with no edge silence is left as it is. The result is resampled to the
    plan's format and loudness-normalized to its target. Running
    it on its own output is a no-op within tolerance.
    """

    def __init__(
        self,
        tool: AudioTool,
        plan: MergePlan,
        noise_db: float = TRIM_NOISE_DB,
        min_seconds: float = TRIM_MIN_SECONDS,
    ):
        self.tool = tool
        self.plan = plan
        self.noise_db = noise_db
        self.min_seconds = min_seconds

    def preprocess(self, segment: Segment, work_dir: str) -> Segment:
        """Write ``<track>_segNN.pre.wav`` into work_dir and return its Segment."""
        stem = f"{segment.track}_seg{segment.index:02d}"
        trimmed = os.path.join(work_dir, f"{stem}.trim.wav")
        output = os.path.join(work_dir, f"{stem}.pre.wav")

        self.tool.trim_silence(segment.path, trimmed, self.noise_db, self.min_seconds)
        try:
            self.tool.normalize(
                trimmed, output,
                self.plan.target_lufs, self.plan.true_peak,
                self.plan.sample_rate, self.plan.channel_layout,
            )
        finally:
            if os.path.exists(trimmed):
                os.remove(trimmed)

        duration = self.tool.probe_duration(output)
        if duration <= 0:
            raise ToolError(f"Preprocessing left nothing of {segment.track} segment {segment.index}")

        logger.debug(
            "preprocessed %s: %.2fs -> %.2fs", stem, segment.duration, duration,
        )
        return Segment(track=segment.track, index=segment.index, path=output, duration=duration)
