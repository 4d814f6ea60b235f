"""Post-assembly check for interior silence gaps."""

import warnings

from soundbank.constants import GAP_NOISE_DB, GAP_MIN_SECONDS, GAP_GUARD_SECONDS
from soundbank.errors import ContinuityWarning
from soundbank.models import ContinuityReport
from soundbank.tool import AudioTool


class ContinuityVerifier:
    """Read-only: reports silence found inside a track, never repairs it.

    Silence that starts within ``guard`` seconds of the beginning, or ends
    within ``guard`` seconds of the end, is expected and not reported.
    """

    def __init__(
        self,
        tool: AudioTool,
        noise_db: float = GAP_NOISE_DB,
        min_seconds: float = GAP_MIN_SECONDS,
        guard: float = GAP_GUARD_SECONDS,
    ):
        self.tool = tool
        self.noise_db = noise_db
        self.min_seconds = min_seconds
        self.guard = guard

    def verify(self, path: str) -> ContinuityReport:
        duration = self.tool.probe_duration(path)
        silences = self.tool.detect_silence(path, self.noise_db, self.min_seconds)
        gaps = [
            s for s in silences
            if s.start > self.guard and s.end < duration - self.guard
        ]
        return ContinuityReport(gaps=gaps, duration=duration, total_silences=len(silences))


def warn_gaps(label: str, report: ContinuityReport) -> None:
    """Surface a non-empty report as a ContinuityWarning."""
    if report.ok:
        return
    spans = ", ".join(f"{g.start:.1f}s-{g.end:.1f}s ({g.duration:.1f}s)" for g in report.gaps)
    warnings.warn(f"{label}: {len(report.gaps)} silence gaps: {spans}", ContinuityWarning, stacklevel=2)
