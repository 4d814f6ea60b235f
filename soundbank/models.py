"""Data models for clip generation and track assembly."""

import threading
from dataclasses import dataclass, field

from soundbank.constants import (
    SEGMENT_SECONDS,
    OVERLAP_SECONDS,
    DEFAULT_STRATEGY,
    DEFAULT_CURVE,
    SAMPLE_RATE,
    CHANNEL_LAYOUT,
    TARGET_LUFS,
    TRUE_PEAK_DB,
)

STRATEGIES = ("overlap-mix", "sequential-crossfade")
CURVES = ("linear", "equal-power", "exponential")


@dataclass(frozen=True)
class SfxSpec:
    key: str
    prompt: str


@dataclass(frozen=True)
class VoiceLine:
    text: str
    type: str          # unit type ("sales_rep", ...) or "system"
    filename: str

    @property
    def cache_key(self) -> str:
        return f"{self.text}||{self.type}"


@dataclass(frozen=True)
class TrackSpec:
    """A music track: one base style plus one variation per segment."""
    key: str
    base: str
    variations: tuple[str, ...]
    segment_seconds: float = SEGMENT_SECONDS

    @property
    def segment_count(self) -> int:
        return len(self.variations)

    def prompt(self, index: int) -> str:
        return f"{self.base}, {self.variations[index]}"


@dataclass(frozen=True)
class Segment:
    track: str
    index: int         # temporal position in the assembled track
    path: str
    duration: float


@dataclass(frozen=True)
class MergePlan:
    strategy: str = DEFAULT_STRATEGY
    overlap: float = OVERLAP_SECONDS    # also the crossfade length
    sample_rate: int = SAMPLE_RATE
    channel_layout: str = CHANNEL_LAYOUT
    target_lufs: float = TARGET_LUFS
    true_peak: float = TRUE_PEAK_DB
    curve: str = DEFAULT_CURVE
    preprocess: bool | None = None      # None: only where the strategy requires it
    bake_missing_fades: bool = True

    @property
    def needs_preprocessing(self) -> bool:
        if self.strategy == "sequential-crossfade":
            return True
        return bool(self.preprocess)

    def spacing(self, nominal: float) -> float:
        return nominal - self.overlap

    def validate(self, nominal: float) -> None:
        if self.strategy not in STRATEGIES:
            raise ValueError(f"Unknown merge strategy: {self.strategy}")
        if self.curve not in CURVES:
            raise ValueError(f"Unknown crossfade curve: {self.curve}")
        if self.overlap < 0:
            raise ValueError(f"Overlap must be >= 0, got {self.overlap}")
        if self.overlap >= nominal:
            raise ValueError(
                f"Overlap {self.overlap}s must be shorter than the {nominal}s segment duration"
            )

    @property
    def measured_spacing(self) -> bool:
        """Place segments by their actual durations instead of the nominal one.

        Trimmed segments are shorter than nominal; fixed spacing would shrink
        every overlap and could open gaps.
        """
        return self.strategy == "sequential-crossfade" or self.needs_preprocessing

    def offsets(self, durations: list[float], nominal: float) -> list[float]:
        """Start time of each segment in the assembled track."""
        if not self.measured_spacing:
            return [i * self.spacing(nominal) for i in range(len(durations))]
        starts = []
        position = 0.0
        for d in durations:
            starts.append(position)
            position += d - self.overlap
        return starts

    def expected_duration(self, durations: list[float], nominal: float) -> float:
        """Declared length of the assembled track.

        overlap-mix:          (N-1) * spacing + nominal
        sequential-crossfade: sum(D_i) - (N-1) * overlap
        Preprocessed overlap-mix follows the second formula.
        """
        n = len(durations)
        if n == 0:
            return 0.0
        if not self.measured_spacing:
            return (n - 1) * self.spacing(nominal) + nominal
        return sum(durations) - (n - 1) * self.overlap


@dataclass(frozen=True)
class SilenceInterval:
    start: float
    end: float
    duration: float


@dataclass
class ContinuityReport:
    gaps: list[SilenceInterval]
    duration: float
    total_silences: int = 0

    @property
    def ok(self) -> bool:
        return not self.gaps


@dataclass
class AssembledTrack:
    track: str
    path: str
    expected_duration: float
    duration: float
    report: ContinuityReport | None = None


@dataclass
class TrackResult:
    key: str
    status: str                       # "done", "skipped", "failed", "cancelled"
    path: str | None = None
    error: str | None = None
    assembled: AssembledTrack | None = None


@dataclass
class RunStats:
    """Generated/skipped/failed counters shared by concurrent workers."""
    generated: int = 0
    skipped: int = 0
    failed: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add(self, generated: int = 0, skipped: int = 0, failed: int = 0) -> None:
        with self._lock:
            self.generated += generated
            self.skipped += skipped
            self.failed += failed
