"""Shared fixtures for soundbank tests.

FakeTool stands in for ffmpeg: every "audio file" is a small JSON document
describing its duration, silences and edge levels, and each operation
computes the result the real filtergraph would produce.
"""

import json
import os
import shutil
import threading

import numpy as np
import pytest
from pydub import AudioSegment

from soundbank.errors import SourceError, ToolError
from soundbank.models import MergePlan, RunStats, Segment, SilenceInterval, TrackSpec

SELF_FADING = [-60.0, -60.0, -20.0]
HARD_EDGES = [-20.0, -20.0, -20.0]

needs_ffmpeg = pytest.mark.skipif(
    not (shutil.which("ffmpeg") and shutil.which("ffprobe")), reason="ffmpeg not installed",
)


def write_fake(path, duration, silences=(), levels=SELF_FADING, lead=0.0, trail=0.0, **extra):
    """Write a fake audio file."""
    info = {
        "duration": duration,
        "silences": [list(s) for s in silences],
        "levels": list(levels),
        "lead": lead,
        "trail": trail,
        **extra,
    }
    with open(path, "w") as f:
        json.dump(info, f)
    return str(path)


def read_fake(path):
    with open(path) as f:
        return json.load(f)


class FakeTool:
    """In-memory AudioTool. ``fail_on`` maps method name -> exception to raise."""

    def __init__(self, fail_on=None, mix_silences=()):
        self.fail_on = dict(fail_on or {})
        self.mix_silences = list(mix_silences)
        self.calls = []
        self._lock = threading.Lock()

    def _call(self, name, *args):
        with self._lock:
            self.calls.append((name, args))
        error = self.fail_on.get(name)
        if error is not None:
            raise error

    def called(self, name):
        return [args for n, args in self.calls if n == name]

    def trim_silence(self, src, dst, noise_db, min_seconds):
        self._call("trim_silence", src, dst)
        info = read_fake(src)
        duration = info["duration"] - info["lead"] - info["trail"]
        write_fake(dst, duration, levels=info["levels"])

    def normalize(self, src, dst, target_lufs, true_peak, sample_rate, channel_layout):
        self._call("normalize", src, dst)
        info = read_fake(src)
        write_fake(dst, info["duration"], info["silences"], info["levels"],
                   info["lead"], info["trail"], lufs=target_lufs, sample_rate=sample_rate)

    def mix(self, srcs, delays, dst, target_lufs, true_peak, sample_rate, channel_layout):
        self._call("mix", srcs, delays, dst)
        duration = max(delay + read_fake(src)["duration"] for src, delay in zip(srcs, delays))
        write_fake(dst, duration, self.mix_silences)

    def crossfade(self, first, second, dst, duration, curve):
        self._call("crossfade", first, second, dst, duration, curve)
        total = read_fake(first)["duration"] + read_fake(second)["duration"] - duration
        write_fake(dst, total)

    def fade(self, src, dst, fade_in, fade_out):
        self._call("fade", src, dst, fade_in, fade_out)
        info = read_fake(src)
        write_fake(dst, info["duration"], levels=[-60.0, -60.0, info["levels"][2]])

    def detect_silence(self, path, noise_db, min_seconds):
        self._call("detect_silence", path)
        return [SilenceInterval(s, e, e - s) for s, e in read_fake(path)["silences"]]

    def probe_duration(self, path):
        self._call("probe_duration", path)
        try:
            return read_fake(path)["duration"]
        except FileNotFoundError:
            raise ToolError(f"Could not read duration of {path}")

    def edge_levels(self, path, window):
        self._call("edge_levels", path)
        head, tail, body = read_fake(path)["levels"]
        return head, tail, body


class FakeSource:
    """Sound generation stand-in. Prompts containing a ``fail_on`` substring fail."""

    def __init__(self, fail_on=(), duration=22.0):
        self.fail_on = tuple(fail_on)
        self.duration = duration
        self.prompts = []
        self._lock = threading.Lock()

    def generate(self, prompt, duration_seconds=None):
        with self._lock:
            self.prompts.append(prompt)
        if any(marker in prompt for marker in self.fail_on):
            raise SourceError(f"HTTP 500: {prompt}")
        info = {"duration": duration_seconds or self.duration, "silences": [],
                "levels": SELF_FADING, "lead": 0.0, "trail": 0.0}
        return json.dumps(info).encode()


@pytest.fixture
def fake_tool():
    return FakeTool()


@pytest.fixture
def fake_source():
    return FakeSource()


@pytest.fixture
def stats():
    return RunStats()


@pytest.fixture
def small_track():
    """Three 22s segments."""
    return TrackSpec(key="music-test", base="calm pads", variations=("intro", "middle", "outro"))


@pytest.fixture
def make_segments(tmp_path):
    """Factory for fake on-disk segments of one track."""
    seg_dir = tmp_path / "segments"
    seg_dir.mkdir(exist_ok=True)

    def factory(n, duration=22.0, track="music-test", **info):
        segments = []
        for i in range(n):
            path = write_fake(seg_dir / f"{track}_seg{i:02d}.mp3", duration, **info)
            segments.append(Segment(track, i, path, duration))
        return segments

    return factory


@pytest.fixture
def overlap_plan():
    return MergePlan(strategy="overlap-mix", overlap=6.0)


@pytest.fixture
def crossfade_plan():
    return MergePlan(strategy="sequential-crossfade", overlap=6.0)


def tone(seconds, freq=440.0, amplitude=0.5, rate=44100):
    """Mono 16-bit sine wave as an AudioSegment."""
    t = np.arange(int(seconds * rate)) / rate
    samples = (amplitude * 32767 * np.sin(2 * np.pi * freq * t)).astype(np.int16)
    return AudioSegment(data=samples.tobytes(), sample_width=2, frame_rate=rate, channels=1)


@pytest.fixture
def gap_wav(tmp_path):
    """3s tone, 1.5s of silence, 3s tone."""
    path = tmp_path / "gap.wav"
    audio = tone(3) + AudioSegment.silent(duration=1500, frame_rate=44100) + tone(3)
    audio.export(str(path), format="wav")
    return str(path)


@pytest.fixture
def faded_wav(tmp_path):
    """Tone with 0.5s of silence at both ends."""
    path = tmp_path / "faded.wav"
    quiet = AudioSegment.silent(duration=500, frame_rate=44100)
    (quiet + tone(3) + quiet).export(str(path), format="wav")
    return str(path)


@pytest.fixture
def hard_wav(tmp_path):
    """Tone at full level from the first to the last sample."""
    path = tmp_path / "hard.wav"
    tone(4).export(str(path), format="wav")
    return str(path)
