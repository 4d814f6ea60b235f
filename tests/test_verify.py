"""Tests for continuity verification."""

import warnings

import pytest
from pydub import AudioSegment

from conftest import needs_ffmpeg, tone, write_fake
from soundbank.errors import ContinuityWarning
from soundbank.models import ContinuityReport, SilenceInterval
from soundbank.tool import FFmpegTool
from soundbank.verify import ContinuityVerifier, warn_gaps


def test_interior_gap_reported(fake_tool, tmp_path):
    path = write_fake(tmp_path / "track.mp3", 100.0, silences=[(50.0, 51.5)])
    report = ContinuityVerifier(fake_tool).verify(path)
    assert not report.ok
    assert report.gaps == [SilenceInterval(50.0, 51.5, 1.5)]
    assert report.duration == pytest.approx(100.0)


def test_edge_silence_ignored(fake_tool, tmp_path):
    """Silence starting within 1s of the start or ending within 1s of the end is expected."""
    path = write_fake(tmp_path / "track.mp3", 100.0, silences=[(0.0, 0.8), (0.5, 1.5), (98.5, 100.0)])
    report = ContinuityVerifier(fake_tool).verify(path)
    assert report.ok
    assert report.total_silences == 3


def test_clean_track(fake_tool, tmp_path):
    path = write_fake(tmp_path / "track.mp3", 358.0)
    report = ContinuityVerifier(fake_tool).verify(path)
    assert report.ok
    assert report.total_silences == 0


def test_verify_does_not_modify(fake_tool, tmp_path):
    path = write_fake(tmp_path / "track.mp3", 100.0, silences=[(50.0, 51.5)])
    before = (tmp_path / "track.mp3").read_bytes()
    ContinuityVerifier(fake_tool).verify(path)
    assert (tmp_path / "track.mp3").read_bytes() == before


def test_warn_gaps():
    report = ContinuityReport(gaps=[SilenceInterval(50.0, 51.5, 1.5)], duration=100.0)
    with pytest.warns(ContinuityWarning, match="music-game: 1 silence gaps"):
        warn_gaps("music-game", report)


def test_warn_gaps_silent_when_ok():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        warn_gaps("music-game", ContinuityReport(gaps=[], duration=100.0))


@needs_ffmpeg
def test_real_gap_detected(gap_wav):
    """1.5s of digital silence between two tones."""
    report = ContinuityVerifier(FFmpegTool()).verify(gap_wav)
    assert len(report.gaps) == 1
    gap = report.gaps[0]
    assert gap.start == pytest.approx(3.0, abs=0.1)
    assert gap.duration == pytest.approx(1.5, abs=0.1)
    assert report.duration == pytest.approx(7.5, abs=0.05)


@needs_ffmpeg
def test_real_continuous_tone(hard_wav):
    assert ContinuityVerifier(FFmpegTool()).verify(hard_wav).ok


@needs_ffmpeg
def test_real_early_silence_not_reported(tmp_path):
    """A short sting, 0.6s of silence, then the track: nothing inside the guard is a gap."""
    path = str(tmp_path / "early.wav")
    audio = tone(0.2) + AudioSegment.silent(duration=600, frame_rate=44100) + tone(4)
    audio.export(path, format="wav")
    report = ContinuityVerifier(FFmpegTool()).verify(path)
    assert report.ok
    assert report.total_silences == 1
