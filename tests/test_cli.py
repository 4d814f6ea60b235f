"""Tests for CLI module."""

import json
import os
from unittest.mock import patch

import pytest

from conftest import FakeSource, FakeTool, write_fake
from soundbank.cli import main
from soundbank.config import API_KEY_ENV


def _run(*argv):
    with patch("sys.argv", ["soundbank", *argv]):
        main()


@pytest.fixture
def ffmpeg_ok():
    with patch("soundbank.cli.shutil.which", return_value="/usr/bin/ffmpeg"):
        yield


@pytest.fixture
def fakes(ffmpeg_ok, monkeypatch):
    """Swap ffmpeg and the sound generation service for fakes; no pacing sleeps."""
    tool = FakeTool()
    source = FakeSource()
    monkeypatch.setenv(API_KEY_ENV, "test-key")
    monkeypatch.setattr("soundbank.cli.FFmpegTool", lambda: tool)
    monkeypatch.setattr("soundbank.cli.SoundGenerationClient", lambda key: source)
    monkeypatch.setattr("soundbank.store.time.sleep", lambda s: None)
    monkeypatch.setattr("soundbank.clips.time.sleep", lambda s: None)
    return tool, source


def _manifest(path):
    with open(path) as f:
        return json.load(f)


# --- help / version ---

def test_no_command_prints_help(capsys):
    _run()
    assert "build" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as exc:
        _run("--version")
    assert exc.value.code == 0
    assert "soundbank" in capsys.readouterr().out


# --- list ---

def test_list(tmp_path, capsys):
    public = tmp_path / "public"
    (public / "audio").mkdir(parents=True)
    (public / "audio" / "music-game.mp3").write_bytes(b"ID3")
    _run("list", "--output", str(public))
    out = capsys.readouterr().out
    assert "[done] music-game" in out
    assert "[----] music-title" in out
    assert "[----] click-1" in out


# --- verify ---

def test_verify_missing_file(ffmpeg_ok, tmp_path):
    with pytest.raises(SystemExit):
        _run("verify", str(tmp_path / "nope.mp3"))


def test_verify_reports_gaps(fakes, tmp_path, capsys):
    path = write_fake(tmp_path / "track.mp3", 100.0, silences=[(40.0, 41.5)])
    _run("verify", path)
    out = capsys.readouterr().out
    assert "WARNING: 1 silence gaps" in out
    assert "40.0s - 41.5s" in out


def test_verify_clean(fakes, tmp_path, capsys):
    path = write_fake(tmp_path / "track.mp3", 100.0)
    _run("verify", path)
    assert "VERIFIED" in capsys.readouterr().out


def test_missing_ffmpeg(tmp_path):
    with patch("soundbank.cli.shutil.which", return_value=None):
        with pytest.raises(SystemExit):
            _run("build", "--output", str(tmp_path))


# --- build ---

def test_build_requires_api_key(ffmpeg_ok, tmp_path, monkeypatch, capsys):
    monkeypatch.delenv(API_KEY_ENV, raising=False)
    with pytest.raises(SystemExit):
        _run("build", "--output", str(tmp_path / "public"), "--only", "sfx")
    assert "No API key" in capsys.readouterr().err


def test_build_invalid_overlap(fakes, tmp_path):
    with pytest.raises(SystemExit):
        _run("build", "--output", str(tmp_path / "public"), "--overlap", "30")


def test_build_unknown_track(fakes, tmp_path):
    with pytest.raises(SystemExit):
        _run("build", "--output", str(tmp_path / "public"), "--track", "music-nope")


def test_build_sfx(fakes, tmp_path, capsys):
    public = tmp_path / "public"
    _run("build", "--output", str(public), "--only", "sfx")
    manifest = _manifest(public / "audio" / "manifest.json")
    assert len(manifest) == 14
    assert manifest["click-1"] == "click-1.mp3"
    assert "Generated: 14, Skipped: 0, Failed: 0" in capsys.readouterr().out


def test_build_music_track(fakes, tmp_path):
    tool, source = fakes
    public = tmp_path / "public"
    _run("build", "--output", str(public), "--only", "music", "--track", "music-game")
    final = public / "audio" / "music-game.mp3"
    assert json.loads(final.read_text())["duration"] == pytest.approx(358.0)
    assert len(source.prompts) == 22
    assert _manifest(public / "audio" / "manifest.json") == {"music-game": "music-game.mp3"}
    assert len(os.listdir(public / "audio" / "_segments")) == 22


def test_build_music_crossfade_and_clean(fakes, tmp_path):
    tool, source = fakes
    public = tmp_path / "public"
    _run(
        "build", "--output", str(public), "--only", "music", "--track", "music-title",
        "--strategy", "sequential-crossfade", "--overlap", "2", "--clean",
    )
    final = public / "audio" / "music-title.mp3"
    assert json.loads(final.read_text())["duration"] == pytest.approx(22 * 22 - 21 * 2)
    assert not (public / "audio" / "_segments").exists()
    assert len(tool.called("crossfade")) == 21


def test_build_assemble_only_without_segments(fakes, tmp_path, capsys):
    tool, source = fakes
    public = tmp_path / "public"
    with pytest.raises(SystemExit) as exc:
        _run("build", "--output", str(public), "--only", "music", "--track", "music-game", "--assemble-only")
    assert exc.value.code == 1
    assert source.prompts == []
    assert "music-game" in capsys.readouterr().err
    assert _manifest(public / "audio" / "manifest.json") == {}


def test_build_assemble_only_rebuilds(fakes, tmp_path):
    tool, source = fakes
    public = tmp_path / "public"
    _run("build", "--output", str(public), "--only", "music", "--track", "music-game")
    source.prompts.clear()
    _run(
        "build", "--output", str(public), "--only", "music", "--track", "music-game",
        "--assemble-only", "--overlap", "4",
    )
    assert source.prompts == []
    final = public / "audio" / "music-game.mp3"
    assert json.loads(final.read_text())["duration"] == pytest.approx(21 * 18 + 22)


def test_build_settings_file(fakes, tmp_path):
    public = tmp_path / "public"
    config = tmp_path / "soundbank.json"
    config.write_text(json.dumps({"strategy": "sequential-crossfade", "overlap": 1.0}))
    _run("build", "--output", str(public), "--only", "music", "--track", "music-game", "--config", str(config))
    final = public / "audio" / "music-game.mp3"
    assert json.loads(final.read_text())["duration"] == pytest.approx(22 * 22 - 21)
