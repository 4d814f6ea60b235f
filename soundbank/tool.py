"""Audio tool capability: trim, normalize, mix, crossfade, detect silence, probe.

Every operation reads and writes audio files on disk. ``FFmpegTool`` drives
ffmpeg/ffprobe through subprocess filtergraphs; pydub and numpy are used
where the samples themselves have to be inspected.
"""

import logging
import os
import re
import subprocess
from typing import Protocol

import numpy as np
from pydub import AudioSegment

from soundbank.constants import (
    LOUDNESS_RANGE,
    OUTPUT_BITRATE,
    TOOL_RETRY_COUNT,
    TOOL_TIMEOUT_SECONDS,
    TRIM_EDGE_TOLERANCE_SECONDS,
)
from soundbank.errors import ToolError
from soundbank.models import SilenceInterval

logger = logging.getLogger(__name__)

# acrossfade curve names
CURVE_FILTERS = {
    "linear": "tri",
    "equal-power": "qsin",
    "exponential": "exp",
}

_SILENCE_START = re.compile(r"silence_start:\s*(-?[\d.]+)")
_SILENCE_END = re.compile(r"silence_end:\s*(-?[\d.]+)\s*\|\s*silence_duration:\s*([\d.]+)")


class AudioTool(Protocol):
    def trim_silence(self, src: str, dst: str, noise_db: float, min_seconds: float) -> None: ...

    def normalize(
        self, src: str, dst: str, target_lufs: float, true_peak: float,
        sample_rate: int, channel_layout: str,
    ) -> None: ...

    def mix(
        self, srcs: list[str], delays: list[float], dst: str, target_lufs: float,
        true_peak: float, sample_rate: int, channel_layout: str,
    ) -> None: ...

    def crossfade(self, first: str, second: str, dst: str, duration: float, curve: str) -> None: ...

    def fade(self, src: str, dst: str, fade_in: float, fade_out: float) -> None: ...

    def detect_silence(self, path: str, noise_db: float, min_seconds: float) -> list[SilenceInterval]: ...

    def probe_duration(self, path: str) -> float: ...

    def edge_levels(self, path: str, window: float) -> tuple[float, float, float]: ...


def codec_args(path: str, bitrate: str = OUTPUT_BITRATE) -> list[str]:
    """Encoder flags chosen by output extension."""
    ext = os.path.splitext(path)[1].lower()
    if ext == ".mp3":
        return ["-c:a", "libmp3lame", "-b:a", bitrate]
    if ext == ".wav":
        return ["-c:a", "pcm_s16le"]
    raise ToolError(f"Unsupported output format: {path}")


def parse_silencedetect(output: str, duration: float) -> list[SilenceInterval]:
    """Collect (start, end, duration) triples from silencedetect log lines.

    A silence still open at end of stream is closed at ``duration``.
    """
    intervals = []
    start = None
    for line in output.splitlines():
        m = _SILENCE_START.search(line)
        if m:
            start = max(0.0, float(m.group(1)))
            continue
        m = _SILENCE_END.search(line)
        if m and start is not None:
            intervals.append(SilenceInterval(start, float(m.group(1)), float(m.group(2))))
            start = None
    if start is not None:
        intervals.append(SilenceInterval(start, duration, duration - start))
    return intervals


def edge_silence(
    silences: list[SilenceInterval],
    duration: float,
    tolerance: float = TRIM_EDGE_TOLERANCE_SECONDS,
) -> tuple[float, float | None]:
    """Return (start, end) of the audio between edge silences.

    ``end`` is None when nothing trails, so the tail is left alone.
    """
    start, end = 0.0, None
    for s in silences:
        if s.start <= tolerance:
            start = max(start, s.end)
        if s.end >= duration - tolerance:
            end = s.start if end is None else min(end, s.start)
    return start, end


class FFmpegTool:
    """AudioTool backed by the ffmpeg and ffprobe binaries."""

    def __init__(
        self,
        ffmpeg: str = "ffmpeg",
        ffprobe: str = "ffprobe",
        timeout: float = TOOL_TIMEOUT_SECONDS,
        retries: int = TOOL_RETRY_COUNT,
        bitrate: str = OUTPUT_BITRATE,
    ):
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        self.timeout = timeout
        self.retries = retries
        self.bitrate = bitrate

    def _exec(self, cmd: list[str]) -> subprocess.CompletedProcess:
        """Run one blocking tool call. Timeouts are retried, failures are not."""
        logger.debug("exec: %s", " ".join(cmd))
        attempts = self.retries + 1
        for attempt in range(attempts):
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, errors="replace", timeout=self.timeout,
                )
            except subprocess.TimeoutExpired:
                logger.warning(
                    "%s timed out after %ss (attempt %d/%d)", cmd[0], self.timeout, attempt + 1, attempts,
                )
                continue
            except OSError as e:
                raise ToolError(f"Could not run {cmd[0]}: {e}", cmd) from e
            if result.returncode != 0:
                raise ToolError(f"{cmd[0]} exited with status {result.returncode}", cmd, result.stderr)
            return result
        raise ToolError(f"{cmd[0]} timed out {attempts} times", cmd)

    def _ffmpeg(self, args: list[str]) -> subprocess.CompletedProcess:
        return self._exec([self.ffmpeg, "-hide_banner", "-nostdin", "-y", *args])

    def _render(self, args: list[str], dst: str) -> None:
        """Run ffmpeg writing ``dst`` and insist on a non-empty result."""
        cmd = [*args, *codec_args(dst, self.bitrate), dst]
        self._ffmpeg(cmd)
        if not os.path.exists(dst) or os.path.getsize(dst) == 0:
            raise ToolError(f"ffmpeg produced no output: {dst}", cmd)

    @staticmethod
    def _format(sample_rate: int, channel_layout: str) -> str:
        return f"aformat=sample_fmts=fltp:sample_rates={sample_rate}:channel_layouts={channel_layout}"

    @staticmethod
    def _loudnorm(target_lufs: float, true_peak: float, sample_rate: int) -> str:
        # loudnorm upsamples internally; bring the rate back down afterwards
        return (
            f"loudnorm=I={target_lufs}:TP={true_peak}:LRA={LOUDNESS_RANGE},"
            f"aresample={sample_rate}"
        )

    def trim_silence(self, src: str, dst: str, noise_db: float, min_seconds: float) -> None:
        """Cut leading and trailing silence that lasts at least ``min_seconds``.

        Only the measured silence is removed; audio without edge silence
        passes through sample-for-sample, so a second pass is a no-op.
        """
        start, end = edge_silence(
            self.detect_silence(src, noise_db, min_seconds), self.probe_duration(src),
        )
        if end is not None and end <= start:
            raise ToolError(f"Nothing above {noise_db}dB in {src}")
        bounds = [f"start={start:.6f}"] if start > 0 else []
        if end is not None:
            bounds.append(f"end={end:.6f}")
        chain = f"atrim={':'.join(bounds)},asetpts=PTS-STARTPTS" if bounds else "anull"
        self._render(["-i", src, "-af", chain], dst)

    def normalize(
        self, src: str, dst: str, target_lufs: float, true_peak: float,
        sample_rate: int, channel_layout: str,
    ) -> None:
        chain = (
            f"{self._format(sample_rate, channel_layout)},"
            f"{self._loudnorm(target_lufs, true_peak, sample_rate)}"
        )
        self._render(["-i", src, "-af", chain], dst)

    def mix(
        self, srcs: list[str], delays: list[float], dst: str, target_lufs: float,
        true_peak: float, sample_rate: int, channel_layout: str,
    ) -> None:
        if len(srcs) != len(delays):
            raise ValueError("mix needs one delay per input")
        n = len(srcs)
        inputs = []
        chains = []
        for i, (src, delay) in enumerate(zip(srcs, delays)):
            inputs += ["-i", src]
            chain = f"[{i}:a]{self._format(sample_rate, channel_layout)}"
            delay_ms = int(round(delay * 1000))
            if delay_ms > 0:
                chain += f",adelay={delay_ms}|{delay_ms}"
            chains.append(f"{chain}[s{i}]")
        labels = "".join(f"[s{i}]" for i in range(n))
        chains.append(
            f"{labels}amix=inputs={n}:duration=longest:normalize=0,"
            f"{self._loudnorm(target_lufs, true_peak, sample_rate)}[out]"
        )
        self._render([*inputs, "-filter_complex", ";".join(chains), "-map", "[out]"], dst)

    def crossfade(self, first: str, second: str, dst: str, duration: float, curve: str) -> None:
        c = CURVE_FILTERS[curve]
        graph = f"[0:a][1:a]acrossfade=d={duration}:c1={c}:c2={c}[out]"
        self._render(["-i", first, "-i", second, "-filter_complex", graph, "-map", "[out]"], dst)

    def fade(self, src: str, dst: str, fade_in: float, fade_out: float) -> None:
        duration = self.probe_duration(src)
        start_out = max(0.0, duration - fade_out)
        chain = f"afade=t=in:st=0:d={fade_in},afade=t=out:st={start_out:.3f}:d={fade_out}"
        self._render(["-i", src, "-af", chain], dst)

    def detect_silence(self, path: str, noise_db: float, min_seconds: float) -> list[SilenceInterval]:
        result = self._ffmpeg([
            "-i", path, "-af", f"silencedetect=noise={noise_db}dB:d={min_seconds}", "-f", "null", "-",
        ])
        return parse_silencedetect(result.stderr, self.probe_duration(path))

    def probe_duration(self, path: str) -> float:
        result = self._exec([
            self.ffprobe, "-v", "error", "-show_entries", "format=duration", "-of", "csv=p=0", path,
        ])
        try:
            return float(result.stdout.strip())
        except ValueError:
            raise ToolError(f"Could not read duration of {path}", stderr=result.stdout)

    def edge_levels(self, path: str, window: float) -> tuple[float, float, float]:
        """Return (head_db, tail_db, body_db) RMS levels relative to full scale.

        Head and tail are the first/last ``window`` seconds; body is the median
        level of the whole windows in between.
        """
        try:
            audio = AudioSegment.from_file(path)
        except Exception as e:
            raise ToolError(f"Could not decode {path}: {e}") from e

        samples = np.array(audio.get_array_of_samples(), dtype=np.float64)
        if audio.channels > 1:
            samples = samples.reshape((-1, audio.channels)).mean(axis=1)
        samples /= float(1 << (8 * audio.sample_width - 1))

        frames = max(1, int(window * audio.frame_rate))
        if len(samples) == 0:
            raise ToolError(f"No audio in {path}")

        def level(chunk: np.ndarray) -> float:
            rms = np.sqrt(np.mean(chunk ** 2)) if len(chunk) else 0.0
            return float(20 * np.log10(rms + 1e-10))

        head = level(samples[:frames])
        tail = level(samples[-frames:])
        inner = samples[frames:-frames] if len(samples) > 2 * frames else np.array([])
        count = len(inner) // frames
        if count == 0:
            return head, tail, max(head, tail)
        windows = inner[: count * frames].reshape((count, frames))
        body = float(np.median([level(w) for w in windows]))
        return head, tail, body
