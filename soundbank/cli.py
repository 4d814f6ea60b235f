"""CLI interface with subcommand routing and run orchestration."""

import argparse
import logging
import os
import shutil
import sys

from soundbank.artifacts import init_output_dir, purge_caches, write_manifest, file_ready
from soundbank.catalog import SFX, MUSIC, collect_voice_lines, find_track
from soundbank.clips import generate_sfx, generate_voice_lines
from soundbank.config import load_settings, resolve_api_key, API_KEY_ENV
from soundbank.constants import AUDIO_SUBDIR, OUTPUT_DIR, VERSION
from soundbank.errors import ToolError
from soundbank.models import RunStats, STRATEGIES, CURVES
from soundbank.pipeline import TrackPipeline, run_tracks
from soundbank.source import SoundGenerationClient
from soundbank.store import SegmentStore
from soundbank.tool import FFmpegTool
from soundbank.verify import ContinuityVerifier

PHASES = ("sfx", "voices", "music")


def _check_ffmpeg():
    """Verify ffmpeg and ffprobe are installed."""
    for binary in ("ffmpeg", "ffprobe"):
        if not shutil.which(binary):
            print(f"Error: {binary} is required but not found.", file=sys.stderr)
            print("Install ffmpeg to build music tracks.", file=sys.stderr)
            raise SystemExit(1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)


def cmd_build(args):
    """Generate clips and segments, assemble music tracks, write manifests."""
    _check_ffmpeg()

    overrides = {
        "output_dir": args.output,
        "strategy": args.strategy,
        "overlap": args.overlap,
        "curve": args.curve,
        "jobs": args.jobs,
        "keep_failed": True if args.keep_failed else None,
    }
    try:
        settings = load_settings(args.config, overrides)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    phases = set(args.only or PHASES)
    tracks = MUSIC
    if args.track:
        try:
            tracks = [find_track(key) for key in args.track]
        except KeyError as e:
            print(f"Error: {e.args[0]}", file=sys.stderr)
            raise SystemExit(1)

    api_key = None
    if not args.assemble_only and phases & {"sfx", "music"}:
        api_key = resolve_api_key(settings.output_dir)
        if not api_key:
            print("Error: No API key found.", file=sys.stderr)
            print(f"Set {API_KEY_ENV} or put it in {settings.output_dir}/config.js.", file=sys.stderr)
            print("Or use --assemble-only to re-assemble existing segments.", file=sys.stderr)
            raise SystemExit(1)
    client = SoundGenerationClient(api_key) if api_key else None

    dirs = init_output_dir(settings.output_dir)
    stats = RunStats()

    # Phase 1: SFX
    if "sfx" in phases:
        if args.assemble_only:
            print("\n=== Phase 1: Skipping SFX (--assemble-only) ===")
        else:
            print(f"\n=== Phase 1: Generating {len(SFX)} SFX files ===")
            generate_sfx(SFX, dirs["audio"], client, stats)

    # Phase 2: voice lines
    lines = collect_voice_lines()
    if "voices" in phases:
        if args.assemble_only:
            print("\n=== Phase 2: Skipping voice lines (--assemble-only) ===")
        else:
            print(f"\n=== Phase 2: Generating {len(lines)} voice lines ===")
            generate_voice_lines(lines, dirs["voices"], stats)

    # Phase 3: music
    results = []
    if "music" in phases:
        total_segments = sum(t.segment_count for t in tracks)
        print(f"\n=== Phase 3: Building {len(tracks)} music tracks ({total_segments} segments total) ===")
        tool = FFmpegTool()
        plan = settings.merge_plan()
        store = SegmentStore(dirs["segments"], tool, source=client, stats=stats)
        pipeline = TrackPipeline(
            store, tool, plan, dirs["audio"], dirs["work"],
            assemble_only=args.assemble_only,
            keep_failed=settings.keep_failed,
            stats=stats,
        )
        results = run_tracks(pipeline, tracks, workers=settings.jobs)

    if args.clean:
        if stats.failed:
            print(f"\nKeeping {dirs['segments']}: some units failed", file=sys.stderr)
        else:
            print("\nCleaning up segments...")
            purge_caches(dirs)
    elif os.path.exists(dirs["segments"]):
        print(f"\nSegments kept in {dirs['segments']} (use --clean to remove)")

    audio_entries = {item.key: f"{item.key}.mp3" for item in SFX}
    audio_entries.update({track.key: f"{track.key}.mp3" for track in MUSIC})
    manifest_path = write_manifest(dirs["audio"], audio_entries)
    write_manifest(dirs["voices"], {line.cache_key: line.filename for line in lines})

    failed_tracks = [r.key for r in results if r.status == "failed"]
    print(f"\nDone! Generated: {stats.generated}, Skipped: {stats.skipped}, Failed: {stats.failed}")
    if failed_tracks:
        print(f"Failed tracks: {', '.join(failed_tracks)}", file=sys.stderr)
    print(f"Manifest: {manifest_path}")

    if stats.failed or failed_tracks:
        raise SystemExit(1)


def cmd_list(args):
    """List sound effects and music tracks with their build state."""
    audio_dir = os.path.join(args.output, AUDIO_SUBDIR)
    print("Sound effects:")
    for item in SFX:
        marker = "[done]" if file_ready(os.path.join(audio_dir, f"{item.key}.mp3")) else "[----]"
        print(f"  {marker} {item.key}")
    print("Music tracks:")
    for track in MUSIC:
        marker = "[done]" if file_ready(os.path.join(audio_dir, f"{track.key}.mp3")) else "[----]"
        print(f"  {marker} {track.key:<14} {track.segment_count} segments x {track.segment_seconds}s")
    print(f"Voice lines: {len(collect_voice_lines())}")


def cmd_verify(args):
    """Report interior silence gaps in an audio file."""
    _check_ffmpeg()
    if not os.path.exists(args.file):
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        raise SystemExit(1)
    try:
        report = ContinuityVerifier(FFmpegTool()).verify(args.file)
    except ToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)
    if report.ok:
        print(f"VERIFIED: No silence gaps. Duration: {round(report.duration)}s")
        return
    print(f"WARNING: {len(report.gaps)} silence gaps detected (duration {round(report.duration)}s):")
    for gap in report.gaps:
        print(f"  {gap.start:.1f}s - {gap.end:.1f}s ({gap.duration:.1f}s)")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="soundbank",
        description="Pre-generate game SFX, voice lines and seamless music loops",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # build
    build_parser = subparsers.add_parser("build", help="Generate and assemble all assets")
    build_parser.add_argument("--assemble-only", action="store_true",
                              help="Reuse cached segments, skip generation, redo assembly")
    build_parser.add_argument("--clean", action="store_true",
                              help="Remove the segment cache after a successful run")
    build_parser.add_argument("--only", nargs="+", choices=PHASES, help="Run only these phases")
    build_parser.add_argument("--track", nargs="+", help="Build only these music tracks")
    build_parser.add_argument("--strategy", choices=STRATEGIES, help="Segment merge strategy")
    build_parser.add_argument("--overlap", type=float, help="Overlap/crossfade seconds")
    build_parser.add_argument("--curve", choices=CURVES, help="Crossfade curve")
    build_parser.add_argument("--jobs", type=int, help="Music tracks built in parallel")
    build_parser.add_argument("--config", help="JSON settings file")
    build_parser.add_argument("--output", help="Output root (default: public)")
    build_parser.add_argument("--keep-failed", action="store_true",
                              help="Keep intermediate files of failed tracks for inspection")
    build_parser.set_defaults(func=cmd_build)

    # list
    list_parser = subparsers.add_parser("list", help="List assets and their state")
    list_parser.add_argument("--output", default=OUTPUT_DIR, help="Output root")
    list_parser.set_defaults(func=cmd_list)

    # verify
    verify_parser = subparsers.add_parser("verify", help="Check an audio file for silence gaps")
    verify_parser.add_argument("file", help="Audio file to check")
    verify_parser.set_defaults(func=cmd_verify)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    _setup_logging(args.verbose)
    args.func(args)
