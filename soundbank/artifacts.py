"""Output directory layout, JSON artifacts, manifests, and scratch space."""

import json
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager

from soundbank.constants import (
    OUTPUT_DIR,
    AUDIO_SUBDIR,
    VOICES_SUBDIR,
    SEGMENTS_SUBDIR,
    WORK_SUBDIR,
    MANIFEST_NAME,
)

logger = logging.getLogger(__name__)


def init_output_dir(output_base: str = OUTPUT_DIR) -> dict[str, str]:
    """Create the output tree and return its directories by role.

    public/audio/             final SFX and music tracks
    public/audio/_segments/   raw music segment cache
    public/audio/_work/       per-run scratch
    public/voices/            voice lines
    """
    audio_dir = os.path.join(output_base, AUDIO_SUBDIR)
    dirs = {
        "audio": audio_dir,
        "segments": os.path.join(audio_dir, SEGMENTS_SUBDIR),
        "work": os.path.join(audio_dir, WORK_SUBDIR),
        "voices": os.path.join(output_base, VOICES_SUBDIR),
    }
    for path in dirs.values():
        os.makedirs(path, exist_ok=True)
    return dirs


def write_artifact(directory: str, filename: str, data: dict) -> str:
    """Write JSON artifact to directory/filename.

    Returns path to the written file.
    """
    path = os.path.join(directory, filename)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path


def load_artifact(directory: str, filename: str) -> dict | None:
    """Read JSON artifact. Returns None if file doesn't exist."""
    path = os.path.join(directory, filename)
    if not os.path.exists(path):
        return None
    with open(path) as f:
        return json.load(f)


def file_ready(path: str) -> bool:
    """A cached asset counts only if it exists and is non-empty."""
    return os.path.isfile(path) and os.path.getsize(path) > 0


def write_manifest(directory: str, entries: dict[str, str]) -> str:
    """Rewrite the manifest with entries whose file is present in directory.

    Keys are logical asset keys, values are filenames relative to directory.
    """
    present = {
        key: filename
        for key, filename in entries.items()
        if file_ready(os.path.join(directory, filename))
    }
    return write_artifact(directory, MANIFEST_NAME, present)


@contextmanager
def scratch_dir(root: str, prefix: str, keep_on_failure: bool = False):
    """Private scratch directory for one run; removed on success and failure.

    With keep_on_failure the directory survives a failed run for inspection.
    """
    os.makedirs(root, exist_ok=True)
    path = tempfile.mkdtemp(prefix=prefix, dir=root)
    try:
        yield path
    except BaseException:
        if keep_on_failure:
            logger.warning("Intermediate files kept for inspection: %s", path)
        else:
            shutil.rmtree(path, ignore_errors=True)
        raise
    shutil.rmtree(path, ignore_errors=True)


def purge_caches(dirs: dict[str, str]) -> list[str]:
    """Delete the segment cache and scratch space. Returns removed dirs."""
    removed = []
    for role in ("segments", "work"):
        path = dirs[role]
        if os.path.exists(path):
            shutil.rmtree(path)
            removed.append(path)
    return removed
