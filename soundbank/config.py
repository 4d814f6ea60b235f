"""Run settings: defaults, optional JSON settings file, environment, CLI flags."""

import os
import re
from dataclasses import dataclass, fields

from soundbank.artifacts import load_artifact
from soundbank.constants import (
    OUTPUT_DIR,
    CONFIG_JS,
    DEFAULT_STRATEGY,
    DEFAULT_CURVE,
    OVERLAP_SECONDS,
    SEGMENT_SECONDS,
    SAMPLE_RATE,
    TARGET_LUFS,
    TRUE_PEAK_DB,
    TRACK_WORKERS,
)
from soundbank.models import MergePlan

API_KEY_ENV = "ELEVENLABS_API_KEY"
_CONFIG_JS_KEY = re.compile(r"ELEVENLABS_API_KEY\s*=\s*['\"]([^'\"]+)['\"]")


@dataclass
class Settings:
    output_dir: str = OUTPUT_DIR
    strategy: str = DEFAULT_STRATEGY
    overlap: float = OVERLAP_SECONDS
    curve: str = DEFAULT_CURVE
    sample_rate: int = SAMPLE_RATE
    target_lufs: float = TARGET_LUFS
    true_peak: float = TRUE_PEAK_DB
    preprocess: bool | None = None
    bake_missing_fades: bool = True
    jobs: int = TRACK_WORKERS
    keep_failed: bool = False

    def merge_plan(self) -> MergePlan:
        return MergePlan(
            strategy=self.strategy,
            overlap=self.overlap,
            sample_rate=self.sample_rate,
            target_lufs=self.target_lufs,
            true_peak=self.true_peak,
            curve=self.curve,
            preprocess=self.preprocess,
            bake_missing_fades=self.bake_missing_fades,
        )

    def update(self, values: dict) -> "Settings":
        """Apply known keys from values (None means "not given"). Unknown keys raise."""
        known = {f.name for f in fields(self)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        for key, value in values.items():
            if value is not None:
                setattr(self, key, value)
        return self


def load_settings(path: str | None = None, overrides: dict | None = None) -> Settings:
    """Defaults, then the JSON settings file (if any), then overrides."""
    settings = Settings()
    if path:
        data = load_artifact(os.path.dirname(path) or ".", os.path.basename(path))
        if data is None:
            raise FileNotFoundError(f"Settings file not found: {path}")
        settings.update(data)
    if overrides:
        settings.update(overrides)
    settings.merge_plan().validate(SEGMENT_SECONDS)
    return settings


def resolve_api_key(output_dir: str = OUTPUT_DIR) -> str | None:
    """ELEVENLABS_API_KEY from the environment, else from <output_dir>/config.js."""
    key = os.environ.get(API_KEY_ENV)
    if key:
        return key

    config_path = os.path.join(output_dir, CONFIG_JS)
    if os.path.exists(config_path):
        with open(config_path) as f:
            match = _CONFIG_JS_KEY.search(f.read())
        if match:
            return match.group(1)

    return None
