"""All magic numbers and configuration constants."""

SEGMENT_SECONDS = 22                # nominal length of one generated music segment
OVERLAP_SECONDS = 6.0               # overlap (overlap-mix) or crossfade (sequential) length
DEFAULT_STRATEGY = "overlap-mix"    # "overlap-mix" or "sequential-crossfade"
DEFAULT_CURVE = "equal-power"       # crossfade curve: "linear", "equal-power", "exponential"
SAMPLE_RATE = 44100                 # Hz, every intermediate and final file
CHANNEL_LAYOUT = "stereo"
TARGET_LUFS = -16.0                 # integrated loudness target
TRUE_PEAK_DB = -1.5                 # true-peak ceiling
LOUDNESS_RANGE = 11.0               # loudnorm LRA target
OUTPUT_BITRATE = "192k"             # MP3 output bitrate

TRIM_NOISE_DB = -45.0               # preprocessing: silence floor for edge trimming
TRIM_MIN_SECONDS = 0.1              # preprocessing: shortest edge silence that gets trimmed
TRIM_EDGE_TOLERANCE_SECONDS = 0.05  # silence this close to an edge counts as touching it
GAP_NOISE_DB = -30.0                # verifier: silence floor
GAP_MIN_SECONDS = 0.5               # verifier: shortest reported gap
GAP_GUARD_SECONDS = 1.0             # verifier: ignore silence this close to either end

FADE_EDGE_WINDOW_SECONDS = 0.5      # window measured at each edge for the self-fade check
FADE_EDGE_MARGIN_DB = 12.0          # edges must sit this far below the body level

TOOL_TIMEOUT_SECONDS = 600          # per ffmpeg/ffprobe invocation
TOOL_RETRY_COUNT = 2                # retries after a tool timeout (non-zero exit is not retried)

SOURCE_URL = "https://api.elevenlabs.io/v1/sound-generation"
SOURCE_TIMEOUT_SECONDS = 120
SOURCE_RETRY_COUNT = 3              # attempts per generation request
SOURCE_RETRY_BASE_DELAY = 1.0       # seconds, base delay for exponential backoff

SFX_PACING_SECONDS = 0.5            # sleep between SFX requests
SEGMENT_BATCH_SIZE = 2              # concurrent segment requests per batch
SEGMENT_PACING_SECONDS = 0.5        # sleep between segment batches
VOICE_BATCH_SIZE = 3
VOICE_PACING_SECONDS = 0.2
TRACK_WORKERS = 3                   # music tracks assembled in parallel

TTS_RETRY_COUNT = 3
TTS_RETRY_BASE_DELAY = 1.0
TTS_RATE = "+0%"

OUTPUT_DIR = "public"
AUDIO_SUBDIR = "audio"
VOICES_SUBDIR = "voices"
SEGMENTS_SUBDIR = "_segments"
WORK_SUBDIR = "_work"
MANIFEST_NAME = "manifest.json"
CONFIG_JS = "config.js"             # legacy place for ELEVENLABS_API_KEY
VERSION = "0.1.0"
