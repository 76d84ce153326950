"""
Performance thresholds for chart analysis and sampling.

Values are read from the environment (or a .env file beside the backend)
once, and passed around as an immutable value object. Nothing in the engine
reads module-level mutable state.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

logger = logging.getLogger(__name__)


# === Defaults ===

LARGE_DATASET = 1000          # Start optimization at 1000+ rows
SAMPLING_THRESHOLD = 5000     # Start sampling at 5000+ rows
MAX_CHART_POINTS = 2000       # Maximum data points to render in charts
CHUNK_SIZE = 1000
ANIMATION_THRESHOLD = 500     # Disable animations above this
ANALYSIS_SAMPLE_SIZE = 1000   # Rows analysed when the dataset is sampled

# Upload limits
MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_ROWS = 50000


def _int_from_env(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {name}={value}: must be positive, using {default}")
        return default
    return value


@dataclass(frozen=True)
class PerformanceThresholds:
    """Size thresholds that drive sampling and render hints."""
    large_dataset: int = LARGE_DATASET
    sampling_threshold: int = SAMPLING_THRESHOLD
    max_chart_points: int = MAX_CHART_POINTS
    chunk_size: int = CHUNK_SIZE
    animation_threshold: int = ANIMATION_THRESHOLD
    analysis_sample_size: int = ANALYSIS_SAMPLE_SIZE

    @classmethod
    def from_env(cls) -> "PerformanceThresholds":
        return cls(
            large_dataset=_int_from_env("CHART_LARGE_DATASET", LARGE_DATASET),
            sampling_threshold=_int_from_env("CHART_SAMPLING_THRESHOLD", SAMPLING_THRESHOLD),
            max_chart_points=_int_from_env("CHART_MAX_POINTS", MAX_CHART_POINTS),
            chunk_size=_int_from_env("CHART_CHUNK_SIZE", CHUNK_SIZE),
            animation_threshold=_int_from_env("CHART_ANIMATION_THRESHOLD", ANIMATION_THRESHOLD),
            analysis_sample_size=_int_from_env("CHART_ANALYSIS_SAMPLE_SIZE", ANALYSIS_SAMPLE_SIZE),
        )


@dataclass(frozen=True)
class UploadLimits:
    """Limits applied by the file loaders."""
    max_file_size: int = MAX_FILE_SIZE
    max_rows: int = MAX_ROWS

    @classmethod
    def from_env(cls) -> "UploadLimits":
        return cls(
            max_file_size=_int_from_env("CHART_MAX_FILE_SIZE", MAX_FILE_SIZE),
            max_rows=_int_from_env("CHART_MAX_ROWS", MAX_ROWS),
        )


# Environment-derived defaults, read once at import
DEFAULT_THRESHOLDS = PerformanceThresholds.from_env()
DEFAULT_UPLOAD_LIMITS = UploadLimits.from_env()
