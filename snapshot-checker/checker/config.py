import os
import logging
from pathlib import Path

from dotenv import load_dotenv

# Configuration for the snapshot checker.
# Every tunable of the comparison pipeline lives here as a named constant.
# Values can be overridden through the environment or a .env file.

load_dotenv()

_log = logging.getLogger("checker.config")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        _log.warning(f"[CONFIG] Invalid float for {name}={raw!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        _log.warning(f"[CONFIG] Invalid int for {name}={raw!r}, using {default}")
        return default


# --------------------------------------------------
# Comparison thresholds
# --------------------------------------------------

# Score below this means "changed"
SIMILARITY_THRESHOLD = _env_float("SIMILARITY_THRESHOLD", 0.80)

# Extracted text shorter than this is not scored
MIN_CONTENT_LENGTH = _env_int("MIN_CONTENT_LENGTH", 100)

# Length ratio under this skips bigram scoring entirely
LENGTH_RATIO_FLOOR = _env_float("LENGTH_RATIO_FLOOR", 0.5)

BIGRAM_WEIGHT = _env_float("BIGRAM_WEIGHT", 0.7)
LENGTH_WEIGHT = _env_float("LENGTH_WEIGHT", 0.3)

# --------------------------------------------------
# Diff / grouping bounds
# --------------------------------------------------

MAX_LOOKAHEAD = _env_int("MAX_LOOKAHEAD", 50)
CONTEXT_CAP = _env_int("CONTEXT_CAP", 5)
MIN_BLOCK_SIZE = _env_int("MIN_BLOCK_SIZE", 3)

# --------------------------------------------------
# Network
# --------------------------------------------------

# Network timeout for HTTP requests (seconds)
REQUEST_TIMEOUT = _env_int("REQUEST_TIMEOUT", 15)

# User-Agent string for identification
USER_AGENT = os.getenv("USER_AGENT", "SnapshotChecker/1.0")

WAYBACK_AVAILABILITY_URL = os.getenv(
    "WAYBACK_AVAILABILITY_URL", "https://archive.org/wayback/available"
)
WAYBACK_CDX_URL = os.getenv(
    "WAYBACK_CDX_URL", "https://web.archive.org/cdx/search/cdx"
)

# Registrable domains the CLI accepts without --any-site
SUPPORTED_DOMAINS = [
    d.strip().lower()
    for d in os.getenv("SUPPORTED_DOMAINS", "wikipedia.org").split(",")
    if d.strip()
]

# --------------------------------------------------
# Output
# --------------------------------------------------

REPORT_DIR = Path(os.getenv("REPORT_DIR", "reports"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
