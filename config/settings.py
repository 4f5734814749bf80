"""
FiberMap OCR settings.

Every knob can be overridden through an environment variable, so the same
build can be tuned per site (camera, label stock, lighting) without code edits.
"""

import os
from pathlib import Path


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# =============================================================================
# PROJECT PATHS
# =============================================================================
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
INPUT_DIR = DATA_DIR / "input"
OUTPUT_DIR = DATA_DIR / "output"

# =============================================================================
# IMAGE INPUT
# =============================================================================
SUPPORTED_IMAGE_FORMATS = [".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"]

# =============================================================================
# PRE-OCR SETTINGS
# =============================================================================
# Images narrower than this are upscaled (character strokes need pixels)
MIN_IMAGE_WIDTH = int(os.getenv("FIBERMAP_MIN_WIDTH", "1500"))

# Linear contrast boost around mid-gray (1.0 = off)
CONTRAST_FACTOR = float(os.getenv("FIBERMAP_CONTRAST_FACTOR", "1.5"))

# Adaptive threshold window (odd, label-scale) and offset below the local mean
THRESHOLD_BLOCK_SIZE = int(os.getenv("FIBERMAP_THRESHOLD_BLOCK_SIZE", "15"))
THRESHOLD_CONSTANT = float(os.getenv("FIBERMAP_THRESHOLD_CONSTANT", "10"))

SHARPEN_ENABLED = _env_bool("FIBERMAP_SHARPEN_ENABLED", True)
THRESHOLD_ENABLED = _env_bool("FIBERMAP_THRESHOLD_ENABLED", True)

# Mean luminance below this means light text on a dark label
POLARITY_THRESHOLD = 128

# =============================================================================
# OCR ENGINES
# =============================================================================
# Available: "paddle", "tesseract", "google_vision"
PRIMARY_OCR_ENGINE = os.getenv("FIBERMAP_PRIMARY_ENGINE", "paddle")
SECONDARY_OCR_ENGINE = os.getenv("FIBERMAP_SECONDARY_ENGINE", "tesseract")

OCR_LANGUAGE = os.getenv("FIBERMAP_OCR_LANGUAGE", "en")

# Tesseract: single uniform block of text (labels are short and dense)
TESSERACT_CONFIG = os.getenv("FIBERMAP_TESSERACT_CONFIG", "--oem 3 --psm 6")

# Path to the Google Cloud service-account JSON (only for "google_vision")
GOOGLE_APPLICATION_CREDENTIALS = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    str(PROJECT_ROOT / "config" / "google_credentials.json")
)

# =============================================================================
# POST-OCR SETTINGS
# =============================================================================
# Recognized lines below this confidence are ignored (0.0 keeps everything)
MIN_LINE_CONFIDENCE = float(os.getenv("FIBERMAP_MIN_LINE_CONFIDENCE", "0.0"))

# Strict mode raises on lines without a recoverable circuit ID instead of dropping them
STRICT_CLEANING = _env_bool("FIBERMAP_STRICT_CLEANING", False)

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = os.getenv("FIBERMAP_LOG_LEVEL", "INFO")

KNOWN_OCR_ENGINES = ("paddle", "tesseract", "google_vision")


# =============================================================================
# CONFIG CHECK
# =============================================================================
def validate_config() -> bool:
    """Checks that the configured values are usable."""
    errors = []

    if MIN_IMAGE_WIDTH <= 0:
        errors.append(f"FIBERMAP_MIN_WIDTH must be > 0, got {MIN_IMAGE_WIDTH}")

    if CONTRAST_FACTOR <= 0:
        errors.append(f"FIBERMAP_CONTRAST_FACTOR must be > 0, got {CONTRAST_FACTOR}")

    if THRESHOLD_BLOCK_SIZE < 1 or THRESHOLD_BLOCK_SIZE % 2 == 0:
        errors.append(
            f"FIBERMAP_THRESHOLD_BLOCK_SIZE must be odd and >= 1, got {THRESHOLD_BLOCK_SIZE}"
        )

    if not 0.0 <= MIN_LINE_CONFIDENCE <= 1.0:
        errors.append(
            f"FIBERMAP_MIN_LINE_CONFIDENCE must be within [0, 1], got {MIN_LINE_CONFIDENCE}"
        )

    for name, value in (("PRIMARY", PRIMARY_OCR_ENGINE), ("SECONDARY", SECONDARY_OCR_ENGINE)):
        if value not in KNOWN_OCR_ENGINES:
            errors.append(
                f"FIBERMAP_{name}_ENGINE={value!r} is unknown "
                f"(available: {', '.join(KNOWN_OCR_ENGINES)})"
            )

    if errors:
        raise ValueError("\n".join(errors))

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    return True
