"""
Validation contracts for the label-ingestion pipeline.

Each contract guarantees:
  1. Correct data types
  2. Values inside their allowed ranges
  3. Required fields present

Without them the pipeline could pass along values such as an even threshold
window (no centre pixel), a zero contrast factor (flattens everything to gray)
or an OCR confidence of 87 instead of 0.87.

All models use Pydantic v2 with Field validators.
"""

import math
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config.settings import (
    CONTRAST_FACTOR,
    MIN_IMAGE_WIDTH,
    SHARPEN_ENABLED,
    THRESHOLD_BLOCK_SIZE,
    THRESHOLD_CONSTANT,
    THRESHOLD_ENABLED,
)


# ============================================================================
# PRE-OCR: PREPROCESSING CONFIG
# ============================================================================

class PreprocessStage(str, Enum):
    """Pre-OCR stages in their fixed order of application."""
    UPSCALE = "upscale"                        # Only when narrower than min_width
    GRAYSCALE = "grayscale"                    # Mandatory
    POLARITY_CORRECTION = "polarity_correction"  # Mandatory (inverts dark labels)
    HISTOGRAM_STRETCH = "histogram_stretch"    # Mandatory
    CONTRAST_BOOST = "contrast_boost"          # Skipped when factor == 1
    SHARPEN = "sharpen"                        # Optional
    ADAPTIVE_THRESHOLD = "adaptive_threshold"  # Optional


class PreprocessConfig(BaseModel):
    """
    Knobs of the pre-OCR pipeline.

    Upscale, grayscale, polarity correction and histogram stretch always run.
    Contrast boost is skipped when ``contrast_factor == 1``; sharpen and
    adaptive threshold have explicit switches.
    """

    model_config = ConfigDict(frozen=True)

    min_width: int = Field(
        MIN_IMAGE_WIDTH,
        gt=0,
        description="Images narrower than this are upscaled (pixels)"
    )
    contrast_factor: float = Field(
        CONTRAST_FACTOR,
        gt=0,
        description="Contrast boost around mid-gray (1 = off, 1.5 = moderate, 2 = strong)"
    )
    threshold_block_size: int = Field(
        THRESHOLD_BLOCK_SIZE,
        ge=1,
        description="Adaptive threshold window side (odd, pixels)"
    )
    threshold_constant: float = Field(
        THRESHOLD_CONSTANT,
        description="Offset subtracted from the local mean before comparison"
    )
    sharpen_enabled: bool = Field(SHARPEN_ENABLED, description="Apply 3x3 sharpening")
    threshold_enabled: bool = Field(THRESHOLD_ENABLED, description="Apply adaptive binarization")

    @field_validator('threshold_block_size')
    @classmethod
    def block_size_is_odd(cls, v: int) -> int:
        """The window must have a centre pixel."""
        if v % 2 == 0:
            raise ValueError(f"threshold_block_size must be odd, got {v}")
        return v

    @field_validator('contrast_factor', 'threshold_constant')
    @classmethod
    def no_special_floats(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("Value cannot be NaN or Inf")
        return v

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "PreprocessConfig":
        """
        Builds a config from a plain dict, reporting problems as ContractValidationError.

        Unknown keys are rejected so a typo in a site config does not silently
        fall back to a default.
        """
        unknown = sorted(set(data) - set(cls.model_fields))
        if unknown:
            raise ContractValidationError(
                "PreOCR", "PreprocessConfig",
                [f"unknown field(s): {', '.join(unknown)}"]
            )
        try:
            return cls(**data)
        except ValidationError as e:
            raise ContractValidationError("PreOCR", "PreprocessConfig", e.errors()) from e

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "PreprocessConfig":
        """
        Loads a config from a YAML file.

        The file may hold the knobs at the top level or under a
        ``preprocessing:`` key. Missing knobs keep their defaults.
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ContractValidationError(
                "PreOCR", "PreprocessConfig",
                [f"{path}: expected a mapping, got {type(data).__name__}"]
            )

        data = data.get("preprocessing", data)
        return cls.from_mapping(data)


# ============================================================================
# OCR: RECOGNITION OUTPUT
# ============================================================================

class RecognizedLine(BaseModel):
    """One line predicted by a recognition engine."""

    model_config = ConfigDict(frozen=True)

    text: str = Field("", description="Recognized text (may be empty)")
    confidence: float = Field(..., ge=0, le=1, description="Confidence [0-1]")

    @field_validator('confidence')
    @classmethod
    def confidence_is_real(cls, v: float) -> float:
        if math.isnan(v):
            raise ValueError("Confidence cannot be NaN")
        return v


class RecognitionResult(BaseModel):
    """
    Ordered line predictions for one image.

    The output contract is the same whichever engine answered; ``engine``
    is kept for diagnostics only.
    """

    model_config = ConfigDict(frozen=True)

    engine: str = Field(..., min_length=1, description="Name of the engine that answered")
    lines: List[RecognizedLine] = Field(default_factory=list, description="Lines in reading order")

    @property
    def text(self) -> str:
        """All lines joined with newlines."""
        return "\n".join(line.text for line in self.lines)

    @property
    def mean_confidence(self) -> float:
        if not self.lines:
            return 0.0
        return sum(line.confidence for line in self.lines) / len(self.lines)

    def confident_lines(self, min_confidence: float) -> List[RecognizedLine]:
        return [line for line in self.lines if line.confidence >= min_confidence]


# ============================================================================
# ERRORS & DIAGNOSTICS
# ============================================================================

class ContractValidationError(Exception):
    """Raised when a contract is violated (used instead of the raw pydantic ValidationError)."""

    def __init__(self, stage_name: str, contract_name: str, errors: Union[List[Dict[str, Any]], List[Any]]) -> None:
        self.stage_name = stage_name
        self.contract_name = contract_name
        self.errors = errors

        error_messages = []
        for err in errors:
            if isinstance(err, dict):
                loc = err.get('loc', [])[0] if err.get('loc') else 'unknown'
                err_type = err.get('type', 'unknown')
                msg = err.get('msg', 'unknown error')
                error_messages.append(f"  {loc} ({err_type}): {msg}")
            else:
                error_messages.append(f"  {str(err)}")

        message = (
            f"Contract violation in {stage_name} ({contract_name}):\n"
            + "\n".join(error_messages)
        )
        super().__init__(message)
