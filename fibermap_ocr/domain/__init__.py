"""Pydantic contracts shared by the extraction and parsing domains."""

from .contracts import (
    PreprocessStage,
    PreprocessConfig,
    RecognizedLine,
    RecognitionResult,
    ContractValidationError,
)

__all__ = [
    "PreprocessStage",
    "PreprocessConfig",
    "RecognizedLine",
    "RecognitionResult",
    "ContractValidationError",
]
