"""Extraction Infrastructure: OCR engines and engine selection."""

from .engine_selector import (
    EngineState,
    OCREngineSelector,
    get_default_selector,
    reset_default_selector,
)

__all__ = [
    "EngineState",
    "OCREngineSelector",
    "get_default_selector",
    "reset_default_selector",
]
