"""
Common base for recognition engine adapters.

Adapters only implement loading (``_load``) and raw recognition
(``_recognize_lines``); the base wraps third-party failures into domain
exceptions and validates the output contract, so every engine answers with
the same RecognitionResult shape.
"""

import math
from abc import abstractmethod
from typing import Iterable, List, Tuple

from loguru import logger
from pydantic import ValidationError

from fibermap_ocr.domain.contracts import (
    ContractValidationError,
    RecognitionResult,
    RecognizedLine,
)
from ...domain.exceptions import ExtractionError, OCRProviderError, OCRResponseError
from ...domain.interfaces import IOCRProvider


class BaseOCREngine(IOCRProvider):
    """Template for engines: lazy load once, recognize many times."""

    name = "base"

    def __init__(self) -> None:
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def initialize(self) -> None:
        if self._ready:
            return
        try:
            self._load()
        except ExtractionError:
            raise
        except Exception as e:
            raise OCRProviderError(
                message=f"Failed to initialize OCR engine '{self.name}'",
                component=type(self).__name__,
                original_error=e
            )
        self._ready = True
        logger.info(f"[{type(self).__name__}] Engine ready")

    def recognize(self, image_content: bytes) -> RecognitionResult:
        self.initialize()
        try:
            raw_lines = list(self._recognize_lines(image_content))
        except ExtractionError:
            raise
        except Exception as e:
            raise OCRResponseError(
                message=f"OCR engine '{self.name}' failed to recognize text",
                component=type(self).__name__,
                original_error=e
            )

        result = self._build_result(raw_lines)
        logger.debug(
            f"[{type(self).__name__}] Recognized {len(result.lines)} lines "
            f"(mean confidence {result.mean_confidence:.2f})"
        )
        return result

    def _build_result(self, raw_lines: Iterable[Tuple[str, float]]) -> RecognitionResult:
        lines: List[RecognizedLine] = []
        try:
            for text, confidence in raw_lines:
                lines.append(RecognizedLine(text=text, confidence=_clamp_confidence(confidence)))
            return RecognitionResult(engine=self.name, lines=lines)
        except ValidationError as e:
            raise ContractValidationError(self.name, "RecognitionResult", e.errors())

    @abstractmethod
    def _load(self) -> None:
        """Imports the engine library and loads models."""
        pass

    @abstractmethod
    def _recognize_lines(self, image_content: bytes) -> Iterable[Tuple[str, float]]:
        """Yields (text, confidence) per line in reading order."""
        pass


def _clamp_confidence(confidence: float) -> float:
    """Engines occasionally report 1.0000001, small negatives or NaN (no score)."""
    value = float(confidence)
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))
