"""
OCR: Google Cloud Vision engine adapter.

Opt-in engine (set FIBERMAP_PRIMARY_ENGINE=google_vision). Sends the
preprocessed PNG to DOCUMENT_TEXT_DETECTION and rebuilds text lines from the
symbol-level break markers.
"""

import os
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from loguru import logger

from config.settings import GOOGLE_APPLICATION_CREDENTIALS
from ...domain.exceptions import OCRResponseError
from .base import BaseOCREngine


# google.cloud.vision TextAnnotation.DetectedBreak.BreakType values
_SPACE_BREAKS = {1, 2}        # SPACE, SURE_SPACE
_LINE_BREAKS = {3, 5}         # EOL_SURE_SPACE, LINE_BREAK
_HYPHEN_BREAK = 4


class GoogleVisionOCREngine(BaseOCREngine):
    """Wrapper around ``google.cloud.vision.ImageAnnotatorClient``."""

    name = "google_vision"

    def __init__(self, credentials_path: Optional[str] = None) -> None:
        super().__init__()
        self.credentials_path = credentials_path or GOOGLE_APPLICATION_CREDENTIALS
        self._vision: Any = None
        self.client: Any = None

    def _load(self) -> None:
        if not self.credentials_path:
            raise ValueError(
                "Google credentials are not set!\n"
                "Set GOOGLE_APPLICATION_CREDENTIALS or pass credentials_path."
            )

        if not Path(self.credentials_path).exists():
            raise FileNotFoundError(f"Credentials file not found: {self.credentials_path}")

        from google.cloud import vision

        os.environ["GOOGLE_APPLICATION_CREDENTIALS"] = str(self.credentials_path)
        self._vision = vision
        self.client = vision.ImageAnnotatorClient()
        logger.debug("[GoogleVisionOCREngine] Client initialized")

    def _recognize_lines(self, image_content: bytes) -> Iterable[Tuple[str, float]]:
        image = self._vision.Image(content=image_content)
        response = self.client.document_text_detection(image=image)

        if response.error.message:
            raise OCRResponseError(
                message=f"Google Vision API error: {response.error.message}",
                component="GoogleVisionOCREngine"
            )

        return self._parse_response(response)

    @staticmethod
    def _parse_response(response: Any) -> List[Tuple[str, float]]:
        """Rebuilds lines from pages -> blocks -> paragraphs -> words -> symbols."""
        lines: List[Tuple[str, float]] = []
        annotation = response.full_text_annotation
        if not annotation:
            return lines

        for page in annotation.pages:
            for block in page.blocks:
                for paragraph in block.paragraphs:
                    text_parts: List[str] = []
                    confidences: List[float] = []

                    for word in paragraph.words:
                        confidences.append(word.confidence)
                        for symbol in word.symbols:
                            text_parts.append(symbol.text)
                            break_type = int(symbol.property.detected_break.type_)
                            if break_type in _SPACE_BREAKS:
                                text_parts.append(" ")
                            elif break_type == _HYPHEN_BREAK:
                                text_parts.append("-")
                            elif break_type in _LINE_BREAKS:
                                lines.append(_finish_line(text_parts, confidences))
                                text_parts, confidences = [], []

                    if text_parts:
                        lines.append(_finish_line(text_parts, confidences))

        return lines


def _finish_line(text_parts: List[str], confidences: List[float]) -> Tuple[str, float]:
    text = "".join(text_parts).strip()
    confidence = sum(confidences) / len(confidences) if confidences else 0.0
    return text, confidence
