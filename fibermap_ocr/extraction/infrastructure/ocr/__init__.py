"""OCR engine adapters (all implement IOCRProvider)."""

from .base import BaseOCREngine
from .paddle_ocr import PaddleOCREngine
from .tesseract_ocr import TesseractOCREngine
from .google_vision_ocr import GoogleVisionOCREngine

__all__ = [
    "BaseOCREngine",
    "PaddleOCREngine",
    "TesseractOCREngine",
    "GoogleVisionOCREngine",
]
