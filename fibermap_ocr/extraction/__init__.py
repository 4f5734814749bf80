"""
Extraction domain: Pre-OCR + OCR for cable-label images.

This domain is responsible for:
1. Preprocessing label photos into binarized images
2. Text recognition through PaddleOCR / Tesseract / Google Vision with fallback
3. Handing recognized text to the Parsing domain

Domain boundary: contracts.IngestionResult
"""

from .pre_ocr.pipeline import LabelPreprocessingPipeline
from .infrastructure.engine_selector import OCREngineSelector, EngineState
from .application.factory import IngestionComponentFactory
from .application.ingestion_pipeline import LabelIngestionPipeline

__all__ = [
    "LabelPreprocessingPipeline",
    "OCREngineSelector",
    "EngineState",
    "IngestionComponentFactory",
    "LabelIngestionPipeline",
]
