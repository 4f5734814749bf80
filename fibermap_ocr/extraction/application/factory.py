"""
Factory for the label-ingestion components.

Single place that turns settings (engine names, thresholds, strict mode)
into wired-up objects.
"""

from typing import Any, Dict, Optional

from loguru import logger

from config.settings import (
    MIN_LINE_CONFIDENCE,
    PRIMARY_OCR_ENGINE,
    SECONDARY_OCR_ENGINE,
    STRICT_CLEANING,
)
from fibermap_ocr.domain.contracts import PreprocessConfig
from fibermap_ocr.parsing.circuit_id import CircuitIdCanonicalizer, CircuitIdCleaner
from ..domain.exceptions import ExtractionConfigurationError
from ..domain.interfaces import IOCRProvider
from ..infrastructure.engine_selector import OCREngineSelector
from ..infrastructure.ocr import GoogleVisionOCREngine, PaddleOCREngine, TesseractOCREngine
from ..pre_ocr.pipeline import LabelPreprocessingPipeline
from .ingestion_pipeline import LabelIngestionPipeline


ENGINE_REGISTRY = {
    PaddleOCREngine.name: PaddleOCREngine,
    TesseractOCREngine.name: TesseractOCREngine,
    GoogleVisionOCREngine.name: GoogleVisionOCREngine,
}


class IngestionComponentFactory:
    """
    Factory for the ingestion components.

    Ingestion is responsible for:
    - Preprocessing label images
    - Text recognition with primary/secondary engine fallback
    - Canonicalizing recognized text into circuit IDs
    """

    @staticmethod
    def create_engine(name: str, **kwargs: Any) -> IOCRProvider:
        """
        Creates an engine adapter by name (not yet initialized).

        Raises:
            ExtractionConfigurationError: unknown engine name
        """
        engine_cls = ENGINE_REGISTRY.get(name)
        if engine_cls is None:
            raise ExtractionConfigurationError(
                message=f"Unknown OCR engine '{name}' (available: {', '.join(ENGINE_REGISTRY)})",
                component="IngestionComponentFactory"
            )
        logger.debug(f"[Ingestion] Creating OCR engine: {name}")
        return engine_cls(**kwargs)

    @staticmethod
    def create_engine_selector(
        primary: Optional[str] = None,
        secondary: Optional[str] = None
    ) -> OCREngineSelector:
        """
        Creates the primary/secondary selector.

        Args:
            primary: Engine name (default from settings)
            secondary: Engine name (default from settings); "" or the
                       primary's name disables the fallback
        """
        primary = primary or PRIMARY_OCR_ENGINE
        secondary = SECONDARY_OCR_ENGINE if secondary is None else secondary

        primary_engine = IngestionComponentFactory.create_engine(primary)
        secondary_engine = None
        if secondary and secondary != primary:
            secondary_engine = IngestionComponentFactory.create_engine(secondary)

        logger.debug(f"[Ingestion] Engine selector: primary={primary}, secondary={secondary or None}")
        return OCREngineSelector(primary_engine, secondary_engine)

    @staticmethod
    def create_preprocessor(config: Optional[PreprocessConfig] = None) -> LabelPreprocessingPipeline:
        logger.debug("[Ingestion] Creating label preprocessor")
        return LabelPreprocessingPipeline(config)

    @staticmethod
    def create_canonicalizer(strict: bool = STRICT_CLEANING) -> CircuitIdCanonicalizer:
        logger.debug(f"[Ingestion] Creating canonicalizer (strict={strict})")
        return CircuitIdCanonicalizer(CircuitIdCleaner(strict=strict))

    @staticmethod
    def create_ingestion_pipeline(
        preprocessor: Optional[LabelPreprocessingPipeline] = None,
        engine_selector: Optional[OCREngineSelector] = None,
        canonicalizer: Optional[CircuitIdCanonicalizer] = None,
        min_line_confidence: float = MIN_LINE_CONFIDENCE
    ) -> LabelIngestionPipeline:
        """
        Creates the full ingestion pipeline.

        Missing components get defaults; the engine selector defaults to the
        process-wide one so engines are loaded once per process.
        """
        if preprocessor is None:
            preprocessor = IngestionComponentFactory.create_preprocessor()

        if engine_selector is None:
            from ..infrastructure.engine_selector import get_default_selector
            engine_selector = get_default_selector()

        if canonicalizer is None:
            canonicalizer = IngestionComponentFactory.create_canonicalizer()

        return LabelIngestionPipeline(
            preprocessor=preprocessor,
            engine_selector=engine_selector,
            canonicalizer=canonicalizer,
            min_line_confidence=min_line_confidence
        )

    @staticmethod
    def get_ingestion_info() -> Dict[str, Any]:
        """Describes the configured components (for diagnostics / CLI --info)."""
        return {
            "domain": "Ingestion",
            "responsibility": "Label image -> canonical circuit IDs",
            "engines": {
                "primary": PRIMARY_OCR_ENGINE,
                "secondary": SECONDARY_OCR_ENGINE,
                "available": list(ENGINE_REGISTRY),
            },
            "preprocessing": PreprocessConfig().model_dump(),
            "min_line_confidence": MIN_LINE_CONFIDENCE,
            "strict_cleaning": STRICT_CLEANING,
        }
