"""
Label ingestion pipeline.

One coroutine per submitted image:
1. Preprocessing (suspends while the image is decoded)
2. Text recognition (suspends while the engine works; falls back to the
   secondary engine)
3. Canonicalization into "prefix,start-end" circuit IDs

Result: IngestionResult from contracts/ingestion_dto.py
"""

import asyncio
from typing import Any, Dict, List, Optional, Union

from loguru import logger

from contracts.ingestion_dto import IngestionResult
from fibermap_ocr.domain.contracts import PreprocessConfig, RecognitionResult
from fibermap_ocr.parsing.circuit_id import CircuitIdCanonicalizer
from fibermap_ocr.parsing.domain.exceptions import CircuitIdFormatError
from ..domain.exceptions import ExtractionError, ImageProcessingError
from ..domain.interfaces import ImageSource
from ..infrastructure.engine_selector import OCREngineSelector
from ..pre_ocr.image_decoder import parse_data_url
from ..pre_ocr.pipeline import LabelPreprocessingPipeline


class LabelIngestionPipeline:
    """
    Coordinates preprocessing, recognition and canonicalization.

    Holds no per-image state, so one instance can serve concurrent
    submissions (see ingest_many).
    """

    def __init__(
        self,
        preprocessor: LabelPreprocessingPipeline,
        engine_selector: OCREngineSelector,
        canonicalizer: CircuitIdCanonicalizer,
        min_line_confidence: float = 0.0
    ):
        self.preprocessor = preprocessor
        self.engine_selector = engine_selector
        self.canonicalizer = canonicalizer
        self.min_line_confidence = min_line_confidence

        logger.info("[Ingestion] Pipeline initialized")

    async def ingest(
        self,
        image: ImageSource,
        config: Optional[PreprocessConfig] = None
    ) -> IngestionResult:
        """
        Turns one label image into canonical circuit IDs.

        Raises:
            ImageDecodingError: the input is not an image
            ImageNotFoundError: path input does not exist
            RecognitionUnavailableError: neither engine produced text
        """
        processed, metadata = await self._preprocess(image, config)
        image_bytes = self._as_bytes(processed)

        logger.debug("[Ingestion] Step 2: recognition")
        recognition = await self.engine_selector.recognize(image_bytes)

        raw_text = self._filter_text(recognition)

        logger.debug("[Ingestion] Step 3: canonicalization")
        canonical = self.canonicalizer.canonicalize(raw_text)

        result = IngestionResult(
            circuit_ids=canonical.circuit_ids,
            raw_text=raw_text,
            engine=recognition.engine,
            rejected_lines=canonical.rejected,
            preprocessing=metadata,
        )

        logger.info(
            f"[Ingestion] Done: {metadata.get('source', 'memory')} "
            f"({len(result.circuit_ids)} circuit IDs, {len(result.rejected_lines)} rejected, "
            f"engine={result.engine})"
        )
        return result

    async def ingest_many(
        self,
        images: List[ImageSource],
        config: Optional[PreprocessConfig] = None
    ) -> Dict[str, Any]:
        """
        Ingests several images concurrently.

        One failing image does not stop the others, including a strict
        canonicalizer rejecting an image's text.

        Returns:
            dict with processed/success/failed counters and per-image results
            (IngestionResult, or the raised ExtractionError or
            CircuitIdFormatError)
        """
        outcomes = await asyncio.gather(
            *(self.ingest(image, config) for image in images),
            return_exceptions=True
        )

        results: Dict[str, Any] = {
            "processed": len(images),
            "success": 0,
            "failed": 0,
            "results": []
        }

        for outcome in outcomes:
            if isinstance(outcome, (ExtractionError, CircuitIdFormatError)):
                results["failed"] += 1
                logger.warning(f"[Ingestion] Image failed: {outcome}")
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results["success"] += 1
            results["results"].append(outcome)

        logger.info(f"[Ingestion] Batch: {results['success']}/{results['processed']} succeeded")
        return results

    async def _preprocess(self, image: ImageSource, config: Optional[PreprocessConfig]):
        logger.debug("[Ingestion] Step 1: preprocessing")
        try:
            return await self.preprocessor.aprocess(image, config)
        except ExtractionError:
            raise
        except Exception as e:
            raise ImageProcessingError(
                message="Preprocessing failed",
                component="LabelIngestionPipeline",
                original_error=e
            )

    def _filter_text(self, recognition: RecognitionResult) -> str:
        if self.min_line_confidence <= 0:
            return recognition.text

        kept = recognition.confident_lines(self.min_line_confidence)
        dropped = len(recognition.lines) - len(kept)
        if dropped:
            logger.debug(
                f"[Ingestion] {dropped} line(s) below confidence {self.min_line_confidence} ignored"
            )
        return "\n".join(line.text for line in kept)

    @staticmethod
    def _as_bytes(processed: Union[bytes, str]) -> bytes:
        """Engines take raw bytes; data URLs are unwrapped."""
        if isinstance(processed, str):
            return parse_data_url(processed)[1]
        return processed
