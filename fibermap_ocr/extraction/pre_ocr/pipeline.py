"""
Pre-OCR pipeline for cable-label photos.

Turns an arbitrary photo into a binarized image that recognition engines read
reliably. Stages, in fixed order:

1. Upscale: images narrower than min_width (mandatory)
2. Grayscale: BT.709 luminance (mandatory)
3. Polarity correction: invert dark-dominant labels (mandatory)
4. Histogram stretch: min -> 0, max -> 255 (mandatory)
5. Contrast boost: skipped when contrast_factor == 1
6. Sharpen: 3x3 kernel (optional)
7. Adaptive threshold: integral-image local mean (optional)

The pipeline is deterministic and holds no state between calls, so several
images can be processed concurrently.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional, Tuple, Union

import numpy as np
import numpy.typing as npt
from loguru import logger

from config.settings import POLARITY_THRESHOLD
from fibermap_ocr.domain.contracts import PreprocessConfig, PreprocessStage
from ..domain.interfaces import IImagePreprocessor, ImageSource
from .image_decoder import DecodedImage, decode_image
from .image_encoder import ImageEncoder
from .infrastructure.filters import (
    apply_adaptive_threshold,
    apply_contrast_boost,
    apply_grayscale,
    apply_histogram_stretch,
    apply_polarity_correction,
    apply_sharpen,
    apply_upscale,
    to_three_channel,
)


class LabelPreprocessingPipeline(IImagePreprocessor):
    """
    Pre-OCR pipeline (7 stages) for label images.

    process() decodes, transforms and re-encodes in the caller's format;
    process_array() exposes the pixel chain on an already decoded array.
    """

    def __init__(self, config: Optional[PreprocessConfig] = None) -> None:
        self.config = config or PreprocessConfig()
        logger.debug(f"[LabelPreprocessingPipeline] Initialized ({self.config})")

    def process(
        self,
        image: ImageSource,
        config: Optional[PreprocessConfig] = None
    ) -> Tuple[Union[bytes, str], Dict[str, Any]]:
        """
        Preprocesses an encoded image.

        Args:
            image: Encoded bytes, data URL or path
            config: Overrides the pipeline's config for this call

        Returns:
            (processed_image, metadata): PNG data URL for data-URL input,
            PNG bytes otherwise

        Raises:
            ImageDecodingError: input is not an image (nothing is processed)
            ImageNotFoundError: path input does not exist
        """
        decoded = decode_image(image)
        return self._process_decoded(decoded, config)

    async def aprocess(
        self,
        image: ImageSource,
        config: Optional[PreprocessConfig] = None
    ) -> Tuple[Union[bytes, str], Dict[str, Any]]:
        """
        Async variant of process().

        Suspends only while the image is decoded; the pixel passes then run
        to completion.
        """
        decoded = await asyncio.to_thread(decode_image, image)
        return self._process_decoded(decoded, config)

    def _process_decoded(
        self,
        decoded: DecodedImage,
        config: Optional[PreprocessConfig]
    ) -> Tuple[Union[bytes, str], Dict[str, Any]]:
        processed, metadata = self.process_array(decoded.image, config)
        output = ImageEncoder.encode_as(processed, decoded.source_kind)

        metadata["source"] = decoded.source_name
        metadata["source_kind"] = decoded.source_kind.value

        logger.info(
            f"[LabelPreprocessingPipeline] Done: {decoded.source_name} "
            f"({metadata['original_size'][0]}x{metadata['original_size'][1]} -> "
            f"{metadata['processed_size'][0]}x{metadata['processed_size'][1]}, "
            f"stages={metadata['applied']}, {metadata['processing_time_ms']:.0f} ms)"
        )
        return output, metadata

    def process_array(
        self,
        image: npt.NDArray[np.uint8],
        config: Optional[PreprocessConfig] = None
    ) -> Tuple[npt.NDArray[np.uint8], Dict[str, Any]]:
        """
        Runs the pixel chain on a decoded image.

        The input array is never modified.

        Args:
            image: BGR (H, W, 3), BGRA or grayscale (H, W) uint8

        Returns:
            (processed BGR image with R=G=B, metadata)
        """
        cfg = config or self.config
        start_time = time.time()
        applied: List[PreprocessStage] = []

        original_h, original_w = image.shape[:2]

        # 1. Upscale
        processed = apply_upscale(image, cfg.min_width)
        if processed.shape[:2] != image.shape[:2]:
            applied.append(PreprocessStage.UPSCALE)
            logger.debug(
                f"[Stage 1: Upscale] {original_w}x{original_h} -> "
                f"{processed.shape[1]}x{processed.shape[0]}"
            )

        # 2. Grayscale
        plane = apply_grayscale(processed)
        applied.append(PreprocessStage.GRAYSCALE)

        # 3. Polarity correction
        plane, inverted = apply_polarity_correction(plane, POLARITY_THRESHOLD)
        applied.append(PreprocessStage.POLARITY_CORRECTION)
        if inverted:
            logger.debug("[Stage 3: Polarity] Dark background detected, image inverted")

        # 4. Histogram stretch
        plane, (lum_min, lum_max) = apply_histogram_stretch(plane)
        applied.append(PreprocessStage.HISTOGRAM_STRETCH)
        if lum_min == lum_max:
            logger.debug(f"[Stage 4: Stretch] Flat image (value={lum_min}), left unchanged")
        else:
            logger.debug(f"[Stage 4: Stretch] Range {lum_min}..{lum_max} -> 0..255")

        # 5. Contrast boost
        if cfg.contrast_factor != 1:
            plane = apply_contrast_boost(plane, cfg.contrast_factor)
            applied.append(PreprocessStage.CONTRAST_BOOST)
            logger.debug(f"[Stage 5: Contrast] factor={cfg.contrast_factor}")

        # 6. Sharpen
        if cfg.sharpen_enabled:
            plane = apply_sharpen(plane)
            applied.append(PreprocessStage.SHARPEN)
            logger.debug("[Stage 6: Sharpen] 3x3 kernel applied")

        # 7. Adaptive threshold
        if cfg.threshold_enabled:
            plane = apply_adaptive_threshold(
                plane, cfg.threshold_block_size, cfg.threshold_constant
            )
            applied.append(PreprocessStage.ADAPTIVE_THRESHOLD)
            logger.debug(
                f"[Stage 7: Threshold] block={cfg.threshold_block_size}, "
                f"C={cfg.threshold_constant}"
            )

        result = to_three_channel(plane)
        processing_time_ms = (time.time() - start_time) * 1000

        metadata: Dict[str, Any] = {
            "applied": [stage.value for stage in applied],
            "original_size": (original_w, original_h),
            "processed_size": (int(result.shape[1]), int(result.shape[0])),
            "inverted": inverted,
            "luminance_range": (lum_min, lum_max),
            "config": cfg.model_dump(),
            "processing_time_ms": processing_time_ms,
        }
        return result, metadata
