"""
Image Encoder for the pre-OCR pipeline.

Encodes numpy images back into PNG bytes or a PNG data URL. PNG keeps the
binarized strokes lossless; JPEG would smear them with block artefacts.
"""

import base64
from typing import Union

import cv2
import numpy as np
from loguru import logger

from ..domain.exceptions import ImageEncodingError
from .image_decoder import SourceKind


class ImageEncoder:
    """Encodes a numpy image into PNG bytes / data URL."""

    MIME_TYPE = "image/png"

    @staticmethod
    def encode(image: np.ndarray) -> bytes:
        """
        Encodes a numpy array into PNG bytes.

        Raises:
            ImageEncodingError: if OpenCV cannot encode the array
        """
        try:
            success, buffer = cv2.imencode(".png", image)
        except cv2.error as e:
            raise ImageEncodingError(
                message="Failed to encode processed image to PNG",
                component="ImageEncoder",
                original_error=e
            )

        if not success:
            raise ImageEncodingError(
                message="Failed to encode processed image to PNG",
                component="ImageEncoder"
            )

        encoded_bytes = buffer.tobytes()
        logger.debug(f"[ImageEncoder] Encoded PNG: {len(encoded_bytes)} bytes")
        return encoded_bytes

    @classmethod
    def to_data_url(cls, encoded_bytes: bytes) -> str:
        payload = base64.b64encode(encoded_bytes).decode("ascii")
        return f"data:{cls.MIME_TYPE};base64,{payload}"

    @classmethod
    def encode_as(cls, image: np.ndarray, source_kind: SourceKind) -> Union[bytes, str]:
        """Encodes in the same form the input arrived in (data URL stays data URL)."""
        encoded = cls.encode(image)
        if source_kind == SourceKind.DATA_URL:
            return cls.to_data_url(encoded)
        return encoded
