"""
Image Decoder for the pre-OCR pipeline.

Reads an image from raw bytes, a ``data:`` URL or a file path and decodes it
into a numpy array. Only decoding happens here, no pixel work.
"""

import base64
import binascii
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from loguru import logger

from ..domain.exceptions import ImageDecodingError, ImageNotFoundError
from ..domain.interfaces import ImageSource


_DATA_URL_PATTERN = re.compile(
    r'^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^,;]*)*),(?P<payload>.*)$',
    re.DOTALL
)


class SourceKind(str, Enum):
    """Form the caller supplied the image in (the output mirrors it)."""
    BYTES = "bytes"
    DATA_URL = "data_url"
    PATH = "path"


@dataclass
class DecodedImage:
    """
    Decoded image plus where it came from.

    ``image`` is BGR uint8 (H, W, 3), exclusively owned by the caller.
    """
    image: np.ndarray
    source_kind: SourceKind
    mime_type: Optional[str] = None
    source_name: str = "memory"

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


def decode_bytes(raw_bytes: bytes, source_name: str = "memory") -> np.ndarray:
    """
    Decodes encoded image bytes into a BGR numpy array.

    Raises:
        ImageDecodingError: if the bytes are not a decodable image
    """
    if not raw_bytes:
        raise ImageDecodingError(
            message=f"Empty image data: {source_name}",
            component="ImageDecoder"
        )

    try:
        image = cv2.imdecode(np.frombuffer(raw_bytes, np.uint8), cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodingError(
            message=f"Failed to decode image: {source_name}",
            component="ImageDecoder",
            original_error=e
        )

    if image is None or image.size == 0:
        raise ImageDecodingError(
            message=f"Failed to decode image: {source_name}",
            component="ImageDecoder"
        )

    return image


def parse_data_url(data_url: str) -> tuple[Optional[str], bytes]:
    """
    Splits a base64 ``data:`` URL into (mime_type, payload bytes).

    Raises:
        ImageDecodingError: if the URL is malformed or not base64
    """
    match = _DATA_URL_PATTERN.match(data_url.strip())
    if not match:
        raise ImageDecodingError(message="Malformed data URL", component="ImageDecoder")

    params = [p.strip().lower() for p in match.group("params").split(";") if p.strip()]
    if "base64" not in params:
        raise ImageDecodingError(
            message="Only base64 data URLs are supported",
            component="ImageDecoder"
        )

    try:
        payload = base64.b64decode(match.group("payload"), validate=False)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodingError(
            message="Data URL payload is not valid base64",
            component="ImageDecoder",
            original_error=e
        )

    return match.group("mime"), payload


def decode_image(source: ImageSource) -> DecodedImage:
    """
    Decodes any supported image source.

    Strings starting with ``data:`` are data URLs, other strings are paths.

    Raises:
        ImageNotFoundError: if a path does not exist
        ImageDecodingError: if the content is not an image
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        image = decode_bytes(bytes(source))
        decoded = DecodedImage(image=image, source_kind=SourceKind.BYTES)

    elif isinstance(source, str) and source.lstrip().startswith("data:"):
        mime_type, payload = parse_data_url(source)
        image = decode_bytes(payload, source_name="data URL")
        decoded = DecodedImage(image=image, source_kind=SourceKind.DATA_URL, mime_type=mime_type)

    elif isinstance(source, (str, Path)):
        image_path = Path(source)
        if not image_path.exists():
            raise ImageNotFoundError(
                message=f"Image not found: {image_path}",
                component="ImageDecoder"
            )
        image = decode_bytes(image_path.read_bytes(), source_name=image_path.name)
        decoded = DecodedImage(
            image=image,
            source_kind=SourceKind.PATH,
            source_name=image_path.name
        )

    else:
        raise ImageDecodingError(
            message=f"Unsupported image source type: {type(source).__name__}",
            component="ImageDecoder"
        )

    logger.debug(
        f"[ImageDecoder] Decoded {decoded.source_kind.value} "
        f"({decoded.source_name}): {decoded.width}x{decoded.height}"
    )
    return decoded
