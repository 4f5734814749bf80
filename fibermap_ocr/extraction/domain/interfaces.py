"""
Interfaces (abstract classes) for the Extraction domain.

The Extraction domain is responsible for:
1. Image preprocessing (pre-ocr)
2. Text recognition through an external engine
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from fibermap_ocr.domain.contracts import PreprocessConfig, RecognitionResult

# Raw encoded bytes, a "data:image/...;base64," URL, or a file path
ImageSource = Union[bytes, str, Path]


class IImagePreprocessor(ABC):
    """Image preprocessor interface (Extraction domain)."""

    @abstractmethod
    def process(
        self,
        image: ImageSource,
        config: Optional[PreprocessConfig] = None
    ) -> Tuple[Union[bytes, str], Dict[str, Any]]:
        """
        Runs the image through the whole preprocessing chain.

        Args:
            image: Encoded image (bytes, data URL or path)
            config: Pipeline knobs; defaults from settings when omitted

        Returns:
            (processed_image, metadata) where processed_image has the same
            encodable form as the input and metadata holds the key 'applied'
            (stage names in order).
        """
        pass


class IOCRProvider(ABC):
    """
    Text recognition engine interface (Extraction domain).

    Any implementation produces line-level text + confidence from an image,
    so engines are interchangeable behind the selector.
    """

    name: str = "unknown"

    @abstractmethod
    def initialize(self) -> None:
        """
        Loads models / checks binaries.

        Raises:
            OCRProviderError: if the engine cannot be used in this environment
        """
        pass

    @abstractmethod
    def recognize(self, image_content: bytes) -> RecognitionResult:
        """
        Recognizes text lines on an encoded image.

        Args:
            image_content: Encoded image bytes (PNG/JPEG)

        Returns:
            RecognitionResult with lines in reading order

        Raises:
            OCRResponseError: if recognition fails
        """
        pass
