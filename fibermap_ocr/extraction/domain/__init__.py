"""Extraction domain: interfaces and exceptions."""

from .exceptions import (
    ExtractionError,
    ImageProcessingError,
    ImageNotFoundError,
    ImageDecodingError,
    ImageEncodingError,
    OCRProcessingError,
    OCRProviderError,
    OCRResponseError,
    RecognitionUnavailableError,
    ExtractionConfigurationError,
)
from .interfaces import IImagePreprocessor, IOCRProvider, ImageSource

__all__ = [
    "ExtractionError",
    "ImageProcessingError",
    "ImageNotFoundError",
    "ImageDecodingError",
    "ImageEncodingError",
    "OCRProcessingError",
    "OCRProviderError",
    "OCRResponseError",
    "RecognitionUnavailableError",
    "ExtractionConfigurationError",
    "IImagePreprocessor",
    "IOCRProvider",
    "ImageSource",
]
