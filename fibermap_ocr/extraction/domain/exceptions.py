"""
Exceptions for the Extraction domain.

Errors specific to image decoding, preprocessing and text recognition.
"""

from typing import Optional


class ExtractionError(Exception):
    """Base exception for the Extraction domain."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Extraction Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class ImageProcessingError(ExtractionError):
    """Image preprocessing failed."""
    pass


class ImageNotFoundError(ImageProcessingError):
    """Image file does not exist."""
    pass


class ImageDecodingError(ImageProcessingError):
    """Input cannot be interpreted as an image (unreadable image)."""
    pass


class ImageEncodingError(ImageProcessingError):
    """Processed pixels could not be re-encoded."""
    pass


class OCRProcessingError(ExtractionError):
    """Text recognition failed."""
    pass


class OCRProviderError(OCRProcessingError):
    """A recognition engine could not be initialized."""
    pass


class OCRResponseError(OCRProcessingError):
    """A recognition engine failed while recognizing."""
    pass


class RecognitionUnavailableError(OCRProcessingError):
    """Neither the primary nor the secondary engine produced a result."""
    pass


class ExtractionConfigurationError(ExtractionError):
    """Invalid Extraction domain configuration (e.g. unknown engine name)."""
    pass
