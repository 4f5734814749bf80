"""Pre-OCR: decode, binarize and re-encode label images."""

from .pipeline import LabelPreprocessingPipeline
from .image_decoder import DecodedImage, SourceKind, decode_image
from .image_encoder import ImageEncoder

__all__ = [
    "LabelPreprocessingPipeline",
    "DecodedImage",
    "SourceKind",
    "decode_image",
    "ImageEncoder",
]
