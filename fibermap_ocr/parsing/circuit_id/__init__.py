"""Circuit ID text handling: clean OCR output, normalize, parse."""

from .cleaner import CircuitIdCleaner, CleanupResult, clean_ocr_text
from .normalizer import normalize_circuit_id, normalize_circuit_ids
from .circuit_id import CircuitId
from .canonicalizer import CircuitIdCanonicalizer, CanonicalizationResult, canonicalize

__all__ = [
    "CircuitIdCleaner",
    "CleanupResult",
    "clean_ocr_text",
    "normalize_circuit_id",
    "normalize_circuit_ids",
    "CircuitId",
    "CircuitIdCanonicalizer",
    "CanonicalizationResult",
    "canonicalize",
]
