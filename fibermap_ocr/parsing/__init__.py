"""
Parsing domain: post-OCR text handling.

Turns recognized label text into canonical circuit IDs ("prefix,start-end").
"""

from .circuit_id import (
    CircuitId,
    CircuitIdCanonicalizer,
    CircuitIdCleaner,
    canonicalize,
    clean_ocr_text,
    normalize_circuit_id,
    normalize_circuit_ids,
)
from .domain import CircuitIdFormatError, UnparseableLineError

__all__ = [
    "CircuitId",
    "CircuitIdCanonicalizer",
    "CircuitIdCleaner",
    "canonicalize",
    "clean_ocr_text",
    "normalize_circuit_id",
    "normalize_circuit_ids",
    "CircuitIdFormatError",
    "UnparseableLineError",
]
