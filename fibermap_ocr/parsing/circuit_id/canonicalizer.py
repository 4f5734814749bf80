"""
Circuit ID canonicalizer: cleaner + normalizer in one call.

OCR text in, list of canonical "prefix,start-end" strings out. Lines are
independent: a noisy line is dropped (or reported in strict mode) without
affecting the others.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from .cleaner import CircuitIdCleaner
from .normalizer import normalize_circuit_id


@dataclass
class CanonicalizationResult:
    """Canonical IDs plus the lines that could not be used."""
    circuit_ids: List[str] = field(default_factory=list)
    rejected: List[Tuple[int, str]] = field(default_factory=list)


class CircuitIdCanonicalizer:
    """Runs CircuitIdCleaner then normalize_circuit_id on every surviving line."""

    def __init__(self, cleaner: Optional[CircuitIdCleaner] = None):
        self.cleaner = cleaner or CircuitIdCleaner()

    def canonicalize(self, raw_text: str) -> CanonicalizationResult:
        cleanup = self.cleaner.clean_lines(raw_text)
        circuit_ids = [normalize_circuit_id(line) for line in cleanup.lines]

        if cleanup.rejected:
            logger.warning(
                f"[CircuitIdCanonicalizer] {len(cleanup.rejected)} line(s) without a circuit ID dropped"
            )
        logger.debug(f"[CircuitIdCanonicalizer] Circuit IDs: {circuit_ids}")

        return CanonicalizationResult(circuit_ids=circuit_ids, rejected=cleanup.rejected)


def canonicalize(raw_text: str) -> List[str]:
    """Lenient canonicalization with default settings."""
    return CircuitIdCanonicalizer(CircuitIdCleaner(strict=False)).canonicalize(raw_text).circuit_ids
