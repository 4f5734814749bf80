"""
Circuit ID cleaner: OCR noise removal + format extraction.

Label photos come back from OCR with asides in parentheses, garbage in angle
brackets, a stray "NC" (not connected) marker and "@" where a zero was
printed. Per non-empty line, in this order:

1. Remove (...) groups
2. Remove <...> groups
3. Remove the whole word NC (any case)
4. Replace @ with 0
5. Extract the ID: comma-dash shape "BR021,365-372" anywhere in the line,
   else whitespace shape "B 101 150" at the start of the trimmed line.
   Lines matching neither are dropped (or rejected in strict mode).

Examples:
    "BR@21,365-372 NC"                      -> "BR021,365-372"
    "B 101 150 NC"                          -> "B 101 150"
    "(A,13-36) <A@5BQRT> BR@21,397-420"     -> "BR021,397-420"
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from loguru import logger

from config.settings import STRICT_CLEANING
from ..domain.exceptions import UnparseableLineError


_PARENTHESES = re.compile(r'\([^)]*\)')
_ANGLE_BRACKETS = re.compile(r'<[^>]*>')
_NC_TOKEN = re.compile(r'\bNC\b', re.IGNORECASE)

# ASCII digits only: OCR engines sometimes emit full-width or Arabic-Indic digits
_COMMA_DASH = re.compile(r'([A-Za-z0-9]+),([0-9]+)-([0-9]+)')
_WHITESPACE_SEPARATED = re.compile(r'^([A-Za-z0-9]*)\s+([0-9]+)\s+([0-9]+)')


@dataclass
class CleanupResult:
    """
    Cleaner output for one block of OCR text.

    ``lines`` are the extracted IDs in input order; ``rejected`` keeps the
    (1-based line number, original text) of every non-empty line that held
    no recoverable ID, so callers can offer them for manual correction.
    """
    lines: List[str] = field(default_factory=list)
    rejected: List[Tuple[int, str]] = field(default_factory=list)
    original_count: int = 0

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def to_dict(self) -> dict:
        return {
            "lines_count": len(self.lines),
            "original_count": self.original_count,
            "rejected_count": len(self.rejected),
        }


class CircuitIdCleaner:
    """
    Cleans OCR text down to circuit IDs, one per line.

    Args:
        strict: after every line has been cleaned, raise one
                UnparseableLineError listing the lines without an ID
                instead of dropping them
    """

    def __init__(self, strict: bool = STRICT_CLEANING):
        self.strict = strict

    @staticmethod
    def strip_noise(line: str) -> str:
        """Steps 1-4: remove asides, brackets, NC markers; fix @ -> 0."""
        line = _PARENTHESES.sub('', line)
        line = _ANGLE_BRACKETS.sub('', line)
        line = _NC_TOKEN.sub('', line)
        return line.replace('@', '0')

    @staticmethod
    def extract(line: str) -> Optional[str]:
        """
        Step 5: pulls an ID out of an already de-noised line.

        Returns:
            "prefix,start-end" (comma-dash), "prefix start end" (whitespace,
            normalized later) or None
        """
        match = _COMMA_DASH.search(line)
        if match:
            prefix, start, end = match.groups()
            return f"{prefix},{start}-{end}"

        match = _WHITESPACE_SEPARATED.match(line.strip())
        if match:
            prefix, start, end = match.groups()
            return " ".join(part for part in (prefix, start, end) if part)

        return None

    def clean_line(self, line: str) -> Optional[str]:
        """Cleans a single line; None if it holds no recoverable ID."""
        if not line or not line.strip():
            return None
        return self.extract(self.strip_noise(line))

    def clean_lines(self, text: str) -> CleanupResult:
        """
        Cleans every line of ``text`` independently.

        Lines are split on "\n" only, so numbering matches the engine's
        lines (a trailing "\r" is dropped).

        Raises:
            UnparseableLineError: strict mode only
        """
        result = CleanupResult()
        if not text or not text.strip():
            return result

        for line_number, line in enumerate(text.split("\n"), start=1):
            line = line.rstrip("\r")
            if not line.strip():
                continue

            result.original_count += 1
            cleaned = self.clean_line(line)

            if cleaned is None:
                logger.debug(f"[CircuitIdCleaner] Dropped line {line_number}: {line!r}")
                result.rejected.append((line_number, line))
                continue

            result.lines.append(cleaned)

        if self.strict and result.rejected:
            logger.error(
                f"[CircuitIdCleaner] {len(result.rejected)} line(s) without a circuit ID: "
                f"{[number for number, _ in result.rejected]}"
            )
            raise UnparseableLineError(result.rejected)

        logger.debug(
            f"[CircuitIdCleaner] {len(result.lines)}/{result.original_count} lines kept"
        )
        return result

    def clean(self, text: str) -> str:
        """Cleaned IDs joined with newlines ('' when nothing survives)."""
        return self.clean_lines(text).text


def clean_ocr_text(text: str) -> str:
    """Lenient cleaning with default settings."""
    return CircuitIdCleaner(strict=False).clean(text)
