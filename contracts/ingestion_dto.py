"""
DTO contract: label ingestion -> circuit-creation form.

The only durable output of the OCR pipeline: canonical circuit IDs in the
order they were recognized on the label, plus what is needed to show the
operator where they came from.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple


@dataclass
class IngestionResult:
    """
    Result of ingesting one label image.

    Example:
        result.circuit_ids       # ["BR021,365-372", "G,1-10"]
        result.rejected_lines    # [(2, "SPLICE TRAY 4")]  -> manual review
    """

    # Canonical "prefix,start-end" strings, in reading order
    circuit_ids: List[str] = field(default_factory=list)

    # Recognized text exactly as the engine returned it (after confidence filter)
    raw_text: str = ""

    # Engine that answered ("paddle", "tesseract", "google_vision")
    engine: str = ""

    # (line number, text) of lines with no recoverable circuit ID
    rejected_lines: List[Tuple[int, str]] = field(default_factory=list)

    # Pre-OCR metadata (applied stages, sizes, timing)
    preprocessing: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_circuit_ids(self) -> bool:
        return bool(self.circuit_ids)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "circuit_ids": list(self.circuit_ids),
            "raw_text": self.raw_text,
            "engine": self.engine,
            "rejected_lines": [
                {"line": line_number, "text": text}
                for line_number, text in self.rejected_lines
            ],
            "preprocessing": {
                key: value for key, value in self.preprocessing.items()
                if key != "config"
            },
        }
