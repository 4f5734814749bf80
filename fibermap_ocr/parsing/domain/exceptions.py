"""
Exceptions for the Parsing domain.
"""

from typing import List, Optional, Tuple


class CircuitIdFormatError(ValueError):
    """Text is not a canonical ``prefix,start-end`` circuit ID."""

    def __init__(self, text: str, reason: Optional[str] = None):
        self.text = text
        self.reason = reason
        msg = f"Not a canonical circuit ID: {text!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class UnparseableLineError(CircuitIdFormatError):
    """
    Strict cleaning met lines with no recoverable circuit ID.

    ``rejected`` lists every such (line number, text); ``line_number`` and
    ``text`` describe the first one.
    """

    def __init__(self, rejected: List[Tuple[int, str]]):
        self.rejected = list(rejected)
        self.line_number, first_text = self.rejected[0]
        numbers = ", ".join(str(number) for number, _ in self.rejected)
        super().__init__(first_text, reason=f"no recoverable circuit ID on line(s) {numbers}")
