"""
CircuitId value object.

Structured view of a canonical "prefix,start-end" string for consumers that
need the fiber range (assignment forms, fiber counters). Start and end are
kept as the original digit strings so leading zeros survive a round trip.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..domain.exceptions import CircuitIdFormatError


_CANONICAL = re.compile(r'^([A-Za-z0-9]*),([0-9]+)-([0-9]+)$')


@dataclass(frozen=True)
class CircuitId:
    """
    A canonical circuit identifier.

    ``start <= end`` is not enforced here; ``is_ascending`` lets the
    consumer decide what to do with reversed ranges.
    """
    prefix: str
    start: str
    end: str

    @classmethod
    def parse(cls, text: str) -> "CircuitId":
        """
        Parses an exact canonical string (surrounding whitespace allowed).

        Raises:
            CircuitIdFormatError: if ``text`` is not canonical
        """
        if text is None:
            raise CircuitIdFormatError("None", reason="no text")

        match = _CANONICAL.match(text.strip())
        if not match:
            raise CircuitIdFormatError(text, reason="expected prefix,start-end")

        prefix, start, end = match.groups()
        return cls(prefix=prefix, start=start, end=end)

    @classmethod
    def try_parse(cls, text: str) -> Optional["CircuitId"]:
        try:
            return cls.parse(text)
        except CircuitIdFormatError:
            return None

    @property
    def first_fiber(self) -> int:
        return int(self.start)

    @property
    def last_fiber(self) -> int:
        return int(self.end)

    @property
    def is_ascending(self) -> bool:
        return self.first_fiber <= self.last_fiber

    @property
    def fiber_count(self) -> int:
        """Fibers in the range, inclusive (0 for reversed ranges)."""
        return max(0, self.last_fiber - self.first_fiber + 1)

    def __str__(self) -> str:
        return f"{self.prefix},{self.start}-{self.end}"
