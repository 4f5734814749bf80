"""
Circuit ID normalizer: whitespace form -> canonical "prefix,start-end".

The last two whitespace-separated tokens are always the fiber range; every
token before them is glued together into the prefix:

    "G 1 10"          -> "G,1-10"
    "G     1   10"    -> "G,1-10"
    "BR 21 365 372"   -> "BR21,365-372"
    "only-two 5"      -> "only-two 5"   (fewer than 3 tokens: unchanged)

An unchanged return value means "could not canonicalize", not success.
"""

from typing import Iterable, List


def normalize_circuit_id(text: str) -> str:
    """Normalizes one circuit ID; returns ``text`` unchanged if ambiguous."""
    if not text or not text.strip():
        return text

    parts = text.split()
    if len(parts) < 3:
        return text

    *prefix_parts, start, end = parts
    prefix = "".join(prefix_parts)
    return f"{prefix},{start}-{end}"


def normalize_circuit_ids(values: Iterable[str]) -> List[str]:
    """
    Normalizes a batch of user-entered IDs (e.g. one per textarea line).

    Entries are trimmed before normalizing; blank entries are dropped.
    """
    return [
        normalize_circuit_id(value.strip())
        for value in values
        if value and value.strip()
    ]
