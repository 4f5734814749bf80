import pytest

from fibermap_ocr.parsing.circuit_id import (
    CircuitIdCleaner,
    normalize_circuit_id,
    normalize_circuit_ids,
)


@pytest.mark.parametrize("raw,expected", [
    ("G 1 10", "G,1-10"),
    ("G     1   10", "G,1-10"),
    ("BR 21 365 372", "BR21,365-372"),
    ("A B 1 2", "AB,1-2"),
    ("  G 1 10  ", "G,1-10"),
    ("G\t1\t10", "G,1-10"),
])
def test_whitespace_form_normalized(raw, expected):
    """Test: last two tokens are the range, everything before is the prefix."""
    assert normalize_circuit_id(raw) == expected


@pytest.mark.parametrize("raw", [
    "only-two 5",
    "BR021,365-372",
    "single",
])
def test_fewer_than_three_tokens_unchanged(raw):
    """Test: ambiguous or already canonical input is returned as-is."""
    assert normalize_circuit_id(raw) == raw


@pytest.mark.parametrize("raw", ["", "   "])
def test_blank_input_unchanged(raw):
    """Test: empty and whitespace-only input comes back unchanged."""
    assert normalize_circuit_id(raw) == raw


def test_batch_trims_and_drops_blanks():
    """Test: user-entered lists are trimmed and blank entries removed."""
    values = [" G 1 10 ", "", "   ", "BR021,1-2", "BR 21 365 372"]

    assert normalize_circuit_ids(values) == ["G,1-10", "BR021,1-2", "BR21,365-372"]


@pytest.mark.parametrize("raw", [
    "BR@21,365-372 NC",
    "B 101 150 NC",
    "(A,13-36) <A@5BQRT> BR@21,397-420",
    "G     1   10",
])
def test_clean_then_normalize_is_idempotent(raw):
    """Test: running clean + normalize on its own output changes nothing."""
    cleaner = CircuitIdCleaner(strict=False)

    once = normalize_circuit_id(cleaner.clean(raw))
    twice = normalize_circuit_id(cleaner.clean(once))

    assert once == twice
