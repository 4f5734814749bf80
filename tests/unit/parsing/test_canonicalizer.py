import pytest

from fibermap_ocr.parsing import CircuitId, UnparseableLineError
from fibermap_ocr.parsing.circuit_id import (
    CircuitIdCanonicalizer,
    CircuitIdCleaner,
    canonicalize,
)


@pytest.fixture
def ocr_text():
    """Fixture: typical OCR output of a splice-tray label."""
    return (
        "FIBER MAP\n"
        "BR@21,365-372 NC\n"
        "(A,13-36) <A@5BQRT> BR@21,397-420\n"
        "B 101 150 NC\n"
        "G     1   10\n"
    )


def test_canonicalize_label_text(ocr_text):
    """Test: every recoverable line ends up as prefix,start-end in reading order."""
    assert canonicalize(ocr_text) == [
        "BR021,365-372",
        "BR021,397-420",
        "B,101-150",
        "G,1-10",
    ]


def test_every_output_is_canonical(ocr_text):
    """Test: all outputs parse as CircuitId."""
    for value in canonicalize(ocr_text):
        assert CircuitId.try_parse(value) is not None


def test_rejected_lines_reported(ocr_text):
    """Test: the header line is reported for manual review."""
    result = CircuitIdCanonicalizer().canonicalize(ocr_text)

    assert result.rejected == [(1, "FIBER MAP")]
    assert len(result.circuit_ids) == 4


def test_empty_text():
    """Test: no text, no IDs."""
    assert canonicalize("") == []


def test_strict_canonicalizer_raises(ocr_text):
    """Test: strict mode surfaces the unusable lines."""
    canonicalizer = CircuitIdCanonicalizer(CircuitIdCleaner(strict=True))

    with pytest.raises(UnparseableLineError):
        canonicalizer.canonicalize(ocr_text)
