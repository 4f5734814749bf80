"""
End-to-end ingestion: encoded label image -> preprocessing -> (stub) engine
-> canonical circuit IDs.

Real OCR engines are replaced by stubs so the test runs without models; the
preprocessing and canonicalization are the real ones.
"""

import asyncio
import base64

import cv2
import numpy as np
import pytest

from contracts import IngestionResult
from fibermap_ocr.domain.contracts import PreprocessConfig
from fibermap_ocr.extraction import IngestionComponentFactory, OCREngineSelector
from fibermap_ocr.extraction.domain.exceptions import (
    ImageDecodingError,
    RecognitionUnavailableError,
)
from fibermap_ocr.parsing import UnparseableLineError
from fibermap_ocr.extraction.infrastructure.ocr import BaseOCREngine


PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class ScriptedEngine(BaseOCREngine):
    """Returns fixed lines and remembers what it was given."""

    def __init__(self, name, lines, fail=False):
        super().__init__()
        self.name = name
        self.lines = lines
        self.fail = fail
        self.received = []

    def _load(self):
        pass

    def _recognize_lines(self, image_content):
        self.received.append(image_content)
        if self.fail:
            raise RuntimeError("engine crashed")
        return self.lines


@pytest.fixture
def label_png():
    """Fixture: synthetic label photo as PNG bytes."""
    image = np.full((150, 500, 3), 225, dtype=np.uint8)
    cv2.putText(image, "BR@21,365-372 NC", (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 1.0, (20, 20, 20), 2)
    cv2.putText(image, "G 1 10", (10, 120), cv2.FONT_HERSHEY_SIMPLEX, 1.0, (20, 20, 20), 2)
    success, buffer = cv2.imencode(".png", image)
    assert success
    return buffer.tobytes()


@pytest.fixture
def recognized_lines():
    """Fixture: what an engine reads off the label."""
    return [
        ("SPLICE TRAY 4", 0.95),
        ("BR@21,365-372 NC", 0.97),
        ("G     1   10", 0.88),
    ]


def _build_pipeline(selector, min_line_confidence=0.0, strict=False):
    return IngestionComponentFactory.create_ingestion_pipeline(
        preprocessor=IngestionComponentFactory.create_preprocessor(PreprocessConfig(min_width=1000)),
        engine_selector=selector,
        canonicalizer=IngestionComponentFactory.create_canonicalizer(strict=strict),
        min_line_confidence=min_line_confidence,
    )


def test_label_to_circuit_ids(label_png, recognized_lines):
    """Test: full pipeline yields canonical IDs in reading order."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine))

    result = asyncio.run(pipeline.ingest(label_png))

    assert isinstance(result, IngestionResult)
    assert result.circuit_ids == ["BR021,365-372", "G,1-10"]
    assert result.rejected_lines == [(1, "SPLICE TRAY 4")]
    assert result.engine == "paddle"
    assert result.has_circuit_ids


def test_engine_receives_preprocessed_png(label_png, recognized_lines):
    """Test: the engine gets the binarized, upscaled image as PNG bytes."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine))

    result = asyncio.run(pipeline.ingest(label_png))

    received = engine.received[0]
    assert received.startswith(PNG_SIGNATURE)
    decoded = cv2.imdecode(np.frombuffer(received, np.uint8), cv2.IMREAD_COLOR)
    assert decoded.shape == (300, 1000, 3)
    assert set(np.unique(decoded).tolist()) <= {0, 255}
    assert result.preprocessing["applied"][0] == "upscale"


def test_data_url_input(label_png, recognized_lines):
    """Test: data URL input is unwrapped before it reaches the engine."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine))
    data_url = "data:image/png;base64," + base64.b64encode(label_png).decode("ascii")

    result = asyncio.run(pipeline.ingest(data_url))

    assert result.circuit_ids == ["BR021,365-372", "G,1-10"]
    assert engine.received[0].startswith(PNG_SIGNATURE)


def test_fallback_engine_answers(label_png, recognized_lines):
    """Test: a crashing primary is replaced by the secondary."""
    primary = ScriptedEngine("paddle", [], fail=True)
    secondary = ScriptedEngine("tesseract", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(primary, secondary))

    result = asyncio.run(pipeline.ingest(label_png))

    assert result.engine == "tesseract"
    assert result.circuit_ids == ["BR021,365-372", "G,1-10"]


def test_no_engine_available(label_png):
    """Test: recognition failure on both engines propagates."""
    selector = OCREngineSelector(
        ScriptedEngine("paddle", [], fail=True),
        ScriptedEngine("tesseract", [], fail=True)
    )
    pipeline = _build_pipeline(selector)

    with pytest.raises(RecognitionUnavailableError):
        asyncio.run(pipeline.ingest(label_png))


def test_unreadable_image_never_reaches_engine():
    """Test: decoding failures stop the pipeline before recognition."""
    engine = ScriptedEngine("paddle", [("G 1 10", 0.9)])
    pipeline = _build_pipeline(OCREngineSelector(engine))

    with pytest.raises(ImageDecodingError):
        asyncio.run(pipeline.ingest(b"not an image"))

    assert engine.received == []


def test_low_confidence_lines_ignored(label_png):
    """Test: lines below min_line_confidence are not canonicalized."""
    engine = ScriptedEngine("paddle", [("BR021,1-12", 0.95), ("G 1 10", 0.2)])
    pipeline = _build_pipeline(OCREngineSelector(engine), min_line_confidence=0.5)

    result = asyncio.run(pipeline.ingest(label_png))

    assert result.circuit_ids == ["BR021,1-12"]
    assert result.raw_text == "BR021,1-12"


def test_batch_ingestion_isolates_failures(label_png, recognized_lines):
    """Test: one bad image in a batch does not affect the others."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine))

    batch = asyncio.run(pipeline.ingest_many([label_png, b"broken", label_png]))

    assert batch["processed"] == 3
    assert batch["success"] == 2
    assert batch["failed"] == 1
    assert isinstance(batch["results"][1], ImageDecodingError)
    assert batch["results"][0].circuit_ids == ["BR021,365-372", "G,1-10"]


def test_strict_batch_records_rejected_text_per_image(label_png, recognized_lines):
    """Test: a strict canonicalizer rejecting one image's text fails that image, not the batch."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine), strict=True)

    batch = asyncio.run(pipeline.ingest_many([label_png, b"broken"]))

    assert batch["processed"] == 2
    assert batch["success"] == 0
    assert batch["failed"] == 2
    assert isinstance(batch["results"][0], UnparseableLineError)
    assert batch["results"][0].rejected == [(1, "SPLICE TRAY 4")]
    assert isinstance(batch["results"][1], ImageDecodingError)


def test_result_serializes_without_config(label_png, recognized_lines):
    """Test: to_dict is JSON friendly and omits the config echo."""
    engine = ScriptedEngine("paddle", recognized_lines)
    pipeline = _build_pipeline(OCREngineSelector(engine))

    data = asyncio.run(pipeline.ingest(label_png)).to_dict()

    assert data["circuit_ids"] == ["BR021,365-372", "G,1-10"]
    assert data["rejected_lines"] == [{"line": 1, "text": "SPLICE TRAY 4"}]
    assert "config" not in data["preprocessing"]
