import base64

import cv2
import numpy as np
import pytest

from fibermap_ocr.extraction.domain.exceptions import ImageDecodingError
from fibermap_ocr.extraction.pre_ocr.image_decoder import (
    SourceKind,
    decode_bytes,
    decode_image,
    parse_data_url,
)
from fibermap_ocr.extraction.pre_ocr.image_encoder import ImageEncoder


@pytest.fixture
def binary_image():
    """Fixture: 3-channel black and white image (as the pipeline emits)."""
    image = np.full((30, 40, 3), 255, dtype=np.uint8)
    image[10:20, 5:35] = 0
    return image


def test_encode_returns_png(binary_image):
    """Test: encode produces PNG bytes."""
    encoded = ImageEncoder.encode(binary_image)

    assert isinstance(encoded, bytes)
    assert encoded[:4] == b"\x89PNG"


def test_png_is_lossless(binary_image):
    """Test: binarized strokes survive encoding pixel for pixel."""
    decoded = decode_bytes(ImageEncoder.encode(binary_image))

    assert np.array_equal(decoded, binary_image)


def test_to_data_url_prefix(binary_image):
    """Test: data URLs carry the PNG mime type and base64 marker."""
    data_url = ImageEncoder.to_data_url(ImageEncoder.encode(binary_image))

    assert data_url.startswith("data:image/png;base64,")


def test_encode_as_mirrors_source_kind(binary_image):
    """Test: data URL in -> data URL out; bytes and path -> bytes."""
    assert isinstance(ImageEncoder.encode_as(binary_image, SourceKind.DATA_URL), str)
    assert isinstance(ImageEncoder.encode_as(binary_image, SourceKind.BYTES), bytes)
    assert isinstance(ImageEncoder.encode_as(binary_image, SourceKind.PATH), bytes)


def test_parse_data_url_returns_mime_and_payload():
    """Test: mime type and decoded payload are split out."""
    mime, payload = parse_data_url("data:image/jpeg;base64," + base64.b64encode(b"abc").decode())

    assert mime == "image/jpeg"
    assert payload == b"abc"


def test_parse_data_url_requires_base64():
    """Test: percent-encoded data URLs are rejected."""
    with pytest.raises(ImageDecodingError):
        parse_data_url("data:image/png,rawtext")


def test_parse_data_url_rejects_malformed():
    """Test: a string without the comma separator is not a data URL."""
    with pytest.raises(ImageDecodingError):
        parse_data_url("data:image/png;base64")


def test_decode_image_from_data_url(binary_image):
    """Test: data URL sources decode to the same pixels."""
    success, buffer = cv2.imencode(".png", binary_image)
    data_url = "data:image/png;base64," + base64.b64encode(buffer.tobytes()).decode("ascii")

    decoded = decode_image(data_url)

    assert decoded.source_kind == SourceKind.DATA_URL
    assert decoded.mime_type == "image/png"
    assert (decoded.width, decoded.height) == (40, 30)
    assert np.array_equal(decoded.image, binary_image)


def test_decode_image_data_url_with_garbage_payload():
    """Test: a well-formed data URL whose payload is not an image fails to decode."""
    data_url = "data:image/png;base64," + base64.b64encode(b"not an image").decode()

    with pytest.raises(ImageDecodingError):
        decode_image(data_url)


def test_decode_image_rejects_unsupported_type():
    """Test: sources other than bytes / str / Path are refused."""
    with pytest.raises(ImageDecodingError):
        decode_image(12345)
