import pytest
from pydantic import ValidationError

from fibermap_ocr.domain.contracts import (
    ContractValidationError,
    PreprocessConfig,
    RecognitionResult,
    RecognizedLine,
)


# ============================================================================
# PreprocessConfig
# ============================================================================

def test_default_config_values():
    """Test: defaults match the documented pipeline knobs."""
    config = PreprocessConfig()

    assert config.min_width == 1500
    assert config.contrast_factor == 1.5
    assert config.threshold_block_size == 15
    assert config.threshold_constant == 10
    assert config.sharpen_enabled is True
    assert config.threshold_enabled is True


@pytest.mark.parametrize("block_size", [2, 14, 0])
def test_block_size_must_be_odd_and_positive(block_size):
    """Test: an even or zero threshold window is rejected."""
    with pytest.raises(ValidationError):
        PreprocessConfig(threshold_block_size=block_size)


@pytest.mark.parametrize("field,value", [
    ("min_width", 0),
    ("contrast_factor", 0),
    ("contrast_factor", -1.5),
    ("contrast_factor", float("nan")),
    ("threshold_constant", float("inf")),
])
def test_invalid_knobs_rejected(field, value):
    """Test: out-of-range knobs fail validation."""
    with pytest.raises(ValidationError):
        PreprocessConfig(**{field: value})


def test_config_is_frozen():
    """Test: a config cannot be changed after creation."""
    config = PreprocessConfig()

    with pytest.raises(ValidationError):
        config.min_width = 10


def test_from_mapping_rejects_unknown_keys():
    """Test: a misspelled knob is reported, not silently ignored."""
    with pytest.raises(ContractValidationError) as exc_info:
        PreprocessConfig.from_mapping({"min_widht": 1000})

    assert "min_widht" in str(exc_info.value)


def test_from_mapping_wraps_validation_errors():
    """Test: pydantic errors surface as ContractValidationError."""
    with pytest.raises(ContractValidationError) as exc_info:
        PreprocessConfig.from_mapping({"threshold_block_size": 4})

    assert exc_info.value.contract_name == "PreprocessConfig"


def test_from_yaml_nested_section(tmp_path):
    """Test: knobs under a preprocessing: key are loaded, the rest keep defaults."""
    config_path = tmp_path / "site.yaml"
    config_path.write_text(
        "preprocessing:\n"
        "  min_width: 1200\n"
        "  sharpen_enabled: false\n",
        encoding="utf-8"
    )

    config = PreprocessConfig.from_yaml(config_path)

    assert config.min_width == 1200
    assert config.sharpen_enabled is False
    assert config.threshold_block_size == 15


def test_from_yaml_top_level_keys(tmp_path):
    """Test: knobs may also sit at the top level of the file."""
    config_path = tmp_path / "site.yaml"
    config_path.write_text("contrast_factor: 2.0\n", encoding="utf-8")

    assert PreprocessConfig.from_yaml(config_path).contrast_factor == 2.0


def test_from_yaml_empty_file_gives_defaults(tmp_path):
    """Test: an empty file means all defaults."""
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")

    assert PreprocessConfig.from_yaml(config_path) == PreprocessConfig()


def test_from_yaml_rejects_non_mapping(tmp_path):
    """Test: a YAML list is not a config."""
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- 1\n- 2\n", encoding="utf-8")

    with pytest.raises(ContractValidationError):
        PreprocessConfig.from_yaml(config_path)


# ============================================================================
# Recognition output
# ============================================================================

def test_confidence_must_be_a_fraction():
    """Test: a percentage instead of [0, 1] confidence is rejected."""
    with pytest.raises(ValidationError):
        RecognizedLine(text="BR021,365-372", confidence=87)


def test_recognition_result_text_and_confidence():
    """Test: lines are joined with newlines; mean confidence is averaged."""
    result = RecognitionResult(
        engine="paddle",
        lines=[
            RecognizedLine(text="BR021,365-372", confidence=0.9),
            RecognizedLine(text="G 1 10", confidence=0.5),
        ]
    )

    assert result.text == "BR021,365-372\nG 1 10"
    assert result.mean_confidence == pytest.approx(0.7)
    assert [line.text for line in result.confident_lines(0.6)] == ["BR021,365-372"]


def test_empty_recognition_result():
    """Test: no lines means empty text and zero confidence."""
    result = RecognitionResult(engine="tesseract")

    assert result.text == ""
    assert result.mean_confidence == 0.0


def test_engine_name_required():
    """Test: every result names the engine that produced it."""
    with pytest.raises(ValidationError):
        RecognitionResult(engine="")
