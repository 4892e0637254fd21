from pathlib import Path

import pytest
from pydantic import ValidationError

from waveform_decoder.config import DEFAULT_CONFIG, DecoderConfig, Precision, load_config


def test_precision_strides() -> None:
    assert [member.stride for member in Precision] == [5000, 1000, 500, 100, 1]


def test_precision_parse_accepts_names_and_strides() -> None:
    assert Precision.parse("High") is Precision.HIGH
    assert Precision.parse(500) is Precision.MEDIUM
    assert Precision.parse(Precision.MAX) is Precision.MAX

    with pytest.raises(ValueError):
        Precision.parse("extreme")
    with pytest.raises(ValueError):
        Precision.parse(7)


def test_default_config() -> None:
    config = DecoderConfig.default()

    assert config == DEFAULT_CONFIG
    assert config.packets_limit == 100000
    assert config.precision is Precision.MAX
    assert config.probe.format_hint == "mp3"
    assert config.probe.enable_gapless is True


def test_config_is_immutable() -> None:
    config = DecoderConfig(packets_limit=10, precision="low")

    assert config.precision is Precision.LOW
    with pytest.raises(ValidationError):
        config.packets_limit = 20


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_packets_limit_is_rejected(limit: int) -> None:
    with pytest.raises(ValidationError):
        DecoderConfig(packets_limit=limit)


def test_load_config_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "decoder.yaml"
    path.write_text("packets_limit: 250\nprecision: ultralow\nprobe:\n  enable_gapless: false\n")

    config = load_config(path)

    assert config.packets_limit == 250
    assert config.precision is Precision.ULTRALOW
    assert config.probe.enable_gapless is False


def test_load_config_defaults_and_missing_file(tmp_path: Path) -> None:
    assert load_config(None) is DEFAULT_CONFIG
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")
