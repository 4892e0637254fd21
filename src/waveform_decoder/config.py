"""Configuration management for the waveform decoder."""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Precision(enum.IntEnum):
    """Downsampling level; the value is the stride (keep 1 of every N samples).

    A two minute 44.1 kHz mp3 decodes to well over five million samples at
    :attr:`MAX`, which is heavy for plotting.
    """

    ULTRALOW = 5000
    LOW = 1000
    MEDIUM = 500
    HIGH = 100
    MAX = 1

    @property
    def stride(self) -> int:
        return int(self.value)

    @classmethod
    def parse(cls, value: Union["Precision", int, str]) -> "Precision":
        """Return the member matching a member, a stride or a name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(
                    "precision must be one of: "
                    + ", ".join(member.name.lower() for member in cls)
                ) from None
        return cls(value)


class ProbeOptions(BaseModel):
    """Options forwarded to the container probe."""

    model_config = ConfigDict(frozen=True)

    format_hint: str = Field(default="mp3", description="Advisory container format")
    enable_gapless: bool = Field(
        default=True, description="Trim encoder delay and padding"
    )
    enforce_hint: bool = Field(
        default=False,
        description="Open with the hinted demuxer only instead of sniffing content",
    )


class DecoderConfig(BaseModel):
    """Settings for a single :class:`~waveform_decoder.decoder.Decoder`."""

    model_config = ConfigDict(frozen=True)

    packets_limit: int = Field(
        default=100000,
        gt=0,
        description="Stop successfully once the packet count exceeds this value",
    )
    precision: Precision = Field(
        default=Precision.MAX, description="Downsampling stride applied per packet"
    )
    probe: ProbeOptions = Field(default_factory=ProbeOptions)

    @field_validator("precision", mode="before")
    @classmethod
    def _parse_precision(cls, value: object) -> Precision:
        return Precision.parse(value)  # type: ignore[arg-type]

    @classmethod
    def default(cls) -> "DecoderConfig":
        return cls()

    @classmethod
    def from_file(cls, path: Path) -> "DecoderConfig":
        """Load configuration from a YAML file."""

        data = yaml.safe_load(path.read_text()) or {}
        return cls(**data)


DEFAULT_CONFIG = DecoderConfig()


def load_config(path: Optional[Path]) -> DecoderConfig:
    """Load configuration from *path* or return :data:`DEFAULT_CONFIG`."""

    if path is None:
        return DEFAULT_CONFIG
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return DecoderConfig.from_file(path)
