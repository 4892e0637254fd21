"""Waveform decoder package."""

from .config import DecoderConfig, Precision, ProbeOptions
from .decoder import Decoder, decode, decode_with_precision
from .errors import DecoderError
from .samples import compress

__all__ = [
    "Decoder",
    "DecoderConfig",
    "DecoderError",
    "Precision",
    "ProbeOptions",
    "compress",
    "decode",
    "decode_with_precision",
]
