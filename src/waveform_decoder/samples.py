"""Sample normalization and precision-based decimation."""

from __future__ import annotations

import numpy as np

from .codec import F32, S16, AudioBuffer
from .config import Precision
from .errors import UnsupportedFormatError

INT16_MIN = -32768
INT16_MAX = 32767


def float32_to_int16(samples: np.ndarray) -> np.ndarray:
    """Scale float PCM in [-1.0, 1.0] to int16, truncating toward zero."""

    scaled = np.nan_to_num(samples.astype(np.float32), nan=0.0) * np.float32(INT16_MAX)
    return np.clip(np.trunc(scaled), INT16_MIN, INT16_MAX).astype(np.int16)


def to_int16(buffer: AudioBuffer) -> np.ndarray:
    """Return channel 0 of *buffer* as 16-bit signed samples."""

    if buffer.sample_format == S16:
        return np.array(buffer.chan(0), dtype=np.int16)
    if buffer.sample_format == F32:
        return float32_to_int16(buffer.chan(0))
    raise UnsupportedFormatError(buffer.sample_format)


def compress(samples: np.ndarray, precision: Precision) -> np.ndarray:
    """Keep every ``precision.stride``-th sample, starting with the first."""

    stride = Precision.parse(precision).stride
    if stride == 1:
        return samples
    return samples[::stride].copy()
