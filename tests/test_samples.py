import math

import numpy as np
import pytest

from waveform_decoder.codec import AudioBuffer
from waveform_decoder.config import Precision
from waveform_decoder.errors import UnsupportedFormatError
from waveform_decoder.samples import compress, to_int16


@pytest.mark.parametrize(
    "precision", [Precision.ULTRALOW, Precision.LOW, Precision.MEDIUM, Precision.HIGH]
)
@pytest.mark.parametrize("length", [0, 1, 99, 100, 101, 12345])
def test_compress_keeps_every_nth_sample(precision: Precision, length: int) -> None:
    samples = np.arange(length, dtype=np.int16)

    result = compress(samples, precision)

    assert len(result) == math.ceil(length / precision.stride)
    np.testing.assert_array_equal(result, samples[:: precision.stride])


def test_compress_max_is_identity() -> None:
    samples = np.array([3, -1, 4, -1, 5], dtype=np.int16)

    assert compress(samples, Precision.MAX) is samples


def test_int16_buffer_copies_first_channel() -> None:
    data = np.array([[1, -2, 3], [100, 200, 300]], dtype=np.int16)

    result = to_int16(AudioBuffer("s16", data))

    np.testing.assert_array_equal(result, [1, -2, 3])
    assert result.dtype == np.int16
    result[0] = 9
    assert data[0, 0] == 1


def test_float_buffer_is_scaled_and_truncated() -> None:
    data = np.array([[0.0, 0.5, -0.5, 1e-5, -1e-5]], dtype=np.float32)

    result = to_int16(AudioBuffer("f32", data))

    np.testing.assert_array_equal(result, [0, 16383, -16383, 0, 0])


def test_float_boundaries_stay_in_range() -> None:
    data = np.array([[1.0, -1.0, 1.5, -1.5, np.nan]], dtype=np.float32)

    result = to_int16(AudioBuffer("f32", data))

    np.testing.assert_array_equal(result, [32767, -32767, 32767, -32768, 0])


def test_other_formats_are_rejected() -> None:
    buffer = AudioBuffer("s32p", np.zeros((1, 4), dtype=np.int32))

    with pytest.raises(UnsupportedFormatError) as info:
        to_int16(buffer)

    assert info.value.sample_format == "s32p"
