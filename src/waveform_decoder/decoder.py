"""Packet-by-packet decoding of an audio file into 16-bit PCM."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

import numpy as np

from .codec import EndOfStream, MediaBackend, PyAVBackend
from .config import DEFAULT_CONFIG, DecoderConfig, Precision
from .errors import AudioFileNotFoundError, AudioIOError, NoAudioTrackError
from .samples import compress, to_int16

LOGGER = logging.getLogger(__name__)

PROGRESS_INTERVAL = 100


class Decoder:
    """Decode the first channel of an audio file, optionally downsampled.

    The decoder keeps no state between calls: every :meth:`decode` reopens the
    file and builds a fresh codec decoder.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        config: Optional[DecoderConfig] = None,
        backend: Optional[MediaBackend] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.file_path = str(file_path)
        self._backend = backend or PyAVBackend()

    def _open_file(self) -> BinaryIO:
        path = Path(self.file_path)
        if not path.exists():
            raise AudioFileNotFoundError(self.file_path)
        try:
            return path.open("rb")
        except OSError as exc:
            raise AudioIOError(f"Cannot open {self.file_path}: {exc}") from exc

    def decode(self) -> np.ndarray:
        """Return the decoded samples as a one-dimensional ``int16`` array.

        Raises a :class:`~waveform_decoder.errors.DecoderError` subclass on any
        failure; partially decoded samples are discarded.
        """

        config = self.config
        chunks: List[np.ndarray] = []

        with self._open_file() as handle:
            with self._backend.probe(handle, config.probe) as source:
                track = source.default_track()
                if track is None:
                    raise NoAudioTrackError(f"Audio track not found in {self.file_path}")
                LOGGER.info(
                    "track %d codec=%s format=%s rate=%d channels=%d",
                    track.index,
                    track.codec,
                    track.sample_format,
                    track.sample_rate,
                    track.channels,
                )
                decoder = source.make_decoder(track)

                packet_count = 0
                while True:
                    try:
                        packet = source.next_packet()
                    except EndOfStream:
                        break

                    samples = to_int16(decoder.decode(packet))
                    if config.precision is not Precision.MAX:
                        samples = compress(samples, config.precision)
                    chunks.append(samples)

                    packet_count += 1
                    if packet_count % PROGRESS_INTERVAL == 0:
                        LOGGER.info("analyzed %d packets", packet_count)

                    if packet_count > config.packets_limit:
                        # Corrupt files may never signal end of stream.
                        LOGGER.warning(
                            "packet count exceeded limit %d, stopping early: %s",
                            config.packets_limit,
                            self.file_path,
                        )
                        break

        LOGGER.debug("decoded %d packets from %s", packet_count, self.file_path)
        if not chunks:
            return np.empty(0, dtype=np.int16)
        return np.concatenate(chunks)


def decode(file_path: Union[str, Path]) -> np.ndarray:
    """Decode *file_path* with the default configuration."""

    return Decoder(file_path).decode()


def decode_with_precision(file_path: Union[str, Path], precision: Precision) -> np.ndarray:
    """Decode *file_path* keeping one sample out of every ``precision.stride``."""

    config = DecoderConfig(precision=precision)
    return Decoder(file_path, config).decode()


__all__ = ["Decoder", "decode", "decode_with_precision"]
