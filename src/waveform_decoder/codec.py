"""Demuxer and codec capabilities consumed by the decoder.

The decode loop only depends on the protocols declared here. :class:`PyAVBackend`
implements them on top of PyAV (FFmpeg bindings); any other library can be
substituted by providing a compatible :class:`MediaBackend`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, List, Optional, Protocol

import av
import numpy as np

from .config import ProbeOptions
from .errors import DecodeError, FormatError, UnsupportedCodecError

LOGGER = logging.getLogger(__name__)

S16 = "s16"
F32 = "f32"

# PyAV format names (packed and planar) mapped to the tags used by the decoder.
_FORMAT_TAGS = {
    "s16": S16,
    "s16p": S16,
    "flt": F32,
    "fltp": F32,
}


class EndOfStream(Exception):
    """Raised by :meth:`MediaSource.next_packet` once the stream is exhausted."""


@dataclass(frozen=True)
class Track:
    """An audio stream inside a container."""

    index: int
    codec: str
    sample_format: str
    sample_rate: int
    channels: int


@dataclass
class AudioBuffer:
    """Decoded samples laid out as ``(channels, frames)``."""

    sample_format: str
    data: np.ndarray

    @property
    def channels(self) -> int:
        return int(self.data.shape[0])

    @property
    def frames(self) -> int:
        return int(self.data.shape[1])

    def chan(self, index: int) -> np.ndarray:
        return self.data[index]


class PacketDecoder(Protocol):
    def decode(self, packet: Any) -> AudioBuffer:
        """Decode one packet, raising :class:`DecodeError` on failure."""


class MediaSource(Protocol):
    def default_track(self) -> Optional[Track]:
        ...

    def make_decoder(self, track: Track) -> PacketDecoder:
        """Raise :class:`UnsupportedCodecError` when *track* cannot be decoded."""

    def next_packet(self) -> Any:
        """Return the next packet or raise :class:`EndOfStream`."""

    def close(self) -> None:
        ...

    def __enter__(self) -> "MediaSource":
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...


class MediaBackend(Protocol):
    def probe(self, stream: BinaryIO, options: ProbeOptions) -> MediaSource:
        """Open *stream*, raising :class:`FormatError` when it cannot be demuxed."""


def format_tag(name: str) -> str:
    """Return the decoder tag for a PyAV sample format name."""

    return _FORMAT_TAGS.get(name, name)


def frame_to_array(frame: av.AudioFrame) -> np.ndarray:
    """Return the samples of *frame* as a ``(channels, frames)`` array."""

    channels = len(frame.layout.channels)
    array = frame.to_ndarray()
    if frame.format.is_planar:
        return array.reshape(channels, -1)
    # Packed formats come back as a single interleaved row.
    return array.reshape(-1, channels).T


class PyAVPacketDecoder:
    """Decodes packets of one stream through its PyAV codec context."""

    def __init__(self, context: Any, channels: int):
        self._context = context
        self._channels = max(channels, 1)
        self._decoded = 0

    def decode(self, packet: Any) -> AudioBuffer:
        try:
            frames = self._context.decode(packet)
        except av.error.FFmpegError as exc:
            raise DecodeError(
                f"Failed to decode packet {self._decoded}: {exc}", self._decoded
            ) from exc
        self._decoded += 1

        if not frames:
            # Nothing to normalize; drained and priming packets often yield no frames.
            return AudioBuffer(S16, np.empty((self._channels, 0), dtype=np.int16))

        tag = format_tag(frames[0].format.name)
        arrays: List[np.ndarray] = [frame_to_array(frame) for frame in frames]
        data = arrays[0] if len(arrays) == 1 else np.concatenate(arrays, axis=1)
        return AudioBuffer(tag, data)


class PyAVSource:
    """A demuxed container opened with :func:`av.open`."""

    def __init__(self, container: Any, options: ProbeOptions):
        self._container = container
        self._options = options
        self._packets: Any = None
        self._demuxed = 0

    def default_track(self) -> Optional[Track]:
        streams = self._container.streams.audio
        if not streams:
            return None
        stream = streams[0]
        context = stream.codec_context
        return Track(
            index=stream.index,
            codec=context.name,
            sample_format=context.format.name if context.format is not None else "unknown",
            sample_rate=int(context.sample_rate or 0),
            channels=int(context.channels or 0),
        )

    def make_decoder(self, track: Track) -> PyAVPacketDecoder:
        stream = self._container.streams[track.index]
        context = stream.codec_context
        if not self._options.enable_gapless:
            # Keep encoder delay and padding; FFmpeg only reports them as side data.
            context.options["flags2"] = "+skip_manual"
        try:
            context.open(strict=False)
        except av.error.FFmpegError as exc:
            raise UnsupportedCodecError(
                f"Cannot open {track.codec} decoder: {exc}"
            ) from exc
        self._packets = self._container.demux(stream)
        return PyAVPacketDecoder(context, track.channels)

    def next_packet(self) -> Any:
        if self._packets is None:
            raise RuntimeError("make_decoder() must be called before next_packet()")
        try:
            packet = next(self._packets)
        except (StopIteration, av.error.EOFError):
            raise EndOfStream() from None
        except av.error.FFmpegError as exc:
            raise DecodeError(
                f"Failed to read packet {self._demuxed}: {exc}", self._demuxed
            ) from exc
        self._demuxed += 1
        return packet

    def close(self) -> None:
        self._container.close()

    def __enter__(self) -> "PyAVSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class PyAVBackend:
    """:class:`MediaBackend` backed by PyAV."""

    def probe(self, stream: BinaryIO, options: ProbeOptions) -> PyAVSource:
        fmt = options.format_hint if options.enforce_hint else None
        try:
            container = av.open(stream, mode="r", format=fmt)
        except av.error.FFmpegError as exc:
            raise FormatError(f"Cannot probe input stream: {exc}") from exc

        detected = container.format.name
        if options.format_hint not in detected.split(","):
            LOGGER.debug(
                "probed container format %s differs from hint %s",
                detected,
                options.format_hint,
            )
        return PyAVSource(container, options)


__all__ = [
    "AudioBuffer",
    "EndOfStream",
    "F32",
    "MediaBackend",
    "MediaSource",
    "PacketDecoder",
    "PyAVBackend",
    "PyAVSource",
    "S16",
    "Track",
]
