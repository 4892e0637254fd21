"""Exceptions raised while decoding audio files."""

from __future__ import annotations

from typing import Optional


class DecoderError(Exception):
    """Base class for every decode failure."""


class AudioFileNotFoundError(DecoderError, FileNotFoundError):
    """Raised when the input path does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Audio file not found: {path}")
        self.path = path


class AudioIOError(DecoderError, OSError):
    """Raised when an existing input path cannot be opened."""


class FormatError(DecoderError):
    """Raised when the container cannot be probed or demuxed."""


class NoAudioTrackError(DecoderError):
    """Raised when the container has no default audio track."""


class UnsupportedCodecError(DecoderError):
    """Raised when no decoder exists for the track's codec parameters."""


class DecodeError(DecoderError):
    """Raised when a packet fails to demux or decode mid-stream."""

    def __init__(self, message: str, packet_index: Optional[int] = None):
        super().__init__(message)
        self.packet_index = packet_index


class UnsupportedFormatError(DecoderError):
    """Raised for decoded samples that are neither 16-bit integer nor 32-bit float."""

    def __init__(self, sample_format: str):
        super().__init__(f"Unsupported sample format: {sample_format}")
        self.sample_format = sample_format
