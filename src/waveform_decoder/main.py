"""CLI entrypoint for decoding a file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import yaml
from pydantic import ValidationError

from .config import DecoderConfig, Precision, load_config
from .decoder import Decoder
from .errors import DecoderError

LOGGER = logging.getLogger("waveform_decoder")


def _apply_cli_overrides(
    config: DecoderConfig, precision: str | None, packets_limit: int | None
) -> DecoderConfig:
    data = config.model_dump()
    if precision is not None:
        data["precision"] = precision
    if packets_limit is not None:
        data["packets_limit"] = packets_limit
    return DecoderConfig.model_validate(data)


def _configure_logging(level: str) -> None:
    LOGGER.setLevel(level.upper())
    if not LOGGER.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        LOGGER.addHandler(handler)
    LOGGER.propagate = False


def _write_samples(samples: np.ndarray, output: Path) -> None:
    if output.suffix == ".npy":
        np.save(output, samples)
    else:
        output.write_bytes(samples.astype("<i2").tobytes())


def app(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Decode an mp3 file into 16-bit PCM samples")
    parser.add_argument("path", type=Path, help="Audio file to decode")
    parser.add_argument("--config", type=Path, default=None, help="Path to configuration YAML")
    parser.add_argument(
        "--precision",
        choices=[member.name.lower() for member in Precision],
        default=None,
        help="Override precision from config",
    )
    parser.add_argument("--packets-limit", type=int, default=None, help="Override packet limit from config")
    parser.add_argument("--output", type=Path, default=None, help="Write samples to raw PCM or .npy")
    parser.add_argument("--log-level", default="info", help="Logging level")
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        config = load_config(args.config)
        config = _apply_cli_overrides(config, args.precision, args.packets_limit)
    except (FileNotFoundError, ValidationError, yaml.YAMLError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    try:
        samples = Decoder(args.path, config).decode()
    except DecoderError as exc:
        print(f"Decode failed: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        _write_samples(samples, args.output)
        LOGGER.info("wrote %d samples to %s", samples.size, args.output)
    else:
        print(f"{samples.size} samples: {samples[:10].tolist()}")
    return 0


def main() -> None:
    sys.exit(app())


if __name__ == "__main__":  # pragma: no cover
    main()
