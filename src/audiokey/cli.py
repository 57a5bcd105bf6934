# src/audiokey/cli.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import typer
from tqdm import tqdm

from .classifier import KeyClassifier
from .key_detect import KeyDetectConfig
from .pcm_io import list_formats, load_pcm


app = typer.Typer(add_completion=False, help="Musical key detection for raw PCM audio.")

logger = logging.getLogger(__name__)


@app.callback()
def _configure(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG | INFO | WARNING | ERROR"),
):
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level {log_level!r}", param_hint="--log-level")

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


@app.command()
def detect(
    inputs: List[Path] = typer.Argument(..., help="Headerless PCM files (.pcm/.raw)"),
    frame_rate: int = typer.Option(44100, "--frame-rate", "-r", help="Frames per second"),
    channels: int = typer.Option(2, "--channels", "-c", help="Interleaved channel count"),
    sample_format: str = typer.Option("f32le", "--format", "-f", help=f"Sample format: {' | '.join(list_formats())}"),
    mono: bool = typer.Option(True, "--mono/--no-mono", help="Mix down to mono before analysis"),
    downsample: int = typer.Option(1, "--downsample", "-d", help="Keep every Nth frame before analysis (1 = off)"),
    silence_threshold: float = typer.Option(
        KeyDetectConfig.silence_threshold, "--silence-threshold", help="Peak amplitude treated as silence"
    ),
):
    """
    Detect the key of each input file and print '<path>: <key>'.
    """
    if sample_format not in list_formats():
        raise typer.BadParameter(f"expected one of {', '.join(list_formats())}", param_hint="--format")
    if frame_rate <= 0:
        raise typer.BadParameter("must be > 0", param_hint="--frame-rate")
    if channels <= 0:
        raise typer.BadParameter("must be > 0", param_hint="--channels")

    classifier = KeyClassifier(config=KeyDetectConfig(silence_threshold=silence_threshold))
    failures = 0

    for path in tqdm(inputs, desc="Analyzing", unit="file", disable=len(inputs) < 2):
        try:
            audio = load_pcm(path, frame_rate=frame_rate, channel_count=channels, sample_format=sample_format)
        except (OSError, ValueError) as e:
            typer.echo(f"{path}: error: {e}", err=True)
            failures += 1
            continue

        if audio.sample_count % channels != 0:
            logger.warning(f"{path}: {audio.sample_count} samples is not a whole number of {channels}-channel frames")

        if mono:
            audio.reduce_to_mono()
        if downsample > 1:
            audio.downsample(downsample)

        logger.info(f"{path}: {audio.frame_count} frames, {audio.duration:.2f}s")
        key = classifier.classify(audio)
        typer.echo(f"{path}: {key.label}")

    if failures:
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
