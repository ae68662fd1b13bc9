"""CLI entry point for twenty-twenty."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from PIL import Image, UnidentifiedImageError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from twenty_twenty.artifacts.writer import write_image
from twenty_twenty.decoder.frame_decoder import decode_frame
from twenty_twenty.errors import TwentyTwentyError
from twenty_twenty.models.config import ENV_VAR, AssertConfig
from twenty_twenty.models.image import RasterImage
from twenty_twenty.orchestrator import check_image

console = Console()

EXIT_MISMATCH = 1
EXIT_FATAL = 2


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Visual regression checks for images and H.264 frames"""
    setup_logging(verbose)


@cli.command()
@click.argument("baseline", type=click.Path(dir_okay=False))
@click.argument("actual", type=click.Path(exists=True, dir_okay=False))
@click.option("--threshold", "-t", default=0.9, show_default=True, help="Minimum permissible similarity")
def compare(baseline: str, actual: str, threshold: float) -> None:
    """Compare ACTUAL against the BASELINE image using the mode from the environment."""
    cfg = AssertConfig.from_env()
    try:
        with Image.open(actual) as img:
            img.load()
            actual_image = RasterImage.from_pil(img)
        outcome = check_image(baseline, actual_image, threshold, cfg)
    except (TwentyTwentyError, UnidentifiedImageError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(EXIT_FATAL)

    table = Table(title="Comparison")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Baseline", outcome.path)
    table.add_row("Mode", outcome.mode.value)
    table.add_row("Score", "-" if outcome.score is None else f"{outcome.score:.6f}")
    table.add_row("Threshold", f"{outcome.threshold}")
    verdict = "[green]pass[/green]" if outcome.passed else "[red]mismatch[/red]"
    table.add_row("Result", verdict)
    if outcome.artifact_path:
        table.add_row("Artifact", f"[blue]{outcome.artifact_path}[/blue]")
    console.print(table)

    if not outcome.passed:
        console.print(f"[red]{outcome.message}[/red]")
        sys.exit(EXIT_MISMATCH)


@cli.command()
@click.argument("frame", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", type=click.Path(dir_okay=False))
@click.option("--width", type=int, default=None, help="Scale the decoded frame to this width")
@click.option("--height", type=int, default=None, help="Scale the decoded frame to this height")
@click.option("--format", "container_format", default="h264", show_default=True, help="Input container format")
def decode(frame: str, output: str, width: int | None, height: int | None, container_format: str) -> None:
    """Decode the first frame of FRAME and write it to OUTPUT as PNG."""
    data = Path(frame).read_bytes()
    try:
        image = decode_frame(data, width=width, height=height, container_format=container_format)
        write_image(image, output)
    except TwentyTwentyError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(EXIT_FATAL)
    console.print(f"[green]Decoded {image.width}x{image.height} frame:[/green] [blue]{output}[/blue]")


@cli.command()
def mode() -> None:
    """Show the mode resolved from the environment."""
    cfg = AssertConfig.from_env()
    console.print(f"{ENV_VAR} mode: [bold]{cfg.mode.value}[/bold]")
    console.print(f"Artifacts directory: [blue]{cfg.artifacts_dir}[/blue]")


if __name__ == "__main__":
    cli()
