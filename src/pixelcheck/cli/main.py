"""pixelcheck CLI - Main entry point.

Provides commands for comparing style values and for capturing elements,
regions or the full viewport of a web page.

Exit codes:
    0: Success
    1: Mismatch or failed selection
    2: Usage or configuration error
    3: Capture surface unavailable
"""

import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

import click

from ..capture_exceptions import CaptureUnavailable
from ..compare.comparator import compare_values
from ..compare.properties import compare_samples, samples_from_mapping
from ..config import get_settings
from ..logging import setup_logging
from ..model.geometry import PageRect
from ..model.properties import PropertyOrigin
from ..model.screenshot import Screenshot
from ..model.selection import FullSurfaceTarget, RegionTarget, SelectionMode, SelectionTarget
from .formatters import format_capture, format_comparison, format_comparisons

# Exit codes
EXIT_SUCCESS = 0
EXIT_MISMATCH = 1
EXIT_CONFIG_ERROR = 2
EXIT_CAPTURE_UNAVAILABLE = 3

FORMAT_OPTION = click.option(
    "--format",
    "format_type",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)


def configure_logging(verbose: bool) -> None:
    """Console logging on stderr; debug level when verbose."""
    setup_logging(level="DEBUG" if verbose else "WARNING", structured=False, colorize=False)


def parse_region(value: str) -> PageRect:
    """Parse ``X,Y,W,H`` into a page rectangle."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 4:
        raise click.BadParameter("expected X,Y,W,H", param_hint="--region")
    try:
        x, y, width, height = (float(part) for part in parts)
        return PageRect(x, y, width, height)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--region") from e


def parse_viewport(value: str) -> tuple[int, int]:
    """Parse ``WxH`` into a viewport size."""
    width, sep, height = value.lower().partition("x")
    if not sep:
        raise click.BadParameter("expected WIDTHxHEIGHT", param_hint="--viewport")
    try:
        return int(width), int(height)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--viewport") from e


def load_property_file(path: Path) -> dict[str, Any] | None:
    """Load a JSON file with ``implementation`` and ``reference`` property maps.

    Returns:
        Parsed data, or None if the file is unusable (an error is printed)
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        click.echo(f"Error: Invalid JSON in {path}: {e}", err=True)
        return None
    except OSError as e:
        click.echo(f"Error reading {path}: {e}", err=True)
        return None

    for key in ("implementation", "reference"):
        if not isinstance(data, dict) or not isinstance(data.get(key), dict):
            click.echo(f"Error: {path} must contain an object under '{key}'", err=True)
            return None
    return data


@click.group()
@click.version_option(prog_name="pixelcheck")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """pixelcheck - pixel-accurate element capture and style comparison."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


@main.command()
@click.argument("left")
@click.argument("right")
@FORMAT_OPTION
def compare(left: str, right: str, format_type: str) -> None:
    """Compare one implementation value with one reference value.

    LEFT: Implementation value, e.g. "16px" or "rgb(59, 130, 246)"

    RIGHT: Reference value, e.g. "16" or "#3b82f6"
    """
    result = compare_values(left, right)
    click.echo(format_comparison(left, right, result, format_type))
    sys.exit(EXIT_SUCCESS if result.is_match else EXIT_MISMATCH)


@main.command("compare-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@FORMAT_OPTION
def compare_file(path: Path, format_type: str) -> None:
    """Compare every property shared by the two maps in a JSON file.

    PATH: JSON file shaped like {"implementation": {...}, "reference": {...}}
    """
    data = load_property_file(path)
    if data is None:
        sys.exit(EXIT_CONFIG_ERROR)

    comparisons = compare_samples(
        samples_from_mapping(data["implementation"], PropertyOrigin.IMPLEMENTATION),
        samples_from_mapping(data["reference"], PropertyOrigin.REFERENCE),
    )
    click.echo(format_comparisons(comparisons, format_type))
    all_match = all(c.result.is_match for c in comparisons)
    sys.exit(EXIT_SUCCESS if all_match else EXIT_MISMATCH)


def write_screenshots(screenshots: list[Screenshot], out_dir: Path) -> list[str]:
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    paths = []
    for shot in screenshots:
        suffix = "_highlighted" if shot.highlighted else ""
        path = out_dir / f"{shot.kind.value}_{stamp}{suffix}.png"
        path.write_bytes(shot.to_png())
        paths.append(str(path))
    return paths


@main.command()
@click.argument("url")
@click.option("--selector", help="CSS selector of the element to capture")
@click.option("--region", help="Page region to capture as X,Y,W,H")
@click.option("--full", is_flag=True, help="Capture the whole visible viewport")
@click.option(
    "--pick",
    type=click.Choice(["element", "region"]),
    help="Open a browser window and select interactively",
)
@click.option(
    "--out",
    "out_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("captures"),
    show_default=True,
    help="Directory for PNG files",
)
@click.option("--viewport", default="1280x720", show_default=True, help="Viewport as WxH")
@click.option("--scale", default=1.0, show_default=True, type=float, help="Device pixel ratio")
@click.option(
    "--properties",
    "properties_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Also write the element's computed style properties to this JSON file",
)
@click.option("--timeout", default=120.0, show_default=True, help="Seconds to wait for --pick")
@FORMAT_OPTION
def capture(
    url: str,
    selector: str | None,
    region: str | None,
    full: bool,
    pick: str | None,
    out_dir: Path,
    viewport: str,
    scale: float,
    properties_path: Path | None,
    timeout: float,
    format_type: str,
) -> None:
    """Capture part of a web page with the tool UI removed.

    URL: Page to open
    """
    chosen = [name for name, value in (("--selector", selector), ("--region", region),
                                       ("--full", full), ("--pick", pick)) if value]
    if len(chosen) != 1:
        click.echo("Error: choose exactly one of --selector, --region, --full, --pick", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    if scale <= 0:
        click.echo("Error: --scale must be positive", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    try:
        size = parse_viewport(viewport)
        target: SelectionTarget | None = None
        if region:
            target = RegionTarget(parse_region(region))
        elif full:
            target = FullSurfaceTarget()
    except click.BadParameter as e:
        click.echo(f"Error: {e.format_message()}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    from .browser import CaptureJob, run_capture

    job = CaptureJob(
        url=url,
        viewport=size,
        scale=scale,
        target=target,
        selector=selector,
        pick=SelectionMode(pick) if pick else None,
        properties_path=properties_path,
        timeout=timeout,
    )

    try:
        screenshots = asyncio.run(run_capture(job, get_settings()))
    except CaptureUnavailable as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CAPTURE_UNAVAILABLE)

    if not screenshots:
        click.echo("Error: nothing was selected", err=True)
        sys.exit(EXIT_MISMATCH)

    paths = write_screenshots(screenshots, out_dir)
    click.echo(format_capture(paths, screenshots[0].page_metadata.to_dict(), format_type))
    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
