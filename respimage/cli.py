"""CLI commands for respimage."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn
from rich.table import Table

from respimage.errors import ResponsiveImageError, UnknownPresetError
from respimage.responsive import ResponsiveImage
from respimage.thumbnails import BatchResult
from respimage.thumbnails.batch import ProgressCallback

console = Console()
err_console = Console(stderr=True)

EXIT_DATAERR = 65


def get_responsive_image(config: str) -> ResponsiveImage:
    return ResponsiveImage.from_yaml(Path(config))


@click.group()
@click.option("--config", "-c", default="./respimage.yaml", help="Config file (YAML)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config: str, verbose: bool) -> None:
    """respimage - Responsive image thumbnail CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console)],
        )
    ctx.ensure_object(dict)
    try:
        ctx.obj["ri"] = get_responsive_image(config)
    except FileNotFoundError as e:
        err_console.print(f"[red]{e}[/red]")
        ctx.exit(1)
    except (ValidationError, yaml.YAMLError) as e:
        err_console.print(f"[red]Invalid config file {config}:[/red]\n{e}")
        ctx.exit(1)


def _run_batch(
    action: str,
    preset: str | None,
    run: Callable[[str | None, ProgressCallback], BatchResult],
) -> BatchResult:
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
    ) as progress:
        tasks: dict[str, int] = {}

        def on_progress(name: str, completed: int, total: int) -> None:
            if name not in tasks:
                tasks[name] = progress.add_task(f"{action} preset `{name}`", total=total)
            progress.update(tasks[name], completed=completed)

        return run(preset, on_progress)


def _report(result: BatchResult, done: str) -> None:
    for name, count in result.processed.items():
        console.print(f"[green]{name}: {done} {count}[/green]")

    if result.errors:
        for preset, file, error in result.errors[:5]:
            err_console.print(f"[red]  Error: {preset}: {file}: {error}[/red]")
        if len(result.errors) > 5:
            err_console.print(f"[red]  ... and {len(result.errors) - 5} more[/red]")
        err_console.print(f"[red]Failed: {result.failed}[/red]")


@main.command()
@click.argument("preset", required=False)
@click.option("--force/--no-force", default=True, help="Regenerate existing thumbnails")
@click.pass_context
def generate(ctx: click.Context, preset: str | None, force: bool) -> None:
    """Generate thumbnails for all presets or a single PRESET."""
    ri: ResponsiveImage = ctx.obj["ri"]

    try:
        result = _run_batch(
            "Generating",
            preset,
            lambda name, cb: ri.generate(name, force=force, progress_callback=cb),
        )
    except UnknownPresetError as e:
        err_console.print(f"[red]Data format error: {e}[/red]")
        err_console.print("Aborting.")
        ctx.exit(EXIT_DATAERR)
    except ResponsiveImageError as e:
        err_console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    _report(result, "generated")
    if not result.ok:
        ctx.exit(1)


@main.command()
@click.argument("preset", required=False)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def flush(ctx: click.Context, preset: str | None, yes: bool) -> None:
    """Delete generated thumbnails of all presets or a single PRESET."""
    ri: ResponsiveImage = ctx.obj["ri"]

    if not yes:
        msg = f"Flush thumbnails of preset {preset}" if preset else "Flush all thumbnails"
        if not click.confirm(msg + "?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    try:
        result = _run_batch(
            "Flushing",
            preset,
            lambda name, cb: ri.flush(name, progress_callback=cb),
        )
    except UnknownPresetError as e:
        err_console.print(f"[red]Data format error: {e}[/red]")
        err_console.print("Aborting.")
        ctx.exit(EXIT_DATAERR)
    except ResponsiveImageError as e:
        err_console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    _report(result, "deleted")
    if not result.ok:
        ctx.exit(1)


@main.command()
@click.pass_context
def presets(ctx: click.Context) -> None:
    """List configured presets."""
    ri: ResponsiveImage = ctx.obj["ri"]

    try:
        items = ri.get_presets()
    except ResponsiveImageError as e:
        err_console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    table = Table(title="Presets")
    table.add_column("Name", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Quality", justify="right")
    table.add_column("Breakpoints")
    table.add_column("Target", style="dim")

    for name, p in sorted(items.items()):
        quality = str(p.quality) if p.quality > 0 else f"{ri.config.default_quality} (default)"
        low = str(p.breakpoint_min) if p.has_breakpoint_min else ""
        high = str(p.breakpoint_max) if p.has_breakpoint_max else ""
        table.add_row(name, f"{p.width}x{p.height}", quality, f"{low}-{high}", p.target_path)

    console.print(table)


@main.command()
@click.argument("file")
@click.argument("preset")
@click.option("--force", "-f", is_flag=True, help="Regenerate even if it exists")
@click.pass_context
def thumbnail(ctx: click.Context, file: str, preset: str, force: bool) -> None:
    """Create a single thumbnail of FILE for PRESET and print its reference."""
    ri: ResponsiveImage = ctx.obj["ri"]

    try:
        reference = ri.get_thumbnail(file, preset, force=force)
    except ResponsiveImageError as e:
        err_console.print(f"[red]{e}[/red]")
        ctx.exit(1)

    click.echo(reference)


if __name__ == "__main__":
    main()
