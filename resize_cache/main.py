"""Main CLI entry point for the resize cache."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from resize_cache.errors import ResizeCacheError
from resize_cache.filters import ResizeFilter
from resize_cache.services.cache import ArtifactCache
from resize_cache.services.logger_service import cleanup_old_logs, setup_logging

console = Console()
logger = logging.getLogger(__name__)

root_option = click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Site root (default: RESIZE_CACHE_ROOT_DIR or current directory)",
)


def _cache(root: Path | None) -> ArtifactCache:
    from resize_cache.config import settings

    return ArtifactCache(settings.cache_config(root_dir=root))


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = size_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)
@click.pass_context
def cli(ctx, verbose: bool):
    """
    Resize Cache - content-addressed cache for resized images.

    Derived images are named after a hash of the source content plus the
    resize options, and are only regenerated when missing or stale.
    """
    from resize_cache.config import settings

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_logging(verbose=verbose, log_to_file=settings.log_to_file, log_dir=settings.log_dir)
    if settings.log_to_file:
        cleanup_old_logs(settings.log_dir, max_age_days=settings.log_max_age_days)


@cli.command()
@click.argument("source")
@click.argument("options")
@root_option
@click.option("--baseurl", default=None, help="Prefix for the printed path (default: RESIZE_CACHE_BASEURL)")
@click.option(
    "--retries",
    default=1,
    type=click.IntRange(min=1),
    help="Producer attempts before giving up",
)
def resize(source: str, options: str, root: Path | None, baseurl: str | None, retries: int):
    """Resize SOURCE with OPTIONS ("800x800>[,format[,quality]]") and print its cached path."""
    from resize_cache.config import settings

    resize_filter = ResizeFilter(
        _cache(root),
        baseurl=settings.baseurl if baseurl is None else baseurl,
        retries=retries,
    )
    try:
        url = resize_filter.resize(source, options)
    except ResizeCacheError as e:
        console.print(f"[red]✗ {e}[/red]")
        sys.exit(1)

    click.echo(url)


@cli.command(name="list")
@root_option
def list_entries(root: Path | None):
    """List cached artifacts."""
    cache = _cache(root)
    entries = cache.entries()

    if not entries:
        console.print(f"[yellow]No cached artifacts in {cache.cache_dir}[/yellow]")
        return

    table = Table(title=f"Cached artifacts ({len(entries)})")
    table.add_column("File", style="cyan")
    table.add_column("Size", style="green", justify="right")
    table.add_column("Modified", style="yellow")

    for entry in entries:
        table.add_row(
            entry.filename,
            _format_size(entry.size_bytes),
            entry.modified_at.strftime("%Y-%m-%d %H:%M:%S"),
        )

    console.print(table)


@cli.command()
@root_option
def stats(root: Path | None):
    """Show cache directory statistics."""
    cache = _cache(root)
    disk = cache.get_stats()["disk"]

    console.print(f"\n[bold cyan]Cache:[/bold cyan] {cache.cache_dir}")
    console.print(f"  Entries: {disk['total_entries']}")
    console.print(f"  Size:    {_format_size(disk['total_bytes'])}\n")


@cli.command()
@root_option
@click.option(
    "--older-than",
    "older_than",
    required=True,
    type=click.FloatRange(min=0),
    help="Delete artifacts not modified for this many days",
)
def clean(root: Path | None, older_than: float):
    """Delete old cached artifacts."""
    cache = _cache(root)
    deleted = cache.clean(max_age_days=older_than)
    console.print(f"[green]✓ Deleted {deleted} cached artifact(s)[/green]")


if __name__ == "__main__":
    cli()
