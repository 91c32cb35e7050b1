"""Command-line interface for tormeta.

Provides commands to inspect torrent files, dump their decoded structure and
edit the announce URL list in place.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tormeta import __version__
from tormeta.config.config import init_config
from tormeta.core.bencode import to_native
from tormeta.core.descriptor import TorrentDescriptor
from tormeta.models import Config, FileEntry, LogLevel
from tormeta.storage import load_descriptor, save_descriptor
from tormeta.utils.exceptions import ConfigurationError, TormetaError
from tormeta.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _format_size(size: int) -> str:
    value = float(size)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{size} B"  # pragma: no cover


def _get_config(ctx: click.Context) -> Config:
    return ctx.obj["config"]


def _load(ctx: click.Context, path: str, strict: bool | None = None) -> TorrentDescriptor:
    """Load a descriptor using the codec settings from the active config."""
    codec = _get_config(ctx).codec
    try:
        return load_descriptor(
            path,
            strict=codec.strict if strict is None else strict,
            max_depth=codec.max_depth,
        )
    except TormetaError as e:
        raise click.ClickException(str(e)) from e


def _save(descriptor: TorrentDescriptor, path: str) -> None:
    try:
        save_descriptor(descriptor, path)
    except TormetaError as e:
        raise click.ClickException(str(e)) from e


def _jsonable(value: Any) -> Any:
    """Make a native bencode tree JSON-serialisable.

    Byte strings that are valid UTF-8 become text; anything else becomes
    ``{"hex": "..."}``.
    """
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return {"hex": value.hex()}
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {
            key.decode("utf-8", errors="backslashreplace"): _jsonable(item)
            for key, item in value.items()
        }
    return value


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a tormeta.toml configuration file",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)")
@click.version_option(__version__, prog_name="tormeta")
@click.pass_context
def cli(ctx: click.Context, config: str | None, verbose: int) -> None:
    """Inspect and edit BitTorrent metainfo files."""
    ctx.ensure_object(dict)
    try:
        config_manager = init_config(config)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    cfg = config_manager.config
    if verbose:
        # -v=INFO, -vv=DEBUG; only the console session is affected
        level = LogLevel.DEBUG if verbose > 1 else LogLevel.INFO
        setup_logging(cfg.observability.model_copy(update={"log_level": level}))
    ctx.obj["config"] = cfg


@cli.command()
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def show(ctx: click.Context, torrent_file: str) -> None:
    """Show a summary of a torrent file."""
    descriptor = _load(ctx, torrent_file)
    console = Console()
    try:
        entries = descriptor.get_files()
        console.print(f"[bold]Name:[/bold] {escape(descriptor.name)}")
        console.print(f"[bold]Info hash:[/bold] {descriptor.info_hash().hex()}")
        console.print(
            f"[bold]Total size:[/bold] {_format_size(sum(f.size for f in entries))}"
        )
    except TormetaError as e:
        raise click.ClickException(str(e)) from e

    try:
        urls = descriptor.get_announce_list()
    except TormetaError as e:
        logger.info("No usable announce list: %s", e)
        urls = []
    console.print(f"[bold]Announce URLs ({len(urls)}):[/bold]")
    for url in urls:
        console.print(f"  {url.decode('utf-8', errors='replace')}", markup=False)

    console.print(_files_table(entries))


def _files_table(entries: list[FileEntry]) -> Table:
    table = Table(title="Files")
    table.add_column("Path", overflow="fold")
    table.add_column("Size", justify="right")
    for entry in entries:
        table.add_row(entry.path, _format_size(entry.size))
    return table


@cli.command()
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def files(ctx: click.Context, torrent_file: str) -> None:
    """List the files described by a torrent."""
    descriptor = _load(ctx, torrent_file)
    try:
        entries = descriptor.get_files()
    except TormetaError as e:
        raise click.ClickException(str(e)) from e
    Console().print(_files_table(entries))


@cli.command()
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--strict", is_flag=True, help="Reject trailing data after the root value")
@click.pass_context
def dump(ctx: click.Context, torrent_file: str, strict: bool) -> None:
    """Print the decoded structure of a bencoded file as JSON."""
    descriptor = _load(ctx, torrent_file, strict=True if strict else None)
    click.echo(json.dumps(_jsonable(to_native(descriptor.root)), indent=2))


@cli.group()
def announce() -> None:
    """Read and edit the announce URL list."""


@announce.command("list")
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def announce_list(ctx: click.Context, torrent_file: str) -> None:
    """Print announce URLs, one per line."""
    descriptor = _load(ctx, torrent_file)
    try:
        urls = descriptor.get_announce_list()
    except TormetaError as e:
        raise click.ClickException(str(e)) from e
    for url in urls:
        click.echo(url.decode("utf-8", errors="replace"))


def _write_back(descriptor: TorrentDescriptor, torrent_file: str, output: str | None) -> Path:
    target = Path(output or torrent_file)
    _save(descriptor, str(target))
    return target


@announce.command("add")
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("urls", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file instead")
@click.pass_context
def announce_add(
    ctx: click.Context, torrent_file: str, urls: tuple[str, ...], output: str | None
) -> None:
    """Append announce URLs that are not already present."""
    descriptor = _load(ctx, torrent_file)
    try:
        added = descriptor.append_announce_urls(urls)
    except TormetaError as e:
        raise click.ClickException(str(e)) from e

    console = Console()
    if not added and output is None:
        console.print("[yellow]All URLs already present; file unchanged[/yellow]")
        return
    target = _write_back(descriptor, torrent_file, output)
    logger.info("Added %d announce URL(s) to %s", added, target)
    console.print(f"[green]Added {added} URL(s), wrote {target}[/green]")


@announce.command("set")
@click.argument("torrent_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("urls", nargs=-1)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write to this file instead")
@click.pass_context
def announce_set(
    ctx: click.Context, torrent_file: str, urls: tuple[str, ...], output: str | None
) -> None:
    """Replace the announce list with the given URLs."""
    descriptor = _load(ctx, torrent_file)
    descriptor.set_announce_list(urls)
    target = _write_back(descriptor, torrent_file, output)
    logger.info("Replaced announce list of %s", target)
    Console().print(f"[green]Announce list set to {len(urls)} URL(s), wrote {target}[/green]")


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
