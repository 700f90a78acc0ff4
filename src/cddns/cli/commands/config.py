"""Configuration commands."""

import json
from pathlib import Path
from typing import Callable, TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cddns.cli.commands import resolve_opts
from cddns.core.config import (
    CommitOpts,
    ConfigOpts,
    InventoryOpts,
    ListOpts,
    VerifyOpts,
    WatchOpts,
    default_config_path,
)

console = Console()

T = TypeVar("T")


async def show(options):
    """Show the effective configuration."""
    opts = resolve_opts(options)

    table = Table(title="Effective Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")

    for key, value in opts.flatten().items():
        table.add_row(key, "[dim]unset[/]" if value is None else str(value))

    console.print(table)


async def path(options):
    """Show which configuration file is used."""
    if options and options.config:
        console.print(str(options.config))
        return

    config_path = default_config_path()
    suffix = "" if config_path.is_file() else " [dim](not found)[/]"
    console.print(f"{config_path}{suffix}")


def _ask(text: str, parse: Callable[[str], T]) -> T | None:
    """Prompt until the answer parses; an empty answer skips the field."""
    while True:
        answer = typer.prompt(text, default="", show_default=False).strip()
        if not answer:
            return None
        try:
            return parse(answer)
        except ValueError as e:
            console.print(f"[red]Invalid value: {escape(str(e))}[/]")


def _patterns(answer: str) -> list[str]:
    value = json.loads(answer)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError('expected a JSON list of strings, e.g. ["example.com"]')
    return value


def _interval(answer: str) -> int:
    value = int(answer)
    if value < 0:
        raise ValueError("interval must not be negative")
    return value


async def build(options):
    """Build a config file from prompts."""
    console.print("This builder writes a config file without needing to know TOML.")
    console.print("Press enter on any field to keep its default.\n")

    token = _ask("Cloudflare API token", str)
    filters = ListOpts(
        include_zones=_ask('Include zone filters, e.g. [".*\\\\.com$"]', _patterns),
        ignore_zones=_ask('Ignore zone filters, e.g. ["example.org"]', _patterns),
        include_records=_ask('Include record filters, e.g. ["home.example.com"]', _patterns),
        ignore_records=_ask("Ignore record filters, e.g. []", _patterns),
    )
    inventory_path = _ask("Inventory path", Path)
    force = typer.confirm("Force on `inventory commit`?", default=False)
    interval = _ask("Interval for `inventory watch`, in milliseconds", _interval)

    opts = ConfigOpts(
        verify=VerifyOpts(token=token),
        filters=filters,
        inventory=InventoryOpts(
            path=inventory_path,
            commit=CommitOpts(force=True) if force else None,
            watch=WatchOpts(interval=interval),
        ),
    )

    location = Path(typer.prompt("💾 Save location", default=str(default_config_path())))
    if not location.suffix:
        location = location.with_suffix(".toml")
    if location.exists() and not typer.confirm(f"{location} already exists. Overwrite?", default=False):
        console.print("[yellow]Aborted, config was not saved[/]")
        return

    saved = await opts.save(location)
    console.print(f"✅ Saved config to {saved}")
