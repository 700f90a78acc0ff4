"""Main CLI entry point for cddns."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Coroutine, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from cddns.core.errors import CddnsError

# Create the main app
app = typer.Typer(
    name="cddns",
    help="Cloudflare DDNS - keep an inventory of DNS records pointed at your public IP",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("cddns")


# Global options stored in context
class GlobalOptions:
    def __init__(self):
        self.config: Optional[Path] = None
        self.verbose: bool = False
        self.inventory = None  # InventoryOpts from `inventory` options


def setup_logging(verbose: bool) -> None:
    """Log through rich; CDDNS_LOG overrides the level picked by -v."""
    level = os.environ.get("CDDNS_LOG", "").upper() or ("DEBUG" if verbose else "INFO")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=verbose)],
        force=True,
    )
    # Keep transport noise out of -v output
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def run(coro: Coroutine, options: Optional[GlobalOptions]) -> None:
    """Run a command coroutine, turning cddns errors into exit code 1."""
    verbose = options.verbose if options else False
    try:
        asyncio.run(coro)
    except CddnsError as e:
        if verbose:
            logger.exception(str(e))
        else:
            logger.error(str(e))
            err_console.print("Enable verbose logging (-v) for the full stack trace.")
        raise typer.Exit(code=1)


# ============================================================================
# Config Commands
# ============================================================================

config_app = typer.Typer(help="Configuration controls")
app.add_typer(config_app, name="config")


@config_app.command("build")
def config_build(ctx: typer.Context):
    """Build a configuration file interactively."""
    from cddns.cli.commands.config import build

    run(build(ctx.obj), ctx.obj)


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Show the effective configuration."""
    from cddns.cli.commands.config import show

    run(show(ctx.obj), ctx.obj)


@config_app.command("path")
def config_path(ctx: typer.Context):
    """Show which configuration file is used."""
    from cddns.cli.commands.config import path

    run(path(ctx.obj), ctx.obj)


# ============================================================================
# Verify Command
# ============================================================================


@app.command("verify")
def verify(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Cloudflare API token"),
):
    """Verify a Cloudflare API token."""
    from cddns.cli.commands.verify import verify as verify_token

    run(verify_token(token, ctx.obj), ctx.obj)


# ============================================================================
# List Commands
# ============================================================================

list_app = typer.Typer(help="List zones and records visible to the token")
app.add_typer(list_app, name="list")


def _list_filters(
    include_zones: Optional[List[str]],
    ignore_zones: Optional[List[str]],
    include_records: Optional[List[str]],
    ignore_records: Optional[List[str]],
):
    from cddns.core.config import ListOpts

    return ListOpts(
        include_zones=include_zones or None,
        ignore_zones=ignore_zones or None,
        include_records=include_records or None,
        ignore_records=ignore_records or None,
    )


@list_app.command("zones")
def list_zones(
    ctx: typer.Context,
    include_zones: Optional[List[str]] = typer.Option(None, "--include-zones", help="Include zone regex"),
    ignore_zones: Optional[List[str]] = typer.Option(None, "--ignore-zones", help="Ignore zone regex"),
):
    """List zones."""
    from cddns.cli.commands.list import zones

    run(zones(_list_filters(include_zones, ignore_zones, None, None), ctx.obj), ctx.obj)


@list_app.command("records")
def list_records(
    ctx: typer.Context,
    include_zones: Optional[List[str]] = typer.Option(None, "--include-zones", help="Include zone regex"),
    ignore_zones: Optional[List[str]] = typer.Option(None, "--ignore-zones", help="Ignore zone regex"),
    include_records: Optional[List[str]] = typer.Option(
        None, "--include-records", help="Include record regex"
    ),
    ignore_records: Optional[List[str]] = typer.Option(
        None, "--ignore-records", help="Ignore record regex"
    ),
):
    """List records."""
    from cddns.cli.commands.list import records

    filters = _list_filters(include_zones, ignore_zones, include_records, ignore_records)
    run(records(filters, ctx.obj), ctx.obj)


# ============================================================================
# Inventory Commands
# ============================================================================

inventory_app = typer.Typer(help="Build or manage your DNS record inventory")
app.add_typer(inventory_app, name="inventory")


@inventory_app.callback()
def inventory_main(
    ctx: typer.Context,
    path: Optional[Path] = typer.Option(None, "--path", "-p", help="Inventory file"),
    force: Optional[bool] = typer.Option(
        None, "--force/--no-force", help="Skip confirmation on `inventory commit`"
    ),
    interval: Optional[int] = typer.Option(
        None, "--interval", "-i", min=0, help="Interval for `inventory watch`, in milliseconds"
    ),
):
    """Build or manage your DNS record inventory."""
    from cddns.core.config import CommitOpts, InventoryOpts, WatchOpts

    ctx.ensure_object(GlobalOptions)
    ctx.obj.inventory = InventoryOpts(
        path=path,
        commit=CommitOpts(force=force) if force is not None else None,
        watch=WatchOpts(interval=interval) if interval is not None else None,
    )


@inventory_app.command("build")
def inventory_build(ctx: typer.Context):
    """Build an inventory file interactively."""
    from cddns.cli.commands.inventory import build

    run(build(ctx.obj), ctx.obj)


@inventory_app.command("show")
def inventory_show(ctx: typer.Context):
    """Print your inventory."""
    from cddns.cli.commands.inventory import show

    run(show(ctx.obj), ctx.obj)


@inventory_app.command("check")
def inventory_check(ctx: typer.Context):
    """Print erroneous DNS records."""
    from cddns.cli.commands.inventory import check

    run(check(ctx.obj), ctx.obj)


@inventory_app.command("commit")
def inventory_commit(ctx: typer.Context):
    """Fix erroneous DNS records once."""
    from cddns.cli.commands.inventory import commit

    run(commit(ctx.obj), ctx.obj)


@inventory_app.command("watch")
def inventory_watch(
    ctx: typer.Context,
    count: Optional[int] = typer.Option(None, "--count", "-c", min=1, help="Stop after N passes"),
):
    """Check DNS records on a loop."""
    from cddns.cli.commands.inventory import watch

    run(watch(count, ctx.obj), ctx.obj)


# ============================================================================
# Version Command
# ============================================================================


@app.command("version")
def version():
    """Show version information."""
    from cddns import __version__

    console.print(f"cddns version {__version__}")


# ============================================================================
# Main Callback (Global Options)
# ============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="CDDNS_CONFIG",
        help="Config file to use [default: $XDG_CONFIG_HOME/cddns/config.toml]",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Cloudflare DDNS command line utility."""
    ctx.ensure_object(GlobalOptions)
    ctx.obj.config = config
    ctx.obj.verbose = verbose
    setup_logging(verbose)


if __name__ == "__main__":
    app()
