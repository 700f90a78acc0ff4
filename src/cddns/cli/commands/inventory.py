"""Inventory command implementations."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from cddns.cli.commands import resolve_opts
from cddns.core.base import BaseDNSProvider
from cddns.core.cloudflare import CloudflareClient
from cddns.core.config import ConfigOpts
from cddns.core.errors import NoComparableAddress, NoRecordsFound, NoZonesFound, ProviderError
from cddns.core.inventory import Inventory
from cddns.core.models import CheckResult, Record
from cddns.core.public_ip import PublicIPResolver
from cddns.core.reconcile import CheckReport, ReconcileEngine, check_inventory, take_snapshot

console = Console()
logger = logging.getLogger(__name__)

LINE_STYLES = {
    "MATCH": "green",
    "MISMATCH": "red",
    "INVALID": "yellow",
    "UNSUPPORTED": "magenta",
}


def _choose(items: list, prompt: str) -> int:
    """Prompt until a 1-based index into ``items`` is given; return it 0-based."""
    while True:
        for i, item in enumerate(items, 1):
            console.print(f"\\[{i}] {escape(str(item))}")
        idx = typer.prompt(prompt, type=int)
        if 0 < idx <= len(items):
            return idx - 1


def _print_lines(result: CheckResult, kinds: tuple[str, ...] = tuple(LINE_STYLES)) -> None:
    for line in CheckReport(result).lines():
        kind = line.split(":", 1)[0]
        if kind in kinds:
            console.print(line, style=LINE_STYLES[kind], markup=False, highlight=False)


def _print_result(result: CheckResult, only_problems: bool = False) -> None:
    kinds = tuple(k for k in LINE_STYLES if not (only_problems and k == "MATCH"))
    _print_lines(result, kinds)
    console.print(CheckReport(result).summary())


async def build(options):
    """Build an inventory by picking records from the live zones."""
    opts = resolve_opts(options)
    client = CloudflareClient(opts.require_token())

    console.print("Retrieving Cloudflare resources...")
    async with client:
        snapshot = await take_snapshot(client, opts=opts)
    if not snapshot.records:
        raise NoRecordsFound("no records to build inventory from")

    inventory = Inventory()
    while True:
        zone = snapshot.zones[_choose(snapshot.zones, "(Step 1 of 2) Choose a zone")]
        zone_records = [r for r in snapshot.records if r.zone_id == zone.id]

        if zone_records:
            record = zone_records[_choose(zone_records, "(Step 2 of 2) Choose a record")]
            inventory.insert(zone.id, record.id)
            console.print(f"\n✅ Added '{escape(record.name)}'.")
        else:
            console.print("\n❌ No records for this zone.")

        if not typer.confirm("Add another record?", default=True):
            break

    location = Path(typer.prompt("💾 Save location", default=str(opts.inventory_path)))
    if not location.suffix:
        location = location.with_suffix(".yaml")
    if location.exists() and not typer.confirm(f"{location} already exists. Overwrite?", default=False):
        console.print("[yellow]Aborted, inventory was not saved[/]")
        return

    saved = await inventory.save(location)
    console.print(f"✅ Saved {inventory.record_count()} records to {saved}")


async def show(options):
    """Print the inventory file."""
    opts = resolve_opts(options)
    inventory = await Inventory.from_file(opts.inventory_path)

    if inventory.is_empty():
        console.print("Inventory file is empty.")
        return

    blocks = [
        f"{zone}:" + "".join(f"\n  - {record}" for record in records)
        for zone, records in inventory
    ]
    console.print("\n---\n".join(blocks), markup=False, highlight=False)


async def _check(opts: ConfigOpts, client: BaseDNSProvider) -> CheckResult:
    inventory = await Inventory.from_file(opts.inventory_path)
    console.print("Checking Cloudflare resources...")
    return await check_inventory(client, PublicIPResolver(), inventory)


async def check(options):
    """Print how every inventory record compares to the public IP."""
    opts = resolve_opts(options)
    client = CloudflareClient(opts.require_token())

    async with client:
        result = await _check(opts, client)

    _print_result(result)


async def _apply(client: BaseDNSProvider, record: Record, content: str | None) -> bool:
    try:
        await client.apply_correction(record, content)
    except NotImplementedError as e:
        console.print(f"[yellow]{escape(str(e))}[/]")
        return False
    return True


async def commit(options):
    """Report erroneous records and offer to fix or prune them."""
    opts = resolve_opts(options)
    client = CloudflareClient(opts.require_token())
    force = opts.commit_force

    async with client:
        result = await _check(opts, client)
        bad, invalid = len(result.bad), len(result.invalid)

        if result.bad:
            _print_lines(result, ("MISMATCH",))
            if force or typer.confirm(f"🔨 Fix {len(result.bad)} bad records?", default=True):
                for record in result.bad:
                    if not await _apply(client, record, result.expected_for(record)):
                        break
                    bad -= 1

        if result.invalid:
            _print_lines(result, ("INVALID",))
            if force or typer.confirm(f"🗑️ Prune {len(result.invalid)} invalid records?", default=True):
                console.print("[yellow]Pruning invalid inventory entries is not supported yet[/]")

    if bad == 0 and invalid == 0:
        console.print("✅ No bad or invalid records.")
    else:
        console.print(f"❌ {bad} bad, {invalid} invalid records remain.")


async def watch(count: int | None, options):
    """Re-check the inventory every watch interval."""
    opts = resolve_opts(options)
    client = CloudflareClient(opts.require_token())
    inventory = await Inventory.from_file(opts.inventory_path)
    resolver = PublicIPResolver()
    engine = ReconcileEngine()

    console.print(f"Watching inventory every {opts.watch_interval}ms (Ctrl+C to stop)\n")
    passes = 0
    try:
        async with client:
            while count is None or passes < count:
                if passes:
                    await asyncio.sleep(opts.watch_interval / 1000)
                passes += 1

                try:
                    result = await check_inventory(client, resolver, inventory, engine)
                except (ProviderError, NoComparableAddress, NoZonesFound) as e:
                    logger.error(f"Check failed: {e}")
                    continue

                console.print(f"[dim]{result.timestamp:%H:%M:%S}[/]")
                _print_result(result, only_problems=True)

    except (KeyboardInterrupt, asyncio.CancelledError):
        # asyncio.run delivers Ctrl+C as a cancellation of the main task
        console.print("\nStopped watching.")
