"""Zone and record listing commands."""

from rich.console import Console
from rich.table import Table

from cddns.cli.commands import resolve_opts
from cddns.core.cloudflare import CloudflareClient
from cddns.core.config import ConfigOpts, ListOpts
from cddns.core.errors import NoRecordsFound, NoZonesFound
from cddns.core.filters import filter_zones
from cddns.core.reconcile import take_snapshot

console = Console()


async def zones(filters: ListOpts, options):
    """List zones that pass the zone filters."""
    opts = resolve_opts(options, ConfigOpts(filters=filters))
    client = CloudflareClient(opts.require_token())

    async with client:
        found = filter_zones(await client.list_zones(), opts)

    if not found:
        raise NoZonesFound("no zones were found")

    table = Table(title="Zones")
    table.add_column("Name", style="cyan")
    table.add_column("ID")
    table.add_column("Status")
    for zone in found:
        table.add_row(zone.name, zone.id, zone.status or "")

    console.print(table)


async def records(filters: ListOpts, options):
    """List records that pass the zone and record filters."""
    opts = resolve_opts(options, ConfigOpts(filters=filters))
    client = CloudflareClient(opts.require_token())

    async with client:
        snapshot = await take_snapshot(client, opts=opts)

    if not snapshot.records:
        raise NoRecordsFound("no records were found")

    table = Table(title="Records")
    table.add_column("Zone", style="cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Content", style="green")
    table.add_column("ID")
    for record in snapshot.records:
        table.add_row(record.zone_name, record.name, record.record_type, record.content, record.id)

    console.print(table)
