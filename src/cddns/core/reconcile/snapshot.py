"""Gathering the inputs of a reconciliation pass."""

import asyncio
import logging

from cddns.core.base import BaseAddressResolver, BaseDNSProvider
from cddns.core.config import ConfigOpts
from cddns.core.errors import NoZonesFound
from cddns.core.filters import filter_records, filter_zones
from cddns.core.inventory import Inventory
from cddns.core.models import CheckResult, Snapshot
from cddns.core.reconcile.engine import ReconcileEngine

logger = logging.getLogger(__name__)


async def take_snapshot(
    provider: BaseDNSProvider,
    resolver: BaseAddressResolver | None = None,
    opts: ConfigOpts | None = None,
) -> Snapshot:
    """Fetch zones, records and public addresses.

    Address resolution runs alongside the zone listing; records are fetched
    once the zones are known. Any provider failure cancels the pending
    lookups and propagates; no snapshot is produced. ``opts`` applies the
    list filters.
    """
    if resolver is not None:
        tasks = [
            asyncio.ensure_future(coro)
            for coro in (resolver.resolve_v4(), resolver.resolve_v6(), provider.list_zones())
        ]
        try:
            ipv4, ipv6, zones = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            raise
    else:
        ipv4, ipv6, zones = None, None, await provider.list_zones()

    if opts is not None:
        zones = filter_zones(zones, opts)
    if not zones:
        raise NoZonesFound("no zones were found")

    records = await provider.list_records(zones)
    if opts is not None:
        records = filter_records(records, opts)

    logger.debug(f"Snapshot: {len(zones)} zones, {len(records)} records, ipv4={ipv4}, ipv6={ipv6}")
    return Snapshot(zones=zones, records=records, ipv4=ipv4, ipv6=ipv6)


async def check_inventory(
    provider: BaseDNSProvider,
    resolver: BaseAddressResolver,
    inventory: Inventory,
    engine: ReconcileEngine | None = None,
) -> CheckResult:
    """Snapshot the provider, then reconcile ``inventory`` against it."""
    snapshot = await take_snapshot(provider, resolver)
    return (engine or ReconcileEngine()).check_snapshot(inventory, snapshot)
