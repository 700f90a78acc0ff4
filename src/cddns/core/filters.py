"""Include/ignore filters for zones and records."""

import logging
import re
from typing import Callable, Iterable, TypeVar

from cddns.core.config import ConfigOpts
from cddns.core.errors import InvalidFilter
from cddns.core.models import Record, Zone

logger = logging.getLogger(__name__)

T = TypeVar("T")


def compile_patterns(patterns: Iterable[str] | None) -> list[re.Pattern[str]]:
    """Compile filter patterns, raising InvalidFilter on a bad expression."""
    compiled = []
    for pattern in patterns or ():
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise InvalidFilter(f"invalid filter pattern {pattern!r}: {e}") from e
    return compiled


def apply_filters(
    items: list[T],
    include: Iterable[str] | None,
    ignore: Iterable[str] | None,
    keys: Callable[[T], tuple[str, ...]],
) -> list[T]:
    """Keep items matching any include pattern and no ignore pattern.

    Patterns are searched against every key an item exposes (its ID and its
    name). No include patterns means everything is included.
    """
    include_res = compile_patterns(include)
    ignore_res = compile_patterns(ignore)

    def matches(item: T, patterns: list[re.Pattern[str]]) -> bool:
        return any(p.search(key) for p in patterns for key in keys(item))

    kept = []
    for item in items:
        if include_res and not matches(item, include_res):
            continue
        if matches(item, ignore_res):
            continue
        kept.append(item)
    return kept


def filter_zones(zones: list[Zone], opts: ConfigOpts) -> list[Zone]:
    filters = opts.filters
    if filters is None:
        return list(zones)
    kept = apply_filters(
        zones, filters.include_zones, filters.ignore_zones, lambda z: (z.id, z.name)
    )
    logger.debug(f"Zone filters kept {len(kept)} of {len(zones)} zones")
    return kept


def filter_records(records: list[Record], opts: ConfigOpts) -> list[Record]:
    filters = opts.filters
    if filters is None:
        return list(records)
    kept = apply_filters(
        records, filters.include_records, filters.ignore_records, lambda r: (r.id, r.name)
    )
    logger.debug(f"Record filters kept {len(kept)} of {len(records)} records")
    return kept
