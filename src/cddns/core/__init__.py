"""Core library modules for cddns."""

from cddns.core.config import ConfigOpts
from cddns.core.inventory import Inventory
from cddns.core.models import (
    CheckResult,
    InvalidEntry,
    Record,
    RecordType,
    Snapshot,
    Zone,
)

__all__ = [
    "CheckResult",
    "ConfigOpts",
    "InvalidEntry",
    "Inventory",
    "Record",
    "RecordType",
    "Snapshot",
    "Zone",
]
