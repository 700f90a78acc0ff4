"""Inventory of DNS records to keep in sync.

The inventory maps a zone key (a zone ID or a zone name) to a set of record
keys (record IDs or record names). It is persisted as YAML::

    example.com:
      - home.example.com
      - 372e67954025e0ba6aaa6d586b9e0b59

An inventory with no zones is empty. A zone with no records still counts as
a zone, so ``{"example.com": []}`` is *not* empty.
"""

import logging
from pathlib import Path
from typing import Iterator

import aiofiles
import yaml
from pydantic import RootModel, ValidationError

from cddns.core.errors import InventoryNotFound, InventoryParseError

logger = logging.getLogger(__name__)

DEFAULT_INVENTORY_PATH = "inventory.yaml"


class Inventory(RootModel[dict[str, set[str] | None] | None]):
    """Zone key to record key set mapping."""

    root: dict[str, set[str] | None] | None = None

    def insert(self, zone: str, record: str) -> None:
        """Add a record to a zone, creating the zone if needed. Idempotent."""
        if self.root is None:
            self.root = {}
        records = self.root.get(zone)
        if records is None:
            records = self.root[zone] = set()
        records.add(record)

    def is_empty(self) -> bool:
        """True iff no zone entries exist at all."""
        return not self.root

    def zones(self) -> list[str]:
        return sorted(self.root or {})

    def record_count(self) -> int:
        """Total number of (zone, record) entries."""
        return sum(len(records) for _, records in self)

    def __len__(self) -> int:
        return self.record_count()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        zone, record = item
        return record in ((self.root or {}).get(zone) or ())

    def __iter__(self) -> Iterator[tuple[str, list[str]]]:  # type: ignore[override]
        """Yield ``(zone, records)`` pairs.

        Records are sorted so one iteration is stable; a fresh iterator is
        built on every call.
        """
        items = [
            (zone, sorted(records or ()))
            for zone, records in sorted((self.root or {}).items())
        ]
        return iter(items)

    # ========================================================================
    # Serialization
    # ========================================================================

    def to_dict(self) -> dict[str, list[str] | None]:
        return {
            zone: sorted(records) if records is not None else None
            for zone, records in (self.root or {}).items()
        }

    def to_yaml(self) -> str:
        if self.is_empty():
            return ""
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=True)

    @classmethod
    def from_yaml(cls, text: str) -> "Inventory":
        """Parse inventory YAML. Empty text is an empty inventory."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise InventoryParseError(f"error reading inventory file contents as YAML data: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InventoryParseError(f"inventory does not match the expected schema: {e}") from e

    @classmethod
    async def from_file(cls, path: str | Path | None = None) -> "Inventory":
        """Read an inventory from ``path`` (default ``inventory.yaml``)."""
        inventory_path = Path(path or DEFAULT_INVENTORY_PATH).expanduser()
        if not inventory_path.is_file():
            raise InventoryNotFound(f"inventory was not found at {inventory_path}")

        logger.debug(f"Reading inventory from {inventory_path}")
        try:
            async with aiofiles.open(inventory_path, "r", encoding="utf-8") as f:
                text = await f.read()
        except UnicodeDecodeError as e:
            raise InventoryParseError(f"inventory file {inventory_path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise InventoryNotFound(f"error reading inventory file {inventory_path}: {e}") from e

        return cls.from_yaml(text)

    async def save(self, path: str | Path) -> Path:
        """Write the inventory as YAML. A path without suffix gets ``.yaml``."""
        target = Path(path).expanduser()
        if not target.suffix:
            target = target.with_suffix(".yaml")
        target.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(target, "w", encoding="utf-8") as f:
            await f.write(self.to_yaml())

        logger.debug(f"Saved inventory with {self.record_count()} records to {target}")
        return target
