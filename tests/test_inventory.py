"""Tests for the inventory store."""

import pytest

from cddns.core.errors import InventoryNotFound, InventoryParseError
from cddns.core.inventory import Inventory


class TestInventory:
    """Tests for Inventory set semantics."""

    def test_new_is_empty(self):
        inventory = Inventory()
        assert inventory.is_empty()
        assert list(inventory) == []
        assert inventory.record_count() == 0

    def test_insert_creates_zone(self):
        inventory = Inventory()
        inventory.insert("zoneA", "rec1")
        assert not inventory.is_empty()
        assert list(inventory) == [("zoneA", ["rec1"])]

    def test_insert_is_idempotent(self):
        inventory = Inventory()
        inventory.insert("zoneA", "rec1")
        inventory.insert("zoneA", "rec1")
        assert list(inventory) == [("zoneA", ["rec1"])]
        assert inventory.record_count() == 1

    def test_multiple_zones(self):
        inventory = Inventory()
        inventory.insert("zoneB", "rec3")
        inventory.insert("zoneA", "rec2")
        inventory.insert("zoneA", "rec1")
        assert dict(inventory) == {"zoneA": ["rec1", "rec2"], "zoneB": ["rec3"]}
        assert inventory.record_count() == 3
        assert len(inventory) == 3
        assert ("zoneA", "rec2") in inventory
        assert ("zoneA", "rec3") not in inventory

    def test_iteration_is_restartable(self, sample_inventory):
        assert list(sample_inventory) == list(sample_inventory)

    def test_zone_without_records_is_not_empty(self):
        """Emptiness means no zones; a zone with no records still counts."""
        inventory = Inventory({"zoneA": set()})
        assert not inventory.is_empty()
        assert inventory.record_count() == 0
        assert list(inventory) == [("zoneA", [])]

    def test_null_zone_is_not_empty(self):
        inventory = Inventory.from_yaml("zoneA:\n")
        assert not inventory.is_empty()
        assert list(inventory) == [("zoneA", [])]

    def test_insert_into_null_zone(self):
        inventory = Inventory.from_yaml("zoneA:\n")
        inventory.insert("zoneA", "rec1")
        assert list(inventory) == [("zoneA", ["rec1"])]


class TestInventorySerialization:
    """Tests for YAML serialization."""

    def test_from_yaml(self, sample_inventory_yaml):
        inventory = Inventory.from_yaml(sample_inventory_yaml)
        assert dict(inventory) == {"example.com": ["home.example.com"], "zoneB": ["rec9"]}

    def test_duplicates_collapse(self):
        inventory = Inventory.from_yaml("zoneA:\n  - rec1\n  - rec1\n")
        assert list(inventory) == [("zoneA", ["rec1"])]

    def test_empty_text_is_empty_inventory(self):
        assert Inventory.from_yaml("").is_empty()
        assert Inventory.from_yaml("{}").is_empty()

    def test_round_trip(self):
        inventory = Inventory()
        inventory.insert("zoneA", "rec1")
        inventory.insert("zoneA", "rec2")
        inventory.insert("example.org", "www.example.org")

        restored = Inventory.from_yaml(inventory.to_yaml())

        pairs = {(z, r) for z, records in inventory for r in records}
        restored_pairs = {(z, r) for z, records in restored for r in records}
        assert restored_pairs == pairs

    def test_invalid_yaml(self):
        with pytest.raises(InventoryParseError):
            Inventory.from_yaml("zoneA: [rec1\n")

    @pytest.mark.parametrize(
        "text",
        [
            "- rec1\n- rec2\n",
            "zoneA: rec1\n",
            "zoneA:\n  - [rec1, rec2]\n",
        ],
    )
    def test_schema_mismatch(self, text):
        with pytest.raises(InventoryParseError):
            Inventory.from_yaml(text)


class TestInventoryFiles:
    """Tests for reading and writing inventory files."""

    @pytest.mark.asyncio
    async def test_from_file(self, tmp_path, sample_inventory_yaml):
        path = tmp_path / "inv.yaml"
        path.write_text(sample_inventory_yaml)

        inventory = await Inventory.from_file(path)

        assert inventory.record_count() == 2

    @pytest.mark.asyncio
    async def test_from_file_default_path(self, tmp_path, sample_inventory_yaml):
        # conftest chdirs into tmp_path
        (tmp_path / "inventory.yaml").write_text(sample_inventory_yaml)

        inventory = await Inventory.from_file()

        assert "zoneB" in inventory.zones()

    @pytest.mark.asyncio
    async def test_from_file_not_found(self, tmp_path):
        with pytest.raises(InventoryNotFound):
            await Inventory.from_file(tmp_path / "missing.yaml")

    @pytest.mark.asyncio
    async def test_from_file_directory(self, tmp_path):
        with pytest.raises(InventoryNotFound):
            await Inventory.from_file(tmp_path)

    @pytest.mark.asyncio
    async def test_from_file_parse_error(self, tmp_path):
        path = tmp_path / "inv.yaml"
        path.write_text("zoneA: [rec1\n")
        with pytest.raises(InventoryParseError):
            await Inventory.from_file(path)

    @pytest.mark.asyncio
    async def test_save_adds_suffix(self, tmp_path, sample_inventory):
        saved = await sample_inventory.save(tmp_path / "sub" / "inventory")

        assert saved == tmp_path / "sub" / "inventory.yaml"
        loaded = await Inventory.from_file(saved)
        assert list(loaded) == list(sample_inventory)

    @pytest.mark.asyncio
    async def test_from_file_not_utf8(self, tmp_path):
        path = tmp_path / "inv.yaml"
        path.write_bytes(b"zoneA:\n  - rec\xff\xfe\n")
        with pytest.raises(InventoryParseError, match="not valid UTF-8"):
            await Inventory.from_file(path)
