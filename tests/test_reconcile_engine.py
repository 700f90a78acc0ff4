"""Tests for the reconciliation engine and its reports."""

import pytest

from cddns.core.errors import NoComparableAddress, UnsupportedRecordType
from cddns.core.inventory import Inventory
from cddns.core.models import InvalidEntry, Record, Snapshot
from cddns.core.reconcile import CheckReport, ReconcileEngine


def make_record(
    id: str = "rec1",
    record_type: str = "A",
    content: str = "1.2.3.4",
    name: str = "home.example.com",
    zone_id: str = "zoneA",
    zone_name: str = "example.com",
) -> Record:
    return Record(
        id=id,
        zone_id=zone_id,
        zone_name=zone_name,
        name=name,
        record_type=record_type,
        content=content,
    )


def inventory_of(*pairs: tuple[str, str]) -> Inventory:
    inventory = Inventory()
    for zone, record in pairs:
        inventory.insert(zone, record)
    return inventory


class TestReconcileEngine:
    """Tests for ReconcileEngine.check."""

    def test_matching_record_is_good(self):
        record = make_record()
        result = ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [record], ipv4="1.2.3.4")

        assert result.good == [record]
        assert result.bad == []
        assert result.invalid == []

    def test_stale_record_is_bad(self):
        record = make_record()
        result = ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [record], ipv4="5.6.7.8")

        assert result.good == []
        assert result.bad == [record]
        assert result.bad[0].content == "1.2.3.4"
        assert result.invalid == []

    def test_missing_record_is_invalid(self):
        result = ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [], ipv4="1.2.3.4")

        assert result.good == []
        assert result.bad == []
        assert result.invalid == [InvalidEntry(zone="zoneA", record="rec1")]

    def test_missing_address_aborts(self):
        with pytest.raises(NoComparableAddress, match="A record"):
            ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [make_record()], ipv4=None)

    def test_missing_v6_is_fine_without_aaaa_records(self):
        result = ReconcileEngine().check(
            inventory_of(("zoneA", "rec1")), [make_record()], ipv4="1.2.3.4", ipv6=None
        )
        assert len(result.good) == 1

    def test_aaaa_compares_against_v6(self, sample_inventory, sample_records):
        result = ReconcileEngine().check(
            sample_inventory, sample_records, ipv4="1.2.3.4", ipv6="2001:db8::2"
        )

        assert [r.id for r in result.good] == ["rec1"]
        assert [r.id for r in result.bad] == ["rec2"]

    @pytest.mark.parametrize(
        "zone_key,record_key",
        [
            ("zoneA", "rec1"),
            ("example.com", "rec1"),
            ("zoneA", "home.example.com"),
            ("example.com", "home.example.com"),
        ],
    )
    def test_ids_and_names_are_interchangeable(self, zone_key, record_key):
        result = ReconcileEngine().check(
            inventory_of((zone_key, record_key)), [make_record()], ipv4="1.2.3.4"
        )
        assert len(result.good) == 1

    def test_record_in_other_zone_is_invalid(self):
        record = make_record(zone_id="zoneB", zone_name="example.org")
        result = ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [record], ipv4="1.2.3.4")
        assert result.invalid == [InvalidEntry(zone="zoneA", record="rec1")]

    def test_first_match_wins(self):
        first = make_record(id="r1", content="1.2.3.4")
        second = make_record(id="r2", content="9.9.9.9")

        result = ReconcileEngine().check(
            inventory_of(("zoneA", "home.example.com")), [first, second], ipv4="1.2.3.4"
        )

        assert result.good == [first]
        assert result.bad == []

    def test_unsupported_type_is_bucketed(self):
        record = make_record(record_type="CNAME", content="target.example.com")
        result = ReconcileEngine().check(inventory_of(("zoneA", "rec1")), [record], ipv4="1.2.3.4")

        assert result.unsupported == [record]
        assert result.total == 1

    def test_unsupported_type_strict(self):
        record = make_record(record_type="TXT", content="hello")
        with pytest.raises(UnsupportedRecordType, match="TXT"):
            ReconcileEngine(strict_types=True).check(
                inventory_of(("zoneA", "rec1")), [record], ipv4="1.2.3.4"
            )

    def test_every_entry_lands_in_one_bucket(self):
        records = [
            make_record(id="good"),
            make_record(id="bad", content="9.9.9.9"),
            make_record(id="cname", record_type="CNAME", content="x.example.com"),
            make_record(id="uninventoried"),
        ]
        inventory = inventory_of(
            ("zoneA", "good"),
            ("zoneA", "bad"),
            ("zoneA", "cname"),
            ("zoneA", "gone"),
            ("zoneB", "gone"),
        )

        result = ReconcileEngine().check(inventory, records, ipv4="1.2.3.4")

        assert result.total == inventory.record_count() == 5
        assert result.summary() == {"good": 1, "bad": 1, "invalid": 2, "unsupported": 1}

    def test_empty_inventory(self):
        result = ReconcileEngine().check(Inventory(), [make_record()], ipv4=None)
        assert result.total == 0
        assert result.clean

    def test_does_not_mutate_inputs(self, sample_inventory, sample_records):
        before = list(sample_inventory)
        ReconcileEngine().check(sample_inventory, sample_records, "1.2.3.4", "2001:db8::1")
        assert list(sample_inventory) == before
        assert len(sample_records) == 2

    def test_check_snapshot(self, sample_zone, sample_inventory, sample_records):
        snapshot = Snapshot(
            zones=[sample_zone], records=sample_records, ipv4="1.2.3.4", ipv6="2001:db8::1"
        )
        result = ReconcileEngine().check_snapshot(sample_inventory, snapshot)
        assert len(result.good) == 2
        assert result.ipv6 == "2001:db8::1"


class TestCheckReport:
    """Tests for CheckReport."""

    @pytest.fixture
    def result(self):
        records = [
            make_record(id="good"),
            make_record(id="bad", name="vpn.example.com", content="9.9.9.9"),
            make_record(id="mx", record_type="MX", content="mail.example.com"),
        ]
        inventory = inventory_of(
            ("zoneA", "good"), ("zoneA", "bad"), ("zoneA", "mx"), ("zoneA", "gone")
        )
        return ReconcileEngine().check(inventory, records, ipv4="1.2.3.4")

    def test_lines(self, result):
        assert CheckReport(result).lines() == [
            "MATCH: home.example.com (good)",
            "MISMATCH: vpn.example.com (bad) => 9.9.9.9 != 1.2.3.4",
            "INVALID: zoneA | gone",
            "UNSUPPORTED: home.example.com (mx) type MX",
        ]

    def test_summary(self, result):
        assert CheckReport(result).summary() == (
            "✅ 1 GOOD, ❌ 1 BAD, ❓ 1 INVALID, ⚠ 1 UNSUPPORTED"
        )

    def test_summary_hides_zero_unsupported(self):
        result = ReconcileEngine().check(Inventory(), [])
        assert CheckReport(result).summary() == "✅ 0 GOOD, ❌ 0 BAD, ❓ 0 INVALID"

    def test_to_json(self, result):
        data = CheckReport(result).to_json()

        assert data["summary"]["good"] == 1
        assert data["summary"]["ipv4"] == "1.2.3.4"
        assert data["bad"][0]["expected"] == "1.2.3.4"
        assert data["invalid"] == [{"zone": "zoneA", "record": "gone"}]
