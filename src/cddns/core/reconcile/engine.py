"""Reconciliation of an inventory against live provider records."""

import logging

from cddns.core.errors import NoComparableAddress, UnsupportedRecordType
from cddns.core.inventory import Inventory
from cddns.core.models import CheckResult, InvalidEntry, Record, RecordType, Snapshot

logger = logging.getLogger(__name__)


class ReconcileEngine:
    """
    Classify every inventory entry against a snapshot of live records.

    Each entry lands in exactly one bucket:

    - good: matched, content equals the public address
    - bad: matched, content is stale
    - invalid: no live record matches the entry
    - unsupported: matched, but the record type has no comparison rule

    The engine is pure. It never mutates its inputs and performs no I/O.
    """

    def __init__(self, strict_types: bool = False):
        # strict_types raises UnsupportedRecordType instead of bucketing
        self.strict_types = strict_types

    def check(
        self,
        inventory: Inventory,
        records: list[Record],
        ipv4: str | None = None,
        ipv6: str | None = None,
    ) -> CheckResult:
        """Run one reconciliation pass.

        Raises NoComparableAddress as soon as a matched record needs an
        address family that was not resolved.
        """
        result = CheckResult(ipv4=ipv4, ipv6=ipv6)

        for zone_key, record_keys in inventory:
            for record_key in record_keys:
                record = self.find_record(records, zone_key, record_key)
                if record is None:
                    result.invalid.append(InvalidEntry(zone=zone_key, record=record_key))
                    continue

                if record.record_type not in (RecordType.A.value, RecordType.AAAA.value):
                    if self.strict_types:
                        raise UnsupportedRecordType(record.record_type)
                    logger.debug(f"Skipping {record.name}: unsupported type {record.record_type}")
                    result.unsupported.append(record)
                    continue

                expected = result.expected_for(record)
                if expected is None:
                    raise NoComparableAddress(record.record_type)

                if record.content == expected:
                    result.good.append(record)
                else:
                    result.bad.append(record)

        logger.debug(
            f"Checked {result.total} records: {len(result.good)} good, {len(result.bad)} bad, "
            f"{len(result.invalid)} invalid, {len(result.unsupported)} unsupported"
        )
        return result

    def check_snapshot(self, inventory: Inventory, snapshot: Snapshot) -> CheckResult:
        return self.check(inventory, snapshot.records, snapshot.ipv4, snapshot.ipv6)

    @staticmethod
    def find_record(records: list[Record], zone_key: str, record_key: str) -> Record | None:
        """First record matching the zone by ID or name and the record by ID or name."""
        for record in records:
            if zone_key in (record.zone_id, record.zone_name) and record_key in (
                record.id,
                record.name,
            ):
                return record
        return None


class CheckReport:
    """Generate human-readable reconciliation reports."""

    def __init__(self, result: CheckResult):
        self.result = result

    def lines(self) -> list[str]:
        """One line per inventory entry, grouped by classification."""
        lines = []
        for record in self.result.good:
            lines.append(f"MATCH: {record.name} ({record.id})")
        for record in self.result.bad:
            expected = self.result.expected_for(record)
            lines.append(f"MISMATCH: {record.name} ({record.id}) => {record.content} != {expected}")
        for entry in self.result.invalid:
            lines.append(f"INVALID: {entry}")
        for record in self.result.unsupported:
            lines.append(f"UNSUPPORTED: {record.name} ({record.id}) type {record.record_type}")
        return lines

    def summary(self) -> str:
        counts = self.result.summary()
        text = f"✅ {counts['good']} GOOD, ❌ {counts['bad']} BAD, ❓ {counts['invalid']} INVALID"
        if counts["unsupported"]:
            text += f", ⚠ {counts['unsupported']} UNSUPPORTED"
        return text

    def to_json(self) -> dict:
        """Return report as JSON-serializable dict."""
        return {
            "summary": {
                **self.result.summary(),
                "ipv4": self.result.ipv4,
                "ipv6": self.result.ipv6,
                "timestamp": self.result.timestamp.isoformat(),
            },
            "good": [r.model_dump() for r in self.result.good],
            "bad": [
                {**r.model_dump(), "expected": self.result.expected_for(r)}
                for r in self.result.bad
            ],
            "invalid": [e.model_dump() for e in self.result.invalid],
            "unsupported": [r.model_dump() for r in self.result.unsupported],
        }
