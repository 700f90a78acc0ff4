"""Core data models for cddns."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecordType(str, Enum):
    """Record types the reconciliation engine can compare."""

    A = "A"
    AAAA = "AAAA"


# ============================================================================
# Provider Models
# ============================================================================


class Zone(BaseModel):
    """A zone visible to the API token."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    status: str | None = None

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class Record(BaseModel):
    """A live DNS record as reported by the provider."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    zone_id: str
    zone_name: str
    name: str
    record_type: str = Field(..., alias="type", description="Record type, e.g. A or AAAA")
    content: str
    ttl: int | None = None
    proxied: bool | None = None

    def __str__(self) -> str:
        return f"{self.name} [{self.record_type}] {self.content} ({self.id})"


class Snapshot(BaseModel):
    """Everything one reconciliation pass needs from the outside world."""

    model_config = ConfigDict(frozen=True)

    zones: list[Zone] = Field(default_factory=list)
    records: list[Record] = Field(default_factory=list)
    ipv4: str | None = Field(default=None, description="Public IPv4 address")
    ipv6: str | None = Field(default=None, description="Public IPv6 address")
    taken_at: datetime = Field(default_factory=datetime.now)


# ============================================================================
# Reconciliation Models
# ============================================================================


class InvalidEntry(BaseModel):
    """An inventory entry with no live counterpart."""

    model_config = ConfigDict(frozen=True)

    zone: str
    record: str

    def __str__(self) -> str:
        return f"{self.zone} | {self.record}"


class CheckResult(BaseModel):
    """Classification of every inventory entry after one pass."""

    good: list[Record] = Field(default_factory=list)
    bad: list[Record] = Field(default_factory=list)
    invalid: list[InvalidEntry] = Field(default_factory=list)
    unsupported: list[Record] = Field(default_factory=list)
    ipv4: str | None = None
    ipv6: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return len(self.good) + len(self.bad) + len(self.invalid) + len(self.unsupported)

    @property
    def clean(self) -> bool:
        """True when nothing needs attention."""
        return not (self.bad or self.invalid or self.unsupported)

    def expected_for(self, record: Record) -> str | None:
        """Address a record is expected to hold, if its type is supported."""
        if record.record_type == RecordType.A.value:
            return self.ipv4
        if record.record_type == RecordType.AAAA.value:
            return self.ipv6
        return None

    def summary(self) -> dict[str, Any]:
        return {
            "good": len(self.good),
            "bad": len(self.bad),
            "invalid": len(self.invalid),
            "unsupported": len(self.unsupported),
        }
