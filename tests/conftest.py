"""Pytest configuration and fixtures."""

import os
from unittest.mock import AsyncMock

import pytest

from cddns.core.inventory import Inventory
from cddns.core.models import Record, Zone


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the user's config file and CDDNS_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("CDDNS_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_zone() -> Zone:
    """Sample zone fixture."""
    return Zone(id="zoneA", name="example.com", status="active")


@pytest.fixture
def sample_a_record() -> Record:
    """Sample A record fixture."""
    return Record(
        id="rec1",
        zone_id="zoneA",
        zone_name="example.com",
        name="home.example.com",
        record_type="A",
        content="1.2.3.4",
        ttl=1,
        proxied=False,
    )


@pytest.fixture
def sample_aaaa_record() -> Record:
    """Sample AAAA record fixture."""
    return Record(
        id="rec2",
        zone_id="zoneA",
        zone_name="example.com",
        name="home.example.com",
        record_type="AAAA",
        content="2001:db8::1",
    )


@pytest.fixture
def sample_records(sample_a_record, sample_aaaa_record) -> list[Record]:
    return [sample_a_record, sample_aaaa_record]


@pytest.fixture
def sample_inventory() -> Inventory:
    """Inventory with one A and one AAAA record."""
    inventory = Inventory()
    inventory.insert("zoneA", "rec1")
    inventory.insert("zoneA", "rec2")
    return inventory


@pytest.fixture
def sample_inventory_yaml() -> str:
    return """example.com:
  - home.example.com
zoneB:
  - rec9
"""


@pytest.fixture
def mock_provider(sample_zone, sample_records) -> AsyncMock:
    """Mock DNS provider returning the sample zone and records."""
    provider = AsyncMock()
    provider.list_zones.return_value = [sample_zone]
    provider.list_records.return_value = sample_records
    provider.verify_token.return_value = True
    return provider


@pytest.fixture
def mock_resolver() -> AsyncMock:
    """Mock public IP resolver."""
    resolver = AsyncMock()
    resolver.resolve_v4.return_value = "1.2.3.4"
    resolver.resolve_v6.return_value = "2001:db8::1"
    return resolver
