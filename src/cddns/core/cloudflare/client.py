"""Cloudflare v4 API client."""

import asyncio
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cddns.core.base import BaseDNSProvider
from cddns.core.errors import ProviderError
from cddns.core.models import Record, Zone

logger = logging.getLogger(__name__)

API_BASE = "https://api.cloudflare.com/client/v4"


class CloudflareClient(BaseDNSProvider):
    """Read-only client for Cloudflare zones and DNS records."""

    name = "cloudflare"

    def __init__(
        self,
        token: str,
        base_url: str = API_BASE,
        timeout: float = 10.0,
        per_page: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.token = token
        self.base_url = base_url
        self.timeout = timeout
        self.per_page = per_page
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Initialize the HTTP client."""
        self._http_client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        if not self._http_client:
            raise RuntimeError("Client not connected. Call connect() first.")
        return self._http_client

    # ========================================================================
    # Endpoints
    # ========================================================================

    async def verify_token(self) -> bool:
        """Verify the token via ``/user/tokens/verify``."""
        payload = await self._get("/user/tokens/verify")
        status = (payload.get("result") or {}).get("status")
        logger.debug(f"Token status: {status}")
        return status == "active"

    async def list_zones(self) -> list[Zone]:
        """List all zones visible to the token."""
        items = await self._get_paginated("/zones")
        try:
            zones = [Zone.model_validate(item) for item in items]
        except ValidationError as e:
            raise ProviderError(f"unexpected zone data from Cloudflare: {e}") from e
        logger.debug(f"Retrieved {len(zones)} zones")
        return zones

    async def list_records(self, zones: list[Zone]) -> list[Record]:
        """List all records in ``zones``, fetching zones concurrently.

        Records keep the order of ``zones``, then the API's order within a zone.
        """
        per_zone = await asyncio.gather(*(self._zone_records(zone) for zone in zones))
        records = [record for zone_records in per_zone for record in zone_records]
        logger.debug(f"Retrieved {len(records)} records across {len(zones)} zones")
        return records

    async def _zone_records(self, zone: Zone) -> list[Record]:
        items = await self._get_paginated(f"/zones/{zone.id}/dns_records")
        records = []
        for item in items:
            # Newer API versions omit the zone fields on records
            item.setdefault("zone_id", zone.id)
            item.setdefault("zone_name", zone.name)
            try:
                records.append(Record.model_validate(item))
            except ValidationError as e:
                raise ProviderError(f"unexpected record data in zone {zone.name}: {e}") from e
        return records

    # ========================================================================
    # Transport
    # ========================================================================

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET an API path and return the decoded envelope."""
        try:
            response = await self.http_client.get(path, params=params)
        except httpx.HTTPError as e:
            raise ProviderError(f"error requesting {path} from Cloudflare: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError(
                f"invalid response from Cloudflare for {path} (HTTP {response.status_code})"
            ) from e

        if response.status_code >= 400 or not payload.get("success", False):
            errors = [
                f"{err.get('code')}: {err.get('message')}" for err in payload.get("errors") or []
            ]
            raise ProviderError(
                f"Cloudflare request {path} failed (HTTP {response.status_code})", errors
            )
        return payload

    async def _get_paginated(self, path: str) -> list[dict[str, Any]]:
        """Collect ``result`` from every page of a list endpoint."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            payload = await self._get(path, params={"page": page, "per_page": self.per_page})
            items.extend(payload.get("result") or [])

            total_pages = (payload.get("result_info") or {}).get("total_pages") or 1
            if page >= total_pages:
                return items
            page += 1
