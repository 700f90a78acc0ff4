"""Public IP address discovery over HTTPS."""

import ipaddress
import logging

import httpx

from cddns.core.base import BaseAddressResolver

logger = logging.getLogger(__name__)

IPV4_SOURCES = ("https://api.ipify.org", "https://ipv4.icanhazip.com")
IPV6_SOURCES = ("https://api6.ipify.org", "https://ipv6.icanhazip.com")


class PublicIPResolver(BaseAddressResolver):
    """Ask plain-text "what is my IP" services for the public addresses.

    Sources are tried in order; the first one returning a valid address of
    the right family wins. Resolution failure is not an error, it yields None.
    """

    def __init__(
        self,
        ipv4_sources: tuple[str, ...] = IPV4_SOURCES,
        ipv6_sources: tuple[str, ...] = IPV6_SOURCES,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.ipv4_sources = ipv4_sources
        self.ipv6_sources = ipv6_sources
        self.timeout = timeout
        self._transport = transport

    async def resolve_v4(self) -> str | None:
        return await self._resolve(self.ipv4_sources, ipaddress.IPv4Address)

    async def resolve_v6(self) -> str | None:
        return await self._resolve(self.ipv6_sources, ipaddress.IPv6Address)

    async def _resolve(self, sources: tuple[str, ...], family: type) -> str | None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            for url in sources:
                try:
                    response = await client.get(url)
                    response.raise_for_status()
                    address = family(response.text.strip())
                except (httpx.HTTPError, ValueError) as e:
                    logger.debug(f"Address lookup via {url} failed: {e}")
                    continue
                logger.debug(f"Resolved public address {address} via {url}")
                return str(address)

        logger.warning(f"Could not resolve a public {family.__name__} from any source")
        return None
