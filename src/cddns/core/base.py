"""Abstract base classes for the collaborators a reconciliation pass needs."""

from abc import ABC, abstractmethod

from cddns.core.models import Record, Zone


class BaseDNSProvider(ABC):
    """Abstract base class for DNS provider API clients."""

    name: str

    @abstractmethod
    async def connect(self) -> None:
        """Open the underlying HTTP session."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the underlying HTTP session."""
        ...

    async def __aenter__(self) -> "BaseDNSProvider":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()

    @abstractmethod
    async def verify_token(self) -> bool:
        """Check that the configured token is valid and active."""
        ...

    @abstractmethod
    async def list_zones(self) -> list[Zone]:
        """List every zone visible to the token."""
        ...

    @abstractmethod
    async def list_records(self, zones: list[Zone]) -> list[Record]:
        """List every record in the given zones."""
        ...

    async def apply_correction(self, record: Record, content: str | None) -> Record:
        """Correct or prune a record.

        Extension point. ``content=None`` means prune. No provider implements
        corrections yet.
        """
        raise NotImplementedError(f"{self.name} does not support correcting records")


class BaseAddressResolver(ABC):
    """Abstract base class for public IP address discovery."""

    @abstractmethod
    async def resolve_v4(self) -> str | None:
        """Public IPv4 address, or None if it could not be resolved."""
        ...

    @abstractmethod
    async def resolve_v6(self) -> str | None:
        """Public IPv6 address, or None if it could not be resolved."""
        ...
