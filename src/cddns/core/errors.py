"""Exception types raised by the cddns core."""


class CddnsError(Exception):
    """Base class for all cddns errors."""


class MissingCredential(CddnsError):
    """No API token was available after merging configuration layers."""

    def __init__(self, message: str = "no token was provided"):
        super().__init__(message)


class ConfigNotFound(CddnsError):
    """An explicitly requested configuration file does not exist."""


class ConfigParseError(CddnsError):
    """A configuration file is not valid TOML or does not match the schema."""


class InventoryNotFound(CddnsError):
    """The inventory path does not resolve to an existing file."""


class InventoryParseError(CddnsError):
    """The inventory file is not valid YAML or does not match the schema."""


class InvalidFilter(CddnsError):
    """A zone or record filter is not a valid regular expression."""


class NoZonesFound(CddnsError):
    """The provider returned no usable zones."""


class NoRecordsFound(CddnsError):
    """The provider returned no usable records."""


class ProviderError(CddnsError):
    """The DNS provider API failed or rejected a request."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = errors or []
        if self.errors:
            message = f"{message}: {'; '.join(self.errors)}"
        super().__init__(message)


class NoComparableAddress(CddnsError):
    """The public address family required by a record type was not resolved.

    Aborts the whole reconciliation pass.
    """

    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(f"error no address comparable for {record_type} record")


class UnsupportedRecordType(CddnsError):
    """A matched record has a type with no comparison rule."""

    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(f"unexpected record type: {record_type}")
