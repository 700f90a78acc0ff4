"""Layered configuration.

Configuration comes from three layers, each of which may leave any field
unset::

    file (TOML)  <  environment (CDDNS_*)  <  command line

Layers are folded left to right with :func:`merge`; a set field in a later
layer wins. Defaults are applied by the accessors on :class:`ConfigOpts`, never
stored in a layer, so an unset field stays distinguishable from a default.
"""

import logging
import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any, TypeVar

import aiofiles
import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError

from cddns.core.errors import ConfigNotFound, ConfigParseError, MissingCredential
from cddns.core.inventory import DEFAULT_INVENTORY_PATH

logger = logging.getLogger(__name__)

DEFAULT_WATCH_INTERVAL_MS = 30_000
CONFIG_FILE_NAME = "config.toml"

T = TypeVar("T")


def default_config_path() -> Path:
    """``$XDG_CONFIG_HOME/cddns/config.toml``, or ``~/.config/cddns/config.toml``."""
    base = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(base) / "cddns" / CONFIG_FILE_NAME


# ============================================================================
# Partial Configuration Models
# ============================================================================


class _Layer(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class VerifyOpts(_Layer):
    """Token settings."""

    token: str | None = None


class ListOpts(_Layer):
    """Zone and record filters, as regular expressions."""

    include_zones: list[str] | None = None
    ignore_zones: list[str] | None = None
    include_records: list[str] | None = None
    ignore_records: list[str] | None = None


class CommitOpts(_Layer):
    force: bool | None = None


class WatchOpts(_Layer):
    interval: int | None = Field(default=None, ge=0, description="Poll interval in milliseconds")


class InventoryOpts(_Layer):
    """Inventory settings."""

    path: Path | None = None
    commit: CommitOpts | None = None
    watch: WatchOpts | None = None


class ConfigOpts(_Layer):
    """One configuration layer, or the effective result of merging layers."""

    verify: VerifyOpts | None = None
    filters: ListOpts | None = Field(default=None, alias="list")
    inventory: InventoryOpts | None = None

    def merge(self, other: "ConfigOpts") -> "ConfigOpts":
        return merge(self, other)

    # ========================================================================
    # Accessors
    # ========================================================================

    @property
    def token(self) -> str | None:
        return self.verify.token if self.verify else None

    def require_token(self) -> str:
        token = self.token
        if not token:
            raise MissingCredential()
        return token

    @property
    def inventory_path(self) -> Path:
        if self.inventory and self.inventory.path:
            return self.inventory.path
        return Path(DEFAULT_INVENTORY_PATH)

    @property
    def commit_force(self) -> bool:
        if self.inventory and self.inventory.commit and self.inventory.commit.force is not None:
            return self.inventory.commit.force
        return False

    @property
    def watch_interval(self) -> int:
        """Watch interval in milliseconds."""
        if self.inventory and self.inventory.watch and self.inventory.watch.interval is not None:
            return self.inventory.watch.interval
        return DEFAULT_WATCH_INTERVAL_MS

    def flatten(self, mask_token: bool = True) -> dict[str, Any]:
        """Effective values keyed by dotted TOML path, defaults filled in."""
        token = self.token
        if token and mask_token:
            token = token[:4] + "*" * max(len(token) - 4, 4)
        filters = self.filters or ListOpts()
        return {
            "verify.token": token,
            "list.include_zones": filters.include_zones,
            "list.ignore_zones": filters.ignore_zones,
            "list.include_records": filters.include_records,
            "list.ignore_records": filters.ignore_records,
            "inventory.path": str(self.inventory_path),
            "inventory.commit.force": self.commit_force,
            "inventory.watch.interval": self.watch_interval,
        }

    # ========================================================================
    # Layer Loaders
    # ========================================================================

    @classmethod
    def from_file(cls, path: str | Path | None = None) -> "ConfigOpts":
        """Load the file layer.

        A missing default config file is an empty layer; a missing explicit
        one is an error.
        """
        if path is None:
            config_path = default_config_path()
            if not config_path.is_file():
                logger.debug(f"No config file at {config_path}, skipping file layer")
                return cls()
        else:
            config_path = Path(path).expanduser()
            if not config_path.is_file():
                raise ConfigNotFound(f"config file was not found at {config_path}")

        logger.debug(f"Reading config from {config_path}")
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigParseError(f"error reading config file {config_path} as TOML: {e}") from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigParseError(f"invalid config file {config_path}: {e}") from e

    @classmethod
    def from_env(cls) -> "ConfigOpts":
        """Load the environment layer from ``CDDNS_*`` variables."""
        try:
            verify = _VerifyEnv()
            filters = _ListEnv()
            inventory = _InventoryEnv()
        except (ValidationError, SettingsError) as e:
            raise ConfigParseError(f"invalid environment configuration: {e}") from e

        commit = _partial(CommitOpts, force=inventory.commit_force)
        watch = _partial(WatchOpts, interval=inventory.watch_interval)
        return cls(
            verify=_partial(VerifyOpts, **verify.model_dump()),
            filters=_partial(ListOpts, **filters.model_dump()),
            inventory=_partial(InventoryOpts, path=inventory.path, commit=commit, watch=watch),
        )

    def to_toml(self) -> str:
        """Serialize the set fields as a TOML config file."""
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return tomli_w.dumps(_prune(data))

    async def save(self, path: str | Path) -> Path:
        """Write the layer as TOML. A path without suffix gets ``.toml``."""
        target = Path(path).expanduser()
        if not target.suffix:
            target = target.with_suffix(".toml")
        target.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(target, "w", encoding="utf-8") as f:
            await f.write(self.to_toml())

        logger.debug(f"Saved config to {target}")
        return target

    @classmethod
    def full(cls, path: str | Path | None = None, cli: "ConfigOpts | None" = None) -> "ConfigOpts":
        """Resolve file, environment and command line layers."""
        return resolve(cls.from_file(path), cls.from_env(), cli or cls())


# ============================================================================
# Environment Layer
# ============================================================================


class _VerifyEnv(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CDDNS_VERIFY_", extra="ignore")

    token: str | None = None


class _ListEnv(BaseSettings):
    # List values are JSON arrays, e.g. CDDNS_LIST_IGNORE_ZONES='["example.com"]'
    model_config = SettingsConfigDict(env_prefix="CDDNS_LIST_", extra="ignore")

    include_zones: list[str] | None = None
    ignore_zones: list[str] | None = None
    include_records: list[str] | None = None
    ignore_records: list[str] | None = None


class _InventoryEnv(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CDDNS_INVENTORY_", extra="ignore")

    path: Path | None = None
    commit_force: bool | None = None
    watch_interval: int | None = Field(default=None, ge=0)


def _prune(data: dict[str, Any]) -> dict[str, Any]:
    """Drop tables left empty once unset fields are removed."""
    pruned = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = _prune(value)
            if not value:
                continue
        pruned[key] = value
    return pruned


def _partial(model: type[T], **values: Any) -> T | None:
    """Build a sub-config from the set values, or None if nothing is set."""
    present = {k: v for k, v in values.items() if v is not None}
    return model(**present) if present else None


# ============================================================================
# Merging
# ============================================================================


def merge(base: T | None, override: T | None) -> T | None:
    """Merge two layers; set fields in ``override`` win.

    Sub-configurations present in both layers merge field by field. Anything
    else, lists included, is replaced whole.
    """
    if override is None:
        return base
    if base is None or not isinstance(base, BaseModel):
        return override

    values = {
        name: merge(getattr(base, name), getattr(override, name))
        for name in type(base).model_fields
    }
    return base.model_copy(update=values)


def resolve(*layers: ConfigOpts) -> ConfigOpts:
    """Fold layers in precedence order, lowest first."""
    return reduce(merge, layers, ConfigOpts())
