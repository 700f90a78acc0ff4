"""CLI command implementations."""

from cddns.core.config import ConfigOpts


def resolve_opts(options, cli: ConfigOpts | None = None) -> ConfigOpts:
    """Effective configuration: config file < environment < command line."""
    config_path = options.config if options else None
    if cli is None:
        cli = ConfigOpts(inventory=getattr(options, "inventory", None))
    return ConfigOpts.full(config_path, cli)
