"""Token verification command."""

from rich.console import Console

from cddns.cli.commands import resolve_opts
from cddns.core.cloudflare import CloudflareClient
from cddns.core.config import ConfigOpts, VerifyOpts

console = Console()


async def verify(token: str | None, options):
    """Verify the effective API token against Cloudflare."""
    opts = resolve_opts(options, ConfigOpts(verify=VerifyOpts(token=token)))
    client = CloudflareClient(opts.require_token())

    async with client:
        valid = await client.verify_token()

    if valid:
        console.print("[green]✓ Your token is valid[/]")
    else:
        console.print("[red]✗ Your token is not active[/]")
