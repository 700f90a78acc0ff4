"""cddns - Cloudflare dynamic DNS inventory toolkit."""

__version__ = "0.1.0"
