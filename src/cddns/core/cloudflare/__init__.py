"""Cloudflare API collaborator."""

from cddns.core.cloudflare.client import API_BASE, CloudflareClient

__all__ = ["API_BASE", "CloudflareClient"]
