"""Command line interface for cddns."""
