"""Reconciliation of the inventory against live DNS records."""

from cddns.core.reconcile.engine import CheckReport, ReconcileEngine
from cddns.core.reconcile.snapshot import check_inventory, take_snapshot

__all__ = ["CheckReport", "ReconcileEngine", "check_inventory", "take_snapshot"]
