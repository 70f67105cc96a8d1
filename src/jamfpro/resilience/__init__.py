"""
Resilience patterns module.

Components:
    - ReconcileConfig: Backoff schedule and attempt budgets
    - reconcile_after_mutation: Poll until a create/update is observed
    - reconcile_after_delete: Poll until a delete reads as not found
"""

from .reconcile import (
    DEFAULT_RECONCILE_CONFIG,
    ReconcileConfig,
    reconcile_after_delete,
    reconcile_after_mutation,
)

__all__ = [
    "ReconcileConfig",
    "DEFAULT_RECONCILE_CONFIG",
    "reconcile_after_mutation",
    "reconcile_after_delete",
]
