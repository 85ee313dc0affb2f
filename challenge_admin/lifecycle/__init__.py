from challenge_admin.lifecycle.controller import LifecycleController
from challenge_admin.lifecycle.reconcile import reconcile_audit_log
from challenge_admin.lifecycle.validation import compute_auto_checks

__all__ = ["LifecycleController", "compute_auto_checks", "reconcile_audit_log"]
