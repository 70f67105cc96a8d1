"""Context managers for structured logging."""

import uuid
from typing import Dict, Optional

from jamfpro.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(resource="computers", operation="create"):
            # All logs in this block carry resource and operation
            await do_work()

    Each entry gets a fresh request_id unless one is already set, so the
    mutation and every reconciliation poll it triggers share one id.
    """

    def __init__(
        self,
        resource: Optional[str] = None,
        operation: Optional[str] = None,
        resource_id: Optional[object] = None,
    ):
        self.new_context = {
            "resource": resource,
            "operation": operation,
            "resource_id": str(resource_id) if resource_id is not None else None,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        if not self.old_context.get("request_id"):
            set_log_context(request_id=uuid.uuid4().hex[:12])
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        set_log_context(
            resource=self.old_context.get("resource", ""),
            operation=self.old_context.get("operation", ""),
            resource_id=self.old_context.get("resource_id", ""),
            request_id=self.old_context.get("request_id", ""),
        )
        return False
