"""Context variables for structured logging."""

from contextvars import ContextVar
from typing import Dict, Optional

_resource: ContextVar[str] = ContextVar("resource", default="")
_operation: ContextVar[str] = ContextVar("operation", default="")
_resource_id: ContextVar[str] = ContextVar("resource_id", default="")
_request_id: ContextVar[str] = ContextVar("request_id", default="")


def set_log_context(
    resource: Optional[str] = None,
    operation: Optional[str] = None,
    resource_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> None:
    if resource is not None:
        _resource.set(resource)
    if operation is not None:
        _operation.set(operation)
    if resource_id is not None:
        _resource_id.set(resource_id)
    if request_id is not None:
        _request_id.set(request_id)


def get_log_context() -> Dict[str, str]:
    return {
        "resource": _resource.get(),
        "operation": _operation.get(),
        "resource_id": _resource_id.get(),
        "request_id": _request_id.get(),
    }


def clear_log_context() -> None:
    _resource.set("")
    _operation.set("")
    _resource_id.set("")
    _request_id.set("")
