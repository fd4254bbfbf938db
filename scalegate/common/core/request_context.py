"""
RequestContext management.
Use ContextVar to share the call id of the current request across async execution.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

CALL_ID_HEADER = "X-Call-Id"

_call_id_var: ContextVar[Optional[str]] = ContextVar("call_id", default=None)


def get_call_id() -> Optional[str]:
    """Get the current call id."""
    return _call_id_var.get()


def set_call_id(call_id: str) -> str:
    """
    Set the call id for the current context.

    Args:
        call_id: value of an incoming X-Call-Id header

    Returns:
        The call id that was set

    Raises:
        ValueError: when the value is blank
    """
    call_id = call_id.strip()
    if not call_id:
        raise ValueError("call id must not be blank")
    _call_id_var.set(call_id)
    return call_id


def generate_call_id() -> str:
    """Generate and set a new call id (UUID4) for the current context."""
    new_id = str(uuid.uuid4())
    _call_id_var.set(new_id)
    return new_id


def clear_call_id() -> None:
    """Clear the call id context."""
    _call_id_var.set(None)
