"""Retention pass ID management for log correlation.

Every retention pass gets a short ID stored in a context variable, so all log
lines emitted while the pass runs (including adapter logs) can be grouped.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

# Context variable for pass_id (async-safe)
pass_id_var: ContextVar[Optional[str]] = ContextVar("pass_id", default=None)


def generate_pass_id() -> str:
    """Generate a new retention pass ID.

    Returns:
        str: First 12 hex chars of a UUID4
    """
    return uuid.uuid4().hex[:12]


def get_pass_id() -> str:
    """Get current pass ID from context.

    Returns:
        str: Current pass ID or "no-pass" outside a retention pass
    """
    return pass_id_var.get() or "no-pass"


def set_pass_id(pass_id: Optional[str]):
    """Set pass ID in current context.

    Returns:
        Token usable with pass_id_var.reset()
    """
    return pass_id_var.set(pass_id)
