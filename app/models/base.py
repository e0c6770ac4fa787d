"""
Shared helpers for table models and schemas.
"""

from uuid import uuid4


def new_id() -> str:
    """Generate an opaque record id."""
    return uuid4().hex


def normalize_email(value: str) -> str:
    """Canonical form for stored and compared emails."""
    return value.strip().lower()
