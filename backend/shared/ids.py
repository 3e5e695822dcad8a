"""Opaque identifier generation."""

import uuid


def new_id() -> str:
    """Return a new globally unique opaque identifier."""
    return uuid.uuid4().hex
