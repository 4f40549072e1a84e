"""
Database helper functions shared by the stores.
"""

from __future__ import annotations

import uuid
from typing import Optional


def to_uuid(value: str | uuid.UUID) -> uuid.UUID:
    """Coerce ``value`` to a UUID; raises ``ValueError`` when it is not one."""
    return uuid.UUID(value) if isinstance(value, str) else value


def parse_uuid(value: str | uuid.UUID) -> Optional[uuid.UUID]:
    """Like ``to_uuid`` but returns ``None`` for malformed ids."""
    try:
        return to_uuid(value)
    except (ValueError, AttributeError, TypeError):
        return None
