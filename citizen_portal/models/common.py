# citizen_portal/models/common.py
from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId


def oid_str(x) -> str | None:
    if x is None:
        return None
    return str(x)


def parse_oid(x) -> ObjectId | None:
    """ObjectId from a hex string; None when missing or not a valid id."""
    if isinstance(x, ObjectId):
        return x
    if not x or not isinstance(x, str):
        return None
    x = x.strip()
    if not ObjectId.is_valid(x):
        return None
    return ObjectId(x)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
