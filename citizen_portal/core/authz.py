# citizen_portal/core/authz.py
"""
Ownership and role decisions shared by the REST routes and the named
procedures.

Every check is a pure function of the resolved Identity and the resource
document; nothing here touches storage. ``enforce`` turns a denial into the
matching PortalError.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from pydantic import BaseModel

from citizen_portal.core.enums import DenyReason
from citizen_portal.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    PortalError,
    ValidationError,
)
from citizen_portal.models.common import oid_str


class OfficialRef(BaseModel):
    id: str
    category_id: str
    category_name: Optional[str] = None
    title: str


class Identity(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False
    official: Optional[OfficialRef] = None

    @property
    def is_official(self) -> bool:
        return self.official is not None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: DenyReason, message: str) -> Decision:
    return Decision(False, reason, message)


_ERRORS = {
    DenyReason.not_authenticated: AuthenticationError,
    DenyReason.not_owner: AuthorizationError,
    DenyReason.not_admin: AuthorizationError,
    DenyReason.not_official: AuthorizationError,
    DenyReason.invalid_status: ValidationError,
    DenyReason.already_official: ConflictError,
}


def error_for(decision: Decision) -> PortalError:
    cls = _ERRORS.get(decision.reason, AuthorizationError)
    return cls(decision.message, code=decision.reason.value if decision.reason else None)


def enforce(decision: Decision) -> None:
    if not decision.allowed:
        raise error_for(decision)


# -------------------------
# Complaints
# -------------------------
def _submitter(complaint: dict) -> Optional[str]:
    return oid_str(complaint.get("citizen_id") or complaint.get("submitter_id"))


def is_submitter(identity: Optional[Identity], complaint: dict) -> bool:
    return identity is not None and _submitter(complaint) == identity.id


def can_modify_complaint(identity: Optional[Identity], complaint: dict, action: str = "update") -> Decision:
    if identity is None:
        return deny(DenyReason.not_authenticated, "Not authenticated")
    if not is_submitter(identity, complaint):
        return deny(DenyReason.not_owner, f"Unauthorized - You can only {action} your own complaints")
    return ALLOW


def can_update_status(
    identity: Optional[Identity],
    complaint: dict,
    new_status: Optional[str],
    allowed: Iterable[str],
) -> Decision:
    if new_status not in set(allowed):
        return deny(DenyReason.invalid_status, "Invalid status value")
    if identity is None:
        return deny(DenyReason.not_authenticated, "Not authenticated")
    if is_submitter(identity, complaint):
        return ALLOW

    # officials may move complaints of their own category
    official = identity.official
    category = (complaint.get("category") or "").strip().lower()
    if official and official.category_name and official.category_name.strip().lower() == category:
        return ALLOW

    return deny(DenyReason.not_owner, "Unauthorized - You can only update the status of your own complaints")


# -------------------------
# Roles
# -------------------------
def require_identity(identity: Optional[Identity]) -> Decision:
    if identity is None:
        return deny(DenyReason.not_authenticated, "Not authenticated")
    return ALLOW


def require_admin(identity: Optional[Identity]) -> Decision:
    if identity is None:
        return deny(DenyReason.not_authenticated, "Not authenticated")
    if not identity.is_admin:
        return deny(DenyReason.not_admin, "Not authorized")
    return ALLOW


def require_official(identity: Optional[Identity]) -> Decision:
    if identity is None:
        return deny(DenyReason.not_authenticated, "Not authenticated")
    if not identity.is_official:
        return deny(DenyReason.not_official, "Only officials can do this")
    return ALLOW


def can_appoint_official(identity: Optional[Identity], existing_official: Optional[dict]) -> Decision:
    decision = require_admin(identity)
    if not decision:
        return decision
    if existing_official:
        return deny(DenyReason.already_official, "User is already an official")
    return ALLOW


def responder_name(identity: Optional[Identity]) -> str:
    name = identity.name if identity else None
    if identity is not None and identity.official is not None:
        return f"{identity.official.title} - {name or 'Official'}"
    return name or "Anonymous"
