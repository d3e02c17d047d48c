from __future__ import annotations

import logging

from citizen_portal.core import authz
from citizen_portal.core.authz import Identity
from citizen_portal.core.enums import ComplaintStatus
from citizen_portal.core.errors import NotFoundError, ValidationError
from citizen_portal.db.mongo import CITIZENS, COMPLAINTS
from citizen_portal.mapper.complaints_mapper import to_complaint_out
from citizen_portal.models.common import parse_oid, utcnow
from citizen_portal.repositories.citizen_repository import CitizenRepository
from citizen_portal.repositories.complaint_repository import ComplaintRepository
from citizen_portal.services import uploads_service

logger = logging.getLogger(__name__)

ALLOWED_STATUSES = [s.value for s in ComplaintStatus]
CONTENT_FIELDS = ("title", "description", "category", "address")
# fields a complaint cannot lose; an explicit null for them is ignored
REQUIRED_FIELDS = ("title", "description", "category")


async def _with_citizens(db, docs: list) -> list:
    citizens = await CitizenRepository(db[CITIZENS]).get_by_ids(
        {str(d.get("citizen_id")) for d in docs if d.get("citizen_id")}
    )
    return [to_complaint_out(d, citizens.get(str(d.get("citizen_id")))) for d in docs]


async def _get_or_404(repo: ComplaintRepository, complaint_id: str) -> dict:
    doc = await repo.get(complaint_id)
    if not doc:
        raise NotFoundError("Complaint not found")
    return doc


# -------------------------
# Public reads
# -------------------------
async def list_complaints(db, category: str | None = None) -> list:
    repo = ComplaintRepository(db[COMPLAINTS])
    docs = await repo.list_by_category(category) if category is not None else await repo.list()
    return await _with_citizens(db, docs)


async def get_complaint(db, complaint_id: str) -> dict:
    doc = await _get_or_404(ComplaintRepository(db[COMPLAINTS]), complaint_id)
    return (await _with_citizens(db, [doc]))[0]


# -------------------------
# Authenticated writes
# -------------------------
async def create_complaint(db, identity: Identity, body) -> dict:
    await uploads_service.require_attachment(db, body.attachment_id)

    now = utcnow()
    doc = {
        "title": body.title,
        "description": body.description,
        "category": body.category,
        "address": body.address,
        "status": ComplaintStatus.submitted.value,
        "citizen_id": parse_oid(identity.id),
        "attachment_id": body.attachment_id,
        "created_at": now,
        "updated_at": now,
    }
    doc = await ComplaintRepository(db[COMPLAINTS]).insert(doc)
    logger.info("Complaint %s created by %s", doc["_id"], identity.id)
    return (await _with_citizens(db, [doc]))[0]


async def update_complaint(db, identity: Identity, complaint_id: str, body):
    """Returns (before, after) documents."""
    repo = ComplaintRepository(db[COMPLAINTS])
    doc = await _get_or_404(repo, complaint_id)

    authz.enforce(authz.can_modify_complaint(identity, doc, "update"))

    update_doc = {
        k: v
        for k, v in body.model_dump(exclude_unset=True).items()
        if k in CONTENT_FIELDS and not (v is None and k in REQUIRED_FIELDS)
    }
    if not update_doc:
        raise ValidationError("No fields to update")

    update_doc["updated_at"] = utcnow()
    updated = await repo.update(complaint_id, update_doc)
    return doc, to_complaint_out(updated)


async def delete_complaint(db, identity: Identity, complaint_id: str) -> dict:
    repo = ComplaintRepository(db[COMPLAINTS])
    doc = await _get_or_404(repo, complaint_id)

    authz.enforce(authz.can_modify_complaint(identity, doc, "delete"))

    if not await repo.delete(complaint_id):
        raise NotFoundError("Complaint not found")
    return doc


async def update_status(db, identity: Identity, complaint_id: str, new_status: str | None):
    """Returns (previous status, updated complaint)."""
    if not new_status:
        raise ValidationError("Status is required")
    if new_status not in ALLOWED_STATUSES:
        raise ValidationError("Invalid status value", code="InvalidStatus")

    repo = ComplaintRepository(db[COMPLAINTS])
    doc = await _get_or_404(repo, complaint_id)

    authz.enforce(authz.can_update_status(identity, doc, new_status, ALLOWED_STATUSES))

    updated = await repo.update(complaint_id, {"status": new_status, "updated_at": utcnow()})
    return doc.get("status"), to_complaint_out(updated)
